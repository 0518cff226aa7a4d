from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_view, caller_from_session, form_file, form_value, record_filters_from_args
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @api_view("mark attendance")
    def mark_attendance():
        attendance_id = container.attendance_service.mark(
            caller=caller_from_session(),
            class_label=form_value("class_label"),
            photo=form_file("photo"),
            lat=form_value("lat"),
            lng=form_value("lng"),
            accuracy=form_value("accuracy"),
        )
        return jsonify({"success": True, "id": attendance_id}), 201

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @api_view("fetch attendance")
    def list_attendance():
        rows = container.attendance_service.list_records(
            caller=caller_from_session(),
            filters=record_filters_from_args(),
        )
        return jsonify({"records": [row.to_dict() for row in rows]})
