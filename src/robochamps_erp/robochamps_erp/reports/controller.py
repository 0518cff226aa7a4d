from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_view, caller_from_session, json_body, record_filters_from_args
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports", methods=["POST"], endpoint="create_report")
    @api_view("create report")
    def create_report():
        caller = caller_from_session()
        report_id = container.report_service.create(caller=caller, payload=json_body() if caller else {})
        return jsonify({"success": True, "id": report_id}), 201

    @app.route("/api/reports", methods=["GET"], endpoint="list_reports")
    @api_view("fetch reports")
    def list_reports():
        rows = container.report_service.list_reports(
            caller=caller_from_session(),
            filters=record_filters_from_args(),
        )
        return jsonify({"reports": [row.to_dict() for row in rows]})
