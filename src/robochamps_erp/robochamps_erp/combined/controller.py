from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_view, caller_from_session, record_filters_from_args
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/combined-records", methods=["GET"], endpoint="list_combined_records")
    @api_view("fetch combined records")
    def list_combined_records():
        records = container.combined_record_service.list_combined(
            caller=caller_from_session(),
            filters=record_filters_from_args(),
        )
        return jsonify({"records": [record.to_dict() for record in records]})
