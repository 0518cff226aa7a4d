from __future__ import annotations

from flask import Flask, jsonify

from ..access.filters import LateRequestFilters
from ..common.http import api_view, arg_str, caller_from_session, json_body
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/late-upload-requests", methods=["POST"], endpoint="create_late_upload_request")
    @api_view("create late upload request")
    def create_late_upload_request():
        caller = caller_from_session()
        body = json_body() if caller else {}
        created = container.late_upload_service.create_request(
            caller=caller,
            month=body.get("month"),
            year=body.get("year"),
            reason=body.get("reason"),
        )
        return jsonify({"success": True, "request": created.to_dict()}), 201

    @app.route("/api/late-upload-requests", methods=["GET"], endpoint="list_late_upload_requests")
    @api_view("fetch late upload requests")
    def list_late_upload_requests():
        status = arg_str("status")
        try:
            status_filter = RequestStatus(status) if status else None
        except ValueError:
            raise ValidationError("Unknown status", {"status": "must be PENDING, APPROVED or REJECTED"})

        requests = container.late_upload_service.list_requests(
            caller=caller_from_session(),
            filters=LateRequestFilters(
                status=status_filter,
                month=arg_str("month"),
                trainer_email=arg_str("trainerEmail"),
                school_name=arg_str("schoolName"),
            ),
        )
        return jsonify({"requests": [r.to_dict() for r in requests]})

    @app.route(
        "/api/late-upload-requests/<int:request_id>",
        methods=["PATCH"],
        endpoint="decide_late_upload_request",
    )
    @api_view("update late upload request")
    def decide_late_upload_request(request_id: int):
        caller = caller_from_session()
        body = json_body() if caller else {}
        decided = container.late_upload_service.decide(
            caller=caller,
            request_id=request_id,
            status=body.get("status"),
        )
        return jsonify({"success": True, "request": decided.to_dict()})
