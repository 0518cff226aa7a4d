from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_view, arg_date, arg_int, arg_str, caller_from_session, json_body
from ..container import Container
from .service import ClickStatsFilters


def register(app: Flask, container: Container) -> None:
    @app.route("/api/meeting-links", methods=["POST"], endpoint="create_meeting_link")
    @api_view("create meeting link")
    def create_meeting_link():
        caller = caller_from_session()
        link = container.meeting_link_service.create(caller=caller, payload=json_body() if caller else {})
        return jsonify({"success": True, "meeting_link": link.to_dict()}), 201

    @app.route("/api/meeting-links", methods=["GET"], endpoint="list_meeting_links")
    @api_view("fetch meeting links")
    def list_meeting_links():
        links = container.meeting_link_service.list_active(caller=caller_from_session())
        return jsonify({"meeting_links": [link.to_dict() for link in links]})

    @app.route("/api/meeting-links/<int:link_id>", methods=["PUT"], endpoint="update_meeting_link")
    @api_view("update meeting link")
    def update_meeting_link(link_id: int):
        caller = caller_from_session()
        container.meeting_link_service.update(
            caller=caller,
            link_id=link_id,
            payload=json_body() if caller else {},
        )
        return jsonify({"success": True})

    @app.route("/api/meeting-links/<int:link_id>", methods=["DELETE"], endpoint="delete_meeting_link")
    @api_view("delete meeting link")
    def delete_meeting_link(link_id: int):
        container.meeting_link_service.delete(caller=caller_from_session(), link_id=link_id)
        return jsonify({"success": True})

    @app.route("/api/meeting-links/click", methods=["POST"], endpoint="track_meeting_link_click")
    @api_view("track click")
    def track_meeting_link_click():
        caller = caller_from_session()
        body = json_body() if caller else {}
        click_id = container.meeting_link_service.record_click(
            caller=caller,
            meeting_link_id=body.get("meeting_link_id"),
        )
        return jsonify({"success": True, "id": click_id})

    @app.route("/api/meeting-links/stats", methods=["GET"], endpoint="meeting_link_stats")
    @api_view("fetch stats")
    def meeting_link_stats():
        stats = container.meeting_link_service.stats(
            caller=caller_from_session(),
            filters=ClickStatsFilters(
                school_id=arg_int("schoolId"),
                email=arg_str("email"),
                meeting_link_id=arg_int("meetingLinkId"),
                start_date=arg_date("startDate"),
                end_date=arg_date("endDate"),
            ),
        )
        return jsonify(stats.to_dict())
