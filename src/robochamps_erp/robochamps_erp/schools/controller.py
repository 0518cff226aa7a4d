from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_view, caller_from_session, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schools", methods=["GET"], endpoint="list_schools")
    @api_view("fetch schools")
    def list_schools():
        schools = container.school_service.list_schools(caller=caller_from_session())
        return jsonify({"schools": [s.to_dict() for s in schools]})

    @app.route("/api/schools", methods=["POST"], endpoint="create_school")
    @api_view("create school")
    def create_school():
        caller = caller_from_session()
        school = container.school_service.create(caller=caller, payload=json_body() if caller else {})
        return jsonify({"success": True, "school": school.to_dict()}), 201

    @app.route("/api/schools/<int:school_id>", methods=["PUT"], endpoint="update_school")
    @api_view("update school")
    def update_school(school_id: int):
        caller = caller_from_session()
        school = container.school_service.update(
            caller=caller,
            school_id=school_id,
            payload=json_body() if caller else {},
        )
        return jsonify({"success": True, "school": school.to_dict()})

    @app.route("/api/schools/<int:school_id>", methods=["DELETE"], endpoint="delete_school")
    @api_view("delete school")
    def delete_school(school_id: int):
        container.school_service.delete(caller=caller_from_session(), school_id=school_id)
        return jsonify({"success": True, "message": "School deleted successfully"})

    # Public: the signup page resolves a school code before an account exists.
    @app.route("/api/schools/by-code", methods=["GET"], endpoint="school_by_code")
    @api_view("fetch school")
    def school_by_code():
        school = container.school_service.get_by_code(request.args.get("code"))
        return jsonify({"school": school.to_dict()})
