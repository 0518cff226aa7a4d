from __future__ import annotations

from flask import Flask, jsonify

from ..access.filters import SheetFilters
from ..common.http import api_view, arg_int, arg_str, caller_from_session, form_file, form_value
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/uploaded-sheets", methods=["POST"], endpoint="upload_sheet")
    @api_view("upload sheet")
    def upload_sheet():
        sheet = container.sheet_service.upload(
            caller=caller_from_session(),
            month=form_value("month"),
            year=form_value("year"),
            upload=form_file("file"),
        )
        return jsonify({"success": True, "sheet": sheet.to_dict()}), 201

    @app.route("/api/uploaded-sheets", methods=["GET"], endpoint="list_sheets")
    @api_view("fetch uploaded sheets")
    def list_sheets():
        sheets = container.sheet_service.list_sheets(
            caller=caller_from_session(),
            filters=SheetFilters(
                trainer_id=arg_int("trainerId"),
                school_id=arg_int("schoolId"),
                month=arg_str("month"),
                year=arg_int("year"),
            ),
        )
        return jsonify({"sheets": [sheet.to_dict() for sheet in sheets]})
