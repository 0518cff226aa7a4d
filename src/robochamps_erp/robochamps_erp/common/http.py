from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, request, session

from ..access.context import CallerContext
from ..access.filters import RecordFilters
from ..core.enums import ReportType, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..storage.blob import FileUpload
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def caller_from_session() -> Optional[CallerContext]:
    """Build the caller context from the Flask session (None if not logged in)."""

    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role"))
    except ValueError:
        return None
    school_id = session.get("school_id")
    return CallerContext(
        caller_id=int(session["user_id"]),
        role=role,
        school_id=int(school_id) if school_id is not None else None,
        name=session.get("name") or "",
        email=session.get("email") or "",
    )


def error_response(exc: DomainError, action: str):
    body: Dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, AuthenticationError):
        return jsonify(body), 401
    if isinstance(exc, AuthorizationError):
        return jsonify(body), 403
    if isinstance(exc, NotFoundError):
        return jsonify(body), 404
    if isinstance(exc, BusinessRuleViolation):
        body["code"] = exc.code
        return jsonify(body), 400
    if isinstance(exc, ValidationError):
        if exc.field_errors:
            body["details"] = exc.field_errors
        return jsonify(body), 400
    if isinstance(exc, DependencyError):
        logger.error("Failed to %s: %s", action, exc, exc_info=exc)
        return jsonify({"error": f"Failed to {action}"}), 500
    return jsonify(body), 400


def api_view(action: str):
    """Wrap a JSON view: domain errors become 4xx bodies, anything else an opaque 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e, action)
            except Exception:
                logger.exception("Failed to %s", action)
                return jsonify({"error": f"Failed to {action}"}), 500

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def arg_str(name: str) -> Optional[str]:
    value = (request.args.get(name) or "").strip()
    return value or None


def arg_int(name: str) -> Optional[int]:
    value = arg_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", {name: "must be an integer"})


def arg_date(name: str) -> Optional[date]:
    value = arg_str(name)
    if value is None:
        return None
    try:
        return parse_iso_date(value[:10])
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD", {name: "must be YYYY-MM-DD"})


def form_file(name: str) -> Optional[FileUpload]:
    """Read a multipart file part into memory (None when absent or empty)."""

    storage = request.files.get(name)
    if storage is None or not storage.filename:
        return None
    return FileUpload(
        file_name=storage.filename,
        content_type=storage.mimetype or "application/octet-stream",
        data=storage.read(),
    )


def form_value(name: str) -> Optional[str]:
    value = (request.form.get(name) or "").strip()
    return value or None


def record_filters_from_args() -> RecordFilters:
    """Query-string filters shared by attendance, report and combined listings."""

    report_type = arg_str("type")
    try:
        parsed_type = ReportType(report_type) if report_type else None
    except ValueError:
        raise ValidationError("Unknown report type", {"type": "must be TEACHER_TRAINING or TRAINER_CLASS"})
    return RecordFilters(
        start_date=arg_date("startDate"),
        end_date=arg_date("endDate"),
        school_id=arg_int("schoolId"),
        trainer_id=arg_int("trainerId"),
        trainer_name=arg_str("trainerName"),
        trainer_email=arg_str("trainerEmail"),
        report_type=parsed_type,
    )
