from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Sequence
from urllib.parse import urlparse

from ..access.context import CallerContext, require_caller, require_role
from ..common.datetime_utils import end_of_day, now_local, parse_iso_date, start_of_day
from ..common.validators import FieldErrors, require_non_empty
from ..core.constants import RECENT_CLICKS_LIMIT
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..schools.repository import SchoolRepository
from .model import ClickQuery, ClickStats, MeetingLink
from .repository import MeetingLinkRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickStatsFilters:
    school_id: Optional[int] = None
    email: Optional[str] = None
    meeting_link_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


def _require_url(value: Any, field_name: str) -> str:
    text = str(value or "").strip()
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Invalid URL", {field_name: "must be a valid http(s) URL"})
    return text


def _optional_date(value: Any, field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError("Invalid date", {field_name: "must be YYYY-MM-DD"})


def _link_fields(payload: Mapping[str, Any], *, partial: bool) -> Dict[str, Any]:
    """Validate a create/update payload into storable columns.

    On update (``partial``) only the keys present in the payload are returned;
    empty title/url are ignored rather than cleared.
    """

    errors = FieldErrors()
    fields: Dict[str, Any] = {}

    if not partial or payload.get("title"):
        title = errors.check(require_non_empty, str(payload.get("title") or ""), "title")
        if title is not None:
            fields["title"] = title
    if not partial or payload.get("url"):
        url = errors.check(_require_url, payload.get("url"), "url")
        if url is not None:
            fields["url"] = url

    if "description" in payload:
        fields["description"] = payload.get("description") or None
    if "is_active" in payload:
        if not isinstance(payload["is_active"], bool):
            errors.add("is_active", "must be true or false")
        else:
            fields["is_active"] = payload["is_active"]
    elif not partial:
        fields["is_active"] = True
    if "scheduled_date" in payload:
        scheduled = errors.check(_optional_date, payload.get("scheduled_date"), "scheduled_date")
        if not errors.has("scheduled_date"):
            fields["scheduled_date"] = scheduled
    if "scheduled_time" in payload:
        fields["scheduled_time"] = payload.get("scheduled_time") or None

    errors.raise_if_any()
    return fields


class MeetingLinkService:
    """Admin-managed meeting links and click tracking."""

    def __init__(self, links: MeetingLinkRepository, schools: SchoolRepository):
        self._links = links
        self._schools = schools

    def create(
        self,
        *,
        caller: Optional[CallerContext],
        payload: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> MeetingLink:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can create meeting links")
        fields = _link_fields(payload, partial=False)
        link = self._links.create(fields=fields, created_by=caller.caller_id, now=now or now_local())
        logger.info("Meeting link %s created by admin %s", link.link_id, caller.caller_id)
        return link

    def update(
        self,
        *,
        caller: Optional[CallerContext],
        link_id: int,
        payload: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> None:
        require_role(caller, {Role.ADMIN}, "Only admins can update meeting links")
        fields = _link_fields(payload, partial=True)
        if not self._links.update(link_id=int(link_id), fields=fields, now=now or now_local()):
            raise NotFoundError("Meeting link not found")

    def delete(self, *, caller: Optional[CallerContext], link_id: int) -> None:
        require_role(caller, {Role.ADMIN}, "Only admins can delete meeting links")
        if not self._links.delete(link_id=int(link_id)):
            raise NotFoundError("Meeting link not found")

    def list_active(self, *, caller: Optional[CallerContext]) -> Sequence[MeetingLink]:
        require_caller(caller)
        return self._links.list_links(active_only=True)

    def record_click(
        self,
        *,
        caller: Optional[CallerContext],
        meeting_link_id: Any,
        now: Optional[datetime] = None,
    ) -> int:
        caller = require_caller(caller)
        if meeting_link_id in (None, ""):
            raise ValidationError("Meeting link ID is required", {"meeting_link_id": "is required"})
        try:
            link_id = int(meeting_link_id)
        except (TypeError, ValueError):
            raise ValidationError("Meeting link ID is invalid", {"meeting_link_id": "must be an integer"})

        if not self._links.get(link_id=link_id):
            raise NotFoundError("Meeting link not found")

        school_name = None
        if caller.school_id is not None:
            school = self._schools.get_by_id(caller.school_id)
            school_name = school.name if school else None

        return self._links.record_click(
            link_id=link_id,
            user_id=caller.caller_id,
            user_name=caller.name or "Unknown",
            user_email=caller.email,
            school_name=school_name,
            clicked_at=now or now_local(),
        )

    def stats(
        self,
        *,
        caller: Optional[CallerContext],
        filters: ClickStatsFilters = ClickStatsFilters(),
    ) -> ClickStats:
        require_role(caller, {Role.ADMIN}, "Only admins can view stats")

        school_name = None
        if filters.school_id is not None:
            school = self._schools.get_by_id(filters.school_id)
            school_name = school.name if school else None

        clicks = list(
            self._links.find_clicks(
                ClickQuery(
                    meeting_link_id=filters.meeting_link_id,
                    school_name_contains=school_name,
                    email_contains=filters.email or None,
                    start=start_of_day(filters.start_date) if filters.start_date else None,
                    end=end_of_day(filters.end_date) if filters.end_date else None,
                )
            )
        )
        return ClickStats(
            meeting_links=list(self._links.list_links(active_only=False)),
            recent_clicks=clicks[:RECENT_CLICKS_LIMIT],
            total_clicks=len(clicks),
            filtered_clicks=clicks,
        )
