from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import ClickQuery, MeetingLink, MeetingLinkClick


class MeetingLinkRepository(Protocol):
    def create(self, *, fields: Mapping[str, Any], created_by: int, now: datetime) -> MeetingLink:
        raise NotImplementedError

    def get(self, *, link_id: int) -> Optional[MeetingLink]:
        raise NotImplementedError

    def update(self, *, link_id: int, fields: Mapping[str, Any], now: datetime) -> bool:
        """Set the given columns; False when the link does not exist."""

        raise NotImplementedError

    def delete(self, *, link_id: int) -> bool:
        raise NotImplementedError

    def list_links(self, *, active_only: bool) -> Sequence[MeetingLink]:
        """Scheduled links first (soonest first), then newest."""

        raise NotImplementedError

    def record_click(
        self,
        *,
        link_id: int,
        user_id: int,
        user_name: str,
        user_email: str,
        school_name: Optional[str],
        clicked_at: datetime,
    ) -> int:
        """Store the click and bump the link's counter."""

        raise NotImplementedError

    def find_clicks(self, query: ClickQuery) -> Sequence[MeetingLinkClick]:
        """Matching clicks, newest first."""

        raise NotImplementedError
