from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class MeetingLink:
    link_id: int
    title: str
    url: str
    description: Optional[str]
    created_by: int
    is_active: bool
    click_count: int
    scheduled_date: Optional[date]
    scheduled_time: Optional[str]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.link_id,
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "created_by": self.created_by,
            "is_active": self.is_active,
            "click_count": self.click_count,
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "scheduled_time": self.scheduled_time,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class MeetingLinkClick:
    click_id: int
    meeting_link_id: int
    user_id: int
    user_name: str
    user_email: str
    school_name: Optional[str]
    clicked_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.click_id,
            "meeting_link_id": self.meeting_link_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_email": self.user_email,
            "school_name": self.school_name,
            "clicked_at": self.clicked_at.isoformat(),
        }


@dataclass(frozen=True)
class ClickQuery:
    meeting_link_id: Optional[int] = None
    school_name_contains: Optional[str] = None
    email_contains: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class ClickStats:
    meeting_links: List[MeetingLink]
    recent_clicks: List[MeetingLinkClick]
    total_clicks: int
    filtered_clicks: List[MeetingLinkClick]

    def to_dict(self) -> dict:
        return {
            "meeting_links": [link.to_dict() for link in self.meeting_links],
            "recent_clicks": [c.to_dict() for c in self.recent_clicks],
            "total_clicks": self.total_clicks,
            "filtered_clicks": [c.to_dict() for c in self.filtered_clicks],
        }
