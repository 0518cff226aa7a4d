from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LateUploadRequest:
    """A trainer's request to upload a month's sheet after the deadline.

    Trainer and school names are copied at creation time.
    """

    request_id: int
    trainer_id: int
    trainer_name: str
    trainer_email: str
    school_id: int
    school_name: str
    month: str
    year: int
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_at: Optional[datetime] = None
    decided_by_admin_id: Optional[int] = None
    decided_by_admin_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "trainer_id": self.trainer_id,
            "trainer_name": self.trainer_name,
            "trainer_email": self.trainer_email,
            "school_id": self.school_id,
            "school_name": self.school_name,
            "month": self.month,
            "year": self.year,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "decided_at": iso_or_none(self.decided_at),
            "decided_by_admin_id": self.decided_by_admin_id,
            "decided_by_admin_name": self.decided_by_admin_name,
        }


@dataclass(frozen=True)
class NewLateUploadRequest:
    trainer_id: int
    trainer_name: str
    trainer_email: str
    school_id: int
    school_name: str
    month: str
    year: int
    reason: str
    created_at: datetime


@dataclass(frozen=True)
class LateRequestQuery:
    trainer_id: Optional[int] = None
    status: Optional[RequestStatus] = None
    month: Optional[str] = None
    trainer_email_contains: Optional[str] = None
    school_name_contains: Optional[str] = None
