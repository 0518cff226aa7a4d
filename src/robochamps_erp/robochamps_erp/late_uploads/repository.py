from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LateRequestQuery, LateUploadRequest, NewLateUploadRequest


class LateUploadRequestRepository(Protocol):
    def insert(self, new: NewLateUploadRequest) -> LateUploadRequest:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LateUploadRequest]:
        raise NotImplementedError

    def find_for_key(self, *, trainer_id: int, month: str, year: int) -> Sequence[LateUploadRequest]:
        """All requests ever made for (trainer, month, year), any status."""

        raise NotImplementedError

    def find(self, query: LateRequestQuery) -> Sequence[LateUploadRequest]:
        """Matching requests, newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_at: datetime,
        admin_id: int,
        admin_name: str,
    ) -> bool:
        """Apply a decision only if the request is still PENDING."""

        raise NotImplementedError
