from __future__ import annotations

from ..core.enums import RequestStatus
from ..core.exceptions import BusinessRuleViolation
from .model import LateUploadRequest, NewLateUploadRequest
from .repository import LateUploadRequestRepository


class OpenRequestGuard:
    """Single entry point for inserting late-upload requests.

    Allows at most one PENDING request per (trainer, month, year) and none once
    one is APPROVED. REJECTED requests do not count.

    Note: this is a read-then-write check without a lock or unique index, so two
    concurrent submissions can both get through. Any stronger guard (unique
    index, transaction) belongs here so callers stay unchanged.
    """

    def __init__(self, requests: LateUploadRequestRepository):
        self._requests = requests

    def insert_unless_open(self, new: NewLateUploadRequest) -> LateUploadRequest:
        existing = self._requests.find_for_key(trainer_id=new.trainer_id, month=new.month, year=new.year)
        statuses = {r.status for r in existing}

        if RequestStatus.PENDING in statuses:
            raise BusinessRuleViolation(
                "You already have a pending approval request for this month.",
                "ALREADY_PENDING",
            )
        if RequestStatus.APPROVED in statuses:
            raise BusinessRuleViolation(
                "Your approval request for this month is already approved. You can upload the sheet now.",
                "ALREADY_APPROVED",
            )

        return self._requests.insert(new)
