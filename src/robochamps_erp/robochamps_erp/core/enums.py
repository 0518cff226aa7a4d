from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    TRAINER_ROBOCHAMPS = "TRAINER_ROBOCHAMPS"
    TRAINER_SCHOOL = "TRAINER_SCHOOL"

    @property
    def is_trainer(self) -> bool:
        return self in TRAINER_ROLES


TRAINER_ROLES = frozenset({Role.TRAINER_ROBOCHAMPS, Role.TRAINER_SCHOOL})


class RequestStatus(str, Enum):
    """Late-upload approval workflow states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReportType(str, Enum):
    TEACHER_TRAINING = "TEACHER_TRAINING"
    TRAINER_CLASS = "TRAINER_CLASS"
