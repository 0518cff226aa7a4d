from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class UploadedCombinedSheet:
    sheet_id: int
    trainer_id: int
    trainer_name: str
    trainer_email: str
    school_id: int
    school_name: str
    month: str
    year: int
    file_url: str
    file_name: str
    file_size: int
    uploaded_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.sheet_id,
            "trainer_id": self.trainer_id,
            "trainer_name": self.trainer_name,
            "trainer_email": self.trainer_email,
            "school_id": self.school_id,
            "school_name": self.school_name,
            "month": self.month,
            "year": self.year,
            "file_url": self.file_url,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "uploaded_at": self.uploaded_at.isoformat(),
        }


@dataclass(frozen=True)
class NewSheet:
    trainer_id: int
    trainer_name: str
    trainer_email: str
    school_id: int
    school_name: str
    month: str
    year: int
    file_url: str
    file_name: str
    file_size: int
    uploaded_at: datetime


@dataclass(frozen=True)
class SheetQuery:
    trainer_id: Optional[int] = None
    school_id: Optional[int] = None
    month: Optional[str] = None
    year: Optional[int] = None
