from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class School:
    school_id: int
    name: str
    location_text: str = ""
    school_code: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.school_id,
            "name": self.name,
            "location_text": self.location_text,
            "school_code": self.school_code,
        }
