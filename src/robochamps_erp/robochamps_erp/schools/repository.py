from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import School


class SchoolRepository(Protocol):
    def get_by_id(self, school_id: int) -> Optional[School]:
        raise NotImplementedError

    def get_by_code(self, school_code: str) -> Optional[School]:
        raise NotImplementedError

    def find_by_name_location(self, name: str, location_text: str) -> Optional[School]:
        raise NotImplementedError

    def list_all(self) -> Sequence[School]:
        raise NotImplementedError

    def create(self, *, name: str, location_text: str, school_code: Optional[str]) -> School:
        raise NotImplementedError

    def update(self, *, school_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, school_id: int) -> bool:
        raise NotImplementedError
