from __future__ import annotations

from typing import Protocol, Sequence

from .model import NewSheet, SheetQuery, UploadedCombinedSheet


class SheetRepository(Protocol):
    def insert(self, new: NewSheet) -> UploadedCombinedSheet:
        raise NotImplementedError

    def find(self, query: SheetQuery) -> Sequence[UploadedCombinedSheet]:
        """Matching sheets, most recently uploaded first."""

        raise NotImplementedError
