from __future__ import annotations

from typing import Protocol, Sequence

from .model import DailyReport, NewReport, ReportQuery


class ReportRepository(Protocol):
    def create(self, new: NewReport) -> int:
        raise NotImplementedError

    def find(self, query: ReportQuery) -> Sequence[DailyReport]:
        """Matching reports, newest first."""

        raise NotImplementedError
