from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import AttendanceRecord


class HoursCalculator(ABC):
    """Worked-hours interface (Strategy Pattern)."""

    @abstractmethod
    def worked_hours(self, record: AttendanceRecord) -> float:
        raise NotImplementedError
