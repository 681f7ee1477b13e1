from __future__ import annotations

from datetime import datetime

from ..model import AttendanceRecord
from .base import HoursCalculator


class WallClockHoursCalculator(HoursCalculator):
    """Same-day rule: out - in on the record's date, not below 0.

    A check-out earlier than the check-in (clock skew, manual fixes) counts
    as zero hours rather than wrapping past midnight.
    """

    def worked_hours(self, record: AttendanceRecord) -> float:
        if not record.check_in_time or not record.check_out_time:
            return 0.0
        check_in = datetime.combine(record.work_date, record.check_in_time)
        check_out = datetime.combine(record.work_date, record.check_out_time)
        hours = (check_out - check_in).total_seconds() / 3600
        return max(hours, 0.0)
