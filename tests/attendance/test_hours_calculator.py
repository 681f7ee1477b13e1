from datetime import date, time

from siwes_logbook.attendance.hours import WallClockHoursCalculator
from siwes_logbook.attendance.model import AttendanceRecord


def _record(check_in, check_out):
    return AttendanceRecord(
        attendance_id=1,
        student_id=1,
        work_date=date(2026, 3, 2),
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_same_day_hours():
    calc = WallClockHoursCalculator()
    assert calc.worked_hours(_record(time(8, 0), time(16, 30))) == 8.5


def test_missing_check_out_counts_zero():
    calc = WallClockHoursCalculator()
    assert calc.worked_hours(_record(time(8, 0), None)) == 0.0


def test_check_out_before_check_in_clamps_to_zero():
    calc = WallClockHoursCalculator()
    assert calc.worked_hours(_record(time(22, 0), time(6, 0))) == 0.0
