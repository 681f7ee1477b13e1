from .base import HoursCalculator
from .wall_clock import WallClockHoursCalculator

__all__ = ["HoursCalculator", "WallClockHoursCalculator"]
