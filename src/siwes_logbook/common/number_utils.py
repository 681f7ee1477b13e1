from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a person would (2.345 -> 2.35), not banker's rounding."""
    quantum = Decimal(1).scaleb(-int(places))
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
