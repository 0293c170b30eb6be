"""Helpers for normalizing provider confidence scores."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


def to_percent(score: Any) -> int:
    """Convert a 0-1 provider score to an integer percentage, rounding half up.

    Raises:
        ValueError: If the score is not numeric.
    """
    if isinstance(score, bool):
        raise ValueError("Confidence score must be numeric.")
    try:
        value = Decimal(str(score))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Confidence score must be numeric, got {score!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Confidence score must be finite, got {score!r}")

    percent = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, percent))
