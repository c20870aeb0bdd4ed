"""Numeric primitives over float sequences."""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence

from kartstats.exceptions import EmptyInputError


def _require_values(values: Sequence[float], what: str) -> None:
    if not values:
        raise EmptyInputError(f"Cannot compute the {what} of an empty sequence")


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean."""
    _require_values(values, "mean")
    return statistics.fmean(values)


def population_stdev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by n, not n - 1)."""
    _require_values(values, "standard deviation")
    return statistics.pstdev(values)


def median(values: Sequence[float]) -> float:
    """Middle value; mean of the two central values for even counts."""
    _require_values(values, "median")
    return float(statistics.median(values))


def round_to(value: float, decimals: int) -> float:
    """Round half away from zero to *decimals* places."""
    multiplier = 10.0**decimals
    return math.copysign(math.floor(abs(value) * multiplier + 0.5), value) / multiplier
