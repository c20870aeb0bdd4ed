"""Sequential Bayesian driver rating."""

from kartstats.rating.engine import (
    RatingBatchResult,
    RatingEngine,
    RatingWriter,
    apply_all_ratings,
    effective_performances,
    finishing_order,
    persist_heat,
    rate_heat,
    validate_ordinals,
)
from kartstats.rating.model import RatingModel, WengLinModel
from kartstats.rating.state import RatedHeat, UnratedHeat, chronological, pending

__all__ = [
    "RatedHeat",
    "RatingBatchResult",
    "RatingEngine",
    "RatingModel",
    "RatingWriter",
    "UnratedHeat",
    "WengLinModel",
    "apply_all_ratings",
    "chronological",
    "effective_performances",
    "finishing_order",
    "pending",
    "persist_heat",
    "rate_heat",
    "validate_ordinals",
]
