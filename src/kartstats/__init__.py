"""kartstats: lap statistics and driver ratings for go-kart heat results."""

from kartstats.aggregation import (
    DriverHeatSummary,
    DriverStats,
    HeatStats,
    KartDayStats,
    KartStats,
)
from kartstats.config import CenterStrategy, RatingConfig, StatsConfig
from kartstats.exceptions import (
    ConfigError,
    DanglingReferenceError,
    EmptyInputError,
    HeatAlreadyRatedError,
    HeatOrderError,
    InsufficientCompetitorsError,
    KartStatsError,
    MissingRatingError,
    PartialPersistenceError,
    RatingModelError,
    RatingPersistenceError,
)
from kartstats.laps import LapClassification, LapsStats, classify_laps, lap_stats
from kartstats.models import Driver, DriverRating, Heat, Kart, Lap, Rating
from kartstats.rating import RatedHeat, RatingEngine, UnratedHeat, WengLinModel, apply_all_ratings

__all__ = [
    "CenterStrategy",
    "ConfigError",
    "DanglingReferenceError",
    "Driver",
    "DriverHeatSummary",
    "DriverRating",
    "DriverStats",
    "EmptyInputError",
    "Heat",
    "HeatAlreadyRatedError",
    "HeatOrderError",
    "HeatStats",
    "InsufficientCompetitorsError",
    "Kart",
    "KartDayStats",
    "KartStats",
    "KartStatsError",
    "Lap",
    "LapClassification",
    "LapsStats",
    "MissingRatingError",
    "PartialPersistenceError",
    "Rating",
    "RatedHeat",
    "RatingConfig",
    "RatingEngine",
    "RatingModelError",
    "RatingPersistenceError",
    "StatsConfig",
    "UnratedHeat",
    "WengLinModel",
    "apply_all_ratings",
    "classify_laps",
    "lap_stats",
]

__version__ = "0.1.0"
