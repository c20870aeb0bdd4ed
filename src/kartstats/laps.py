"""Lap set statistics and outlier classification (pure functions)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from kartstats._math import mean, median, population_stdev
from kartstats.config import DEFAULT_STATS_CONFIG, CenterStrategy, StatsConfig
from kartstats.exceptions import EmptyInputError
from kartstats.models.lap import Lap


@dataclass(frozen=True)
class LapsStats:
    fastest: float
    average: float
    median: float
    count: int


@dataclass(frozen=True)
class LapClassification:
    """Partition of a lap set into plausible laps and outliers."""

    normal: list[Lap]
    outliers: list[Lap]


def durations(laps: Sequence[Lap]) -> list[float]:
    """Return the lap durations in input order."""
    return [lap.duration for lap in laps]


def lap_stats(laps: Sequence[Lap]) -> LapsStats:
    """Return fastest, average and median lap time of a non-empty lap set."""
    if not laps:
        raise EmptyInputError("Cannot compute statistics of zero laps")
    values = durations(laps)
    return LapsStats(
        fastest=min(values),
        average=mean(values),
        median=median(values),
        count=len(values),
    )


def fastest_lap(laps: Sequence[Lap]) -> Lap:
    """Return the quickest lap; lower ordinal, then lower id, wins a tie."""
    if not laps:
        raise EmptyInputError("Cannot pick the fastest of zero laps")
    return min(laps, key=lambda lap: (lap.duration, lap.ordinal, lap.id))


def lap_center(laps: Sequence[Lap], strategy: CenterStrategy = CenterStrategy.MEDIAN) -> float:
    """Return the value the outlier threshold is measured from."""
    values = durations(laps)
    if strategy is CenterStrategy.MEAN:
        return mean(values)
    return median(values)


def is_outlier(
    lap: Lap,
    center: float,
    stdev: float,
    config: StatsConfig = DEFAULT_STATS_CONFIG,
) -> bool:
    """True if the lap is impossibly fast or anomalously slow."""
    return (
        lap.duration > center + config.outlier_stddev_multiplier * stdev
        or lap.duration < config.outlier_floor_seconds
    )


def classify_laps(
    laps: Sequence[Lap],
    config: StatsConfig = DEFAULT_STATS_CONFIG,
) -> LapClassification:
    """Split laps into (normal, outliers), both in input order.

    The slow threshold is ``center + multiplier * sigma`` over the same lap
    set, so it should be called with one driver's laps from one heat.
    """
    if not laps:
        raise EmptyInputError("Cannot classify zero laps")
    stdev = population_stdev(durations(laps))
    center = lap_center(laps, config.center)

    normal: list[Lap] = []
    outliers: list[Lap] = []
    for lap in laps:
        if is_outlier(lap, center, stdev, config):
            outliers.append(lap)
        else:
            normal.append(lap)
    return LapClassification(normal=normal, outliers=outliers)


def normal_lap_stats(
    laps: Sequence[Lap],
    config: StatsConfig = DEFAULT_STATS_CONFIG,
) -> LapsStats:
    """Statistics over the non-outlier laps only."""
    normal = classify_laps(laps, config).normal
    if not normal:
        raise EmptyInputError("Every lap in the set is an outlier")
    return lap_stats(normal)


def laps_at_time(
    laps_by_driver: Mapping[int, Sequence[Lap]],
    seconds: float,
) -> dict[int, Lap]:
    """Return the lap each driver was on *seconds* after the heat started.

    Elapsed time is the running sum of a driver's laps in ordinal order.
    Drivers who had already finished their last lap are left out.
    """
    current: dict[int, Lap] = {}
    for driver_id, laps in laps_by_driver.items():
        start = 0.0
        for lap in sorted(laps, key=lambda lap: lap.ordinal):
            end = start + lap.duration
            if start <= seconds <= end:
                current[driver_id] = lap
                break
            start = end
    return current
