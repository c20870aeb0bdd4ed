"""Group laps by owning entity and summarise each group."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from kartstats._math import round_to
from kartstats.config import DEFAULT_STATS_CONFIG, StatsConfig
from kartstats.exceptions import DanglingReferenceError
from kartstats.laps import LapsStats, classify_laps, fastest_lap, lap_stats
from kartstats.models.driver import Driver
from kartstats.models.heat import Heat
from kartstats.models.kart import Kart
from kartstats.models.lap import Lap


@dataclass(frozen=True)
class DriverStats:
    driver_id: int
    name: str
    fastest: float
    average: float
    median: float
    total_laps: int
    total_heats: int
    rating_mu: float
    rating_sigma: float


@dataclass(frozen=True)
class KartStats:
    kart_id: int
    number: int
    is_child_kart: bool
    fastest: float
    average: float
    median: float
    lap_count: int
    driver_count: int


@dataclass(frozen=True)
class HeatStats:
    heat_id: int
    external_id: str
    category: str
    start_time: datetime
    fastest: float
    average: float
    median: float
    lap_count: int
    driver_count: int


@dataclass(frozen=True)
class KartDayStats:
    kart_id: int
    number: int
    day: date
    fastest: float
    average: float
    median: float
    count: int


@dataclass(frozen=True)
class DriverHeatSummary:
    """One driver's block on a heat detail page."""

    driver_id: int
    driver_name: str
    kart_number: int
    fastest_lap: Lap
    average: float
    total_laps: int
    all_laps: list[Lap]
    normal_laps: list[Lap]
    outlier_laps: list[Lap]


# ── Grouping ─────────────────────────────────────────────────────────────


def group_laps[K: Hashable](laps: Sequence[Lap], key: Callable[[Lap], K]) -> dict[K, list[Lap]]:
    """Group laps by *key*, keeping first-seen group order and lap order."""
    groups: dict[K, list[Lap]] = {}
    for lap in laps:
        groups.setdefault(key(lap), []).append(lap)
    return groups


def _resolve[V](lap: Lap, kind: str, ref_id: int, owners: Mapping[int, V]) -> V:
    try:
        return owners[ref_id]
    except KeyError:
        raise DanglingReferenceError(lap.id, kind, ref_id) from None


def laps_per_driver(laps: Sequence[Lap], drivers: Mapping[int, Driver]) -> dict[int, list[Lap]]:
    """Group laps by driver id; every driver must be present in *drivers*."""
    return group_laps(laps, lambda lap: _resolve(lap, "driver", lap.driver_id, drivers).id)


def laps_per_kart(laps: Sequence[Lap], karts: Mapping[int, Kart]) -> dict[int, list[Lap]]:
    """Group laps by kart id; every kart must be present in *karts*."""
    return group_laps(laps, lambda lap: _resolve(lap, "kart", lap.kart_id, karts).id)


def laps_per_heat(laps: Sequence[Lap], heats: Mapping[int, Heat]) -> dict[int, list[Lap]]:
    """Group laps by heat id; every heat must be present in *heats*."""
    return group_laps(laps, lambda lap: _resolve(lap, "heat", lap.heat_id, heats).id)


def laps_per_day(laps: Sequence[Lap], heats: Mapping[int, Heat]) -> dict[date, list[Lap]]:
    """Group laps by the calendar day their heat started on."""
    return group_laps(laps, lambda lap: _resolve(lap, "heat", lap.heat_id, heats).day)


def _stats_per_group[K](groups: Mapping[K, Sequence[Lap]]) -> dict[K, LapsStats]:
    return {key: lap_stats(group) for key, group in groups.items()}


def stats_per_driver(laps: Sequence[Lap], drivers: Mapping[int, Driver]) -> dict[int, LapsStats]:
    return _stats_per_group(laps_per_driver(laps, drivers))


def stats_per_kart(laps: Sequence[Lap], karts: Mapping[int, Kart]) -> dict[int, LapsStats]:
    return _stats_per_group(laps_per_kart(laps, karts))


def stats_per_heat(laps: Sequence[Lap], heats: Mapping[int, Heat]) -> dict[int, LapsStats]:
    return _stats_per_group(laps_per_heat(laps, heats))


def stats_per_day(laps: Sequence[Lap], heats: Mapping[int, Heat]) -> dict[date, LapsStats]:
    return _stats_per_group(laps_per_day(laps, heats))


def count_drivers(laps: Sequence[Lap]) -> int:
    """Number of distinct drivers in the lap set."""
    return len({lap.driver_id for lap in laps})


def count_heats(laps: Sequence[Lap]) -> int:
    """Number of distinct heats in the lap set."""
    return len({lap.heat_id for lap in laps})


# ── Entity summaries ─────────────────────────────────────────────────────


def driver_stats(driver: Driver, laps: Sequence[Lap]) -> DriverStats | None:
    """Summarise the laps of *driver* found in *laps*, or None if there are none."""
    own = [lap for lap in laps if lap.driver_id == driver.id]
    if not own:
        return None
    stats = lap_stats(own)
    return DriverStats(
        driver_id=driver.id,
        name=driver.name,
        fastest=stats.fastest,
        average=stats.average,
        median=stats.median,
        total_laps=stats.count,
        total_heats=count_heats(own),
        rating_mu=driver.rating_mu,
        rating_sigma=driver.rating_sigma,
    )


def kart_stats(kart: Kart, laps: Sequence[Lap]) -> KartStats | None:
    """Summarise the laps driven in *kart*, or None if there are none."""
    own = [lap for lap in laps if lap.kart_id == kart.id]
    if not own:
        return None
    stats = lap_stats(own)
    return KartStats(
        kart_id=kart.id,
        number=kart.number,
        is_child_kart=kart.is_child_kart,
        fastest=stats.fastest,
        average=stats.average,
        median=stats.median,
        lap_count=stats.count,
        driver_count=count_drivers(own),
    )


def heat_stats(heat: Heat, laps: Sequence[Lap]) -> HeatStats | None:
    """Summarise the laps driven in *heat*, or None if there are none."""
    own = [lap for lap in laps if lap.heat_id == heat.id]
    if not own:
        return None
    stats = lap_stats(own)
    return HeatStats(
        heat_id=heat.id,
        external_id=heat.external_id,
        category=heat.category,
        start_time=heat.start_time,
        fastest=stats.fastest,
        average=stats.average,
        median=stats.median,
        lap_count=stats.count,
        driver_count=count_drivers(own),
    )


def all_driver_stats(drivers: Sequence[Driver], laps: Sequence[Lap]) -> list[DriverStats]:
    """Stats for every driver that has laps, in *drivers* order."""
    by_driver = laps_per_driver(laps, {driver.id: driver for driver in drivers})
    return [
        stats
        for driver in drivers
        if driver.id in by_driver
        and (stats := driver_stats(driver, by_driver[driver.id])) is not None
    ]


def all_kart_stats(karts: Sequence[Kart], laps: Sequence[Lap]) -> list[KartStats]:
    """Stats for every kart that has laps, in *karts* order."""
    by_kart = laps_per_kart(laps, {kart.id: kart for kart in karts})
    return [
        stats
        for kart in karts
        if kart.id in by_kart and (stats := kart_stats(kart, by_kart[kart.id])) is not None
    ]


def all_heat_stats(heats: Sequence[Heat], laps: Sequence[Lap]) -> list[HeatStats]:
    """Stats for every heat that has laps, in *heats* order."""
    by_heat = laps_per_heat(laps, {heat.id: heat for heat in heats})
    return [
        stats
        for heat in heats
        if heat.id in by_heat and (stats := heat_stats(heat, by_heat[heat.id])) is not None
    ]


def kart_stats_per_day(
    kart: Kart,
    laps: Sequence[Lap],
    heats: Mapping[int, Heat],
) -> list[KartDayStats]:
    """Daily fastest/average/median of one kart, days ascending, 2 decimals."""
    own = [lap for lap in laps if lap.kart_id == kart.id]
    per_day = stats_per_day(own, heats)
    return [
        KartDayStats(
            kart_id=kart.id,
            number=kart.number,
            day=day,
            fastest=round_to(stats.fastest, 2),
            average=round_to(stats.average, 2),
            median=round_to(stats.median, 2),
            count=stats.count,
        )
        for day, stats in sorted(per_day.items())
    ]


def heat_driver_summaries(
    heat: Heat,
    laps: Sequence[Lap],
    drivers: Mapping[int, Driver],
    karts: Mapping[int, Kart],
    config: StatsConfig = DEFAULT_STATS_CONFIG,
) -> list[DriverHeatSummary]:
    """Per-driver breakdown of one heat, quickest driver first."""
    heat_laps = [lap for lap in laps if lap.heat_id == heat.id]
    summaries: list[DriverHeatSummary] = []
    for driver_id, driver_laps in laps_per_driver(heat_laps, drivers).items():
        driver_laps = sorted(driver_laps, key=lambda lap: lap.ordinal)
        # a driver keeps one kart for the whole heat
        kart = _resolve(driver_laps[0], "kart", driver_laps[0].kart_id, karts)
        classification = classify_laps(driver_laps, config)
        stats = lap_stats(driver_laps)
        summaries.append(
            DriverHeatSummary(
                driver_id=driver_id,
                driver_name=drivers[driver_id].name,
                kart_number=kart.number,
                fastest_lap=fastest_lap(driver_laps),
                average=round_to(stats.average, 3),
                total_laps=stats.count,
                all_laps=driver_laps,
                normal_laps=classification.normal,
                outlier_laps=classification.outliers,
            )
        )
    summaries.sort(key=lambda summary: (summary.fastest_lap.duration, summary.driver_id))
    return summaries
