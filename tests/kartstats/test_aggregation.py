"""Tests for kartstats.aggregation: grouping and entity summaries."""

from __future__ import annotations

from datetime import date

import pytest

from kartstats.aggregation import (
    DriverStats,
    all_driver_stats,
    all_heat_stats,
    all_kart_stats,
    count_drivers,
    count_heats,
    driver_stats,
    group_laps,
    heat_driver_summaries,
    heat_stats,
    kart_stats,
    kart_stats_per_day,
    laps_per_day,
    laps_per_driver,
    laps_per_heat,
    laps_per_kart,
    stats_per_day,
    stats_per_driver,
    stats_per_heat,
    stats_per_kart,
)
from kartstats.exceptions import DanglingReferenceError
from kartstats.models import Driver, Rating


@pytest.fixture
def drivers_by_id(sample_drivers):
    return {driver.id: driver for driver in sample_drivers}


@pytest.fixture
def karts_by_id(sample_karts):
    return {kart.id: kart for kart in sample_karts}


@pytest.fixture
def heats_by_id(sample_heats):
    return {heat.id: heat for heat in sample_heats}


class TestGroupLaps:
    def test_keeps_first_seen_order(self, sample_laps) -> None:
        groups = group_laps(sample_laps, lambda lap: lap.driver_id)
        assert list(groups) == [1, 2, 3]

    def test_keeps_lap_order(self, sample_laps) -> None:
        groups = group_laps(sample_laps, lambda lap: lap.driver_id)
        assert [lap.duration for lap in groups[1]] == [49.8, 50.2, 50.0, 50.5, 49.9]

    def test_empty(self) -> None:
        assert group_laps([], lambda lap: lap.driver_id) == {}


class TestGroupingByOwner:
    def test_per_driver(self, sample_laps, drivers_by_id) -> None:
        groups = laps_per_driver(sample_laps, drivers_by_id)
        assert {k: len(v) for k, v in groups.items()} == {1: 5, 2: 5, 3: 4}

    def test_per_kart(self, sample_laps, karts_by_id) -> None:
        groups = laps_per_kart(sample_laps, karts_by_id)
        assert {k: len(v) for k, v in groups.items()} == {1: 5, 2: 5, 3: 4}

    def test_per_heat(self, sample_laps, heats_by_id) -> None:
        groups = laps_per_heat(sample_laps, heats_by_id)
        assert {k: len(v) for k, v in groups.items()} == {1: 6, 2: 4, 3: 4}

    def test_per_day(self, sample_laps, heats_by_id) -> None:
        groups = laps_per_day(sample_laps, heats_by_id)
        assert {k: len(v) for k, v in groups.items()} == {
            date(2023, 5, 6): 10,
            date(2023, 5, 7): 4,
        }

    def test_group_counts_cover_every_lap(
        self, sample_laps, drivers_by_id, karts_by_id, heats_by_id
    ) -> None:
        for groups in (
            laps_per_driver(sample_laps, drivers_by_id),
            laps_per_kart(sample_laps, karts_by_id),
            laps_per_heat(sample_laps, heats_by_id),
            laps_per_day(sample_laps, heats_by_id),
        ):
            assert sum(len(group) for group in groups.values()) == len(sample_laps)

    def test_stats_counts_cover_every_lap(
        self, sample_laps, drivers_by_id, karts_by_id, heats_by_id
    ) -> None:
        for per_group in (
            stats_per_driver(sample_laps, drivers_by_id),
            stats_per_kart(sample_laps, karts_by_id),
            stats_per_heat(sample_laps, heats_by_id),
            stats_per_day(sample_laps, heats_by_id),
        ):
            assert sum(stats.count for stats in per_group.values()) == len(sample_laps)

    def test_unknown_driver(self, sample_laps, drivers_by_id) -> None:
        del drivers_by_id[3]
        with pytest.raises(DanglingReferenceError) as exc_info:
            laps_per_driver(sample_laps, drivers_by_id)
        assert exc_info.value.kind == "driver"
        assert exc_info.value.ref_id == 3

    def test_unknown_heat_for_day(self, sample_laps, heats_by_id) -> None:
        del heats_by_id[2]
        with pytest.raises(DanglingReferenceError) as exc_info:
            laps_per_day(sample_laps, heats_by_id)
        assert exc_info.value.kind == "heat"

    def test_unknown_kart(self, make_lap, karts_by_id) -> None:
        lap = make_lap(50.0, kart_id=99, lap_id=500)
        with pytest.raises(DanglingReferenceError, match="Lap 500 references unknown kart 99"):
            stats_per_kart([lap], karts_by_id)


class TestStatsPerGroup:
    def test_per_driver(self, sample_laps, drivers_by_id) -> None:
        stats = stats_per_driver(sample_laps, drivers_by_id)
        assert stats[1].fastest == 49.8
        assert stats[1].average == pytest.approx(50.08)
        assert stats[1].median == 50.0

    def test_per_day(self, sample_laps, heats_by_id) -> None:
        stats = stats_per_day(sample_laps, heats_by_id)
        assert stats[date(2023, 5, 7)].fastest == 50.1
        assert stats[date(2023, 5, 7)].count == 4


class TestCounts:
    def test_count_drivers(self, sample_laps) -> None:
        assert count_drivers(sample_laps) == 3

    def test_count_heats(self, sample_laps) -> None:
        assert count_heats(sample_laps) == 3

    def test_empty(self) -> None:
        assert count_drivers([]) == 0
        assert count_heats([]) == 0


class TestDriverStats:
    def test_summary(self, sample_laps, sample_drivers) -> None:
        stats = driver_stats(sample_drivers[0], sample_laps)
        assert isinstance(stats, DriverStats)
        assert stats.name == "anna de vries"
        assert stats.fastest == 49.8
        assert stats.average == pytest.approx(50.08)
        assert stats.median == 50.0
        assert stats.total_laps == 5
        assert stats.total_heats == 2

    def test_carries_current_rating(self, sample_laps) -> None:
        driver = Driver(id=1, name="anna").with_rating(Rating(mu=27.5, sigma=6.0))
        stats = driver_stats(driver, sample_laps)
        assert stats.rating_mu == 27.5
        assert stats.rating_sigma == 6.0

    def test_no_laps(self, sample_laps) -> None:
        assert driver_stats(Driver(id=42, name="nobody"), sample_laps) is None

    def test_all_driver_stats(self, sample_laps, sample_drivers) -> None:
        stats = all_driver_stats(sample_drivers + [Driver(id=4, name="idle")], sample_laps)
        assert [s.driver_id for s in stats] == [1, 2, 3]

    def test_all_driver_stats_unknown_driver(self, sample_laps, sample_drivers) -> None:
        with pytest.raises(DanglingReferenceError):
            all_driver_stats(sample_drivers[:2], sample_laps)


class TestKartStats:
    def test_summary(self, sample_laps, sample_karts) -> None:
        stats = kart_stats(sample_karts[0], sample_laps)
        assert stats.number == 7
        assert stats.is_child_kart is False
        assert stats.fastest == 49.8
        assert stats.lap_count == 5
        assert stats.driver_count == 2

    def test_child_kart(self, sample_laps, sample_karts) -> None:
        stats = kart_stats(sample_karts[2], sample_laps)
        assert stats.is_child_kart is True
        assert stats.driver_count == 1

    def test_all_kart_stats(self, sample_laps, sample_karts) -> None:
        stats = all_kart_stats(sample_karts, sample_laps)
        assert sum(s.lap_count for s in stats) == len(sample_laps)

    def test_per_day(self, sample_laps, sample_karts, heats_by_id) -> None:
        days = kart_stats_per_day(sample_karts[2], sample_laps, heats_by_id)
        assert [d.day for d in days] == [date(2023, 5, 6), date(2023, 5, 7)]
        assert days[0].fastest == 54.0
        assert days[0].average == 54.5
        assert days[1].median == 86.5
        assert days[1].count == 2


class TestHeatStats:
    def test_summary(self, sample_laps, sample_heats) -> None:
        stats = heat_stats(sample_heats[0], sample_laps)
        assert stats.external_id == "H-001"
        assert stats.category == "Grand Prix"
        assert stats.lap_count == 6
        assert stats.driver_count == 2
        assert stats.fastest == 49.8
        assert stats.average == pytest.approx(50.75)

    def test_all_heat_stats(self, sample_laps, sample_heats) -> None:
        stats = all_heat_stats(sample_heats, sample_laps)
        assert [s.heat_id for s in stats] == [1, 2, 3]


class TestHeatDriverSummaries:
    def test_quickest_driver_first(
        self, sample_laps, sample_heats, drivers_by_id, karts_by_id
    ) -> None:
        summaries = heat_driver_summaries(sample_heats[0], sample_laps, drivers_by_id, karts_by_id)
        assert [s.driver_id for s in summaries] == [1, 2]
        assert [s.kart_number for s in summaries] == [7, 12]

    def test_driver_block(self, sample_laps, sample_heats, drivers_by_id, karts_by_id) -> None:
        first = heat_driver_summaries(sample_heats[0], sample_laps, drivers_by_id, karts_by_id)[0]
        assert first.driver_name == "anna de vries"
        assert first.fastest_lap.duration == 49.8
        assert first.fastest_lap.ordinal == 1
        assert first.average == 50.0
        assert first.total_laps == 3
        assert len(first.normal_laps) + len(first.outlier_laps) == 3

    def test_outliers_per_driver(self, make_driver_laps, sample_heats, drivers_by_id, karts_by_id) -> None:
        laps = make_driver_laps([50.0, 51.0, 50.5, 52.0, 50.2, 130.0], driver_id=1) + (
            make_driver_laps([52.0, 52.5], driver_id=2, kart_id=2)
        )
        summaries = heat_driver_summaries(sample_heats[0], laps, drivers_by_id, karts_by_id)
        driver1 = next(s for s in summaries if s.driver_id == 1)
        assert [lap.duration for lap in driver1.outlier_laps] == [130.0]

    def test_ignores_other_heats(self, sample_laps, sample_heats, drivers_by_id, karts_by_id) -> None:
        summaries = heat_driver_summaries(sample_heats[2], sample_laps, drivers_by_id, karts_by_id)
        assert sum(s.total_laps for s in summaries) == 4
