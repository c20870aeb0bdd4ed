"""Chronological driver rating from heat finishing order."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from kartstats.aggregation import group_laps, laps_per_heat
from kartstats.exceptions import (
    DanglingReferenceError,
    HeatAlreadyRatedError,
    HeatOrderError,
    InsufficientCompetitorsError,
    LapOrdinalError,
    MissingRatingError,
    PartialPersistenceError,
    RatingModelError,
    RatingPersistenceError,
)
from kartstats.models.driver import Driver
from kartstats.models.heat import Heat
from kartstats.models.lap import Lap
from kartstats.models.rating import DriverRating, Rating
from kartstats.rating.model import RatingModel, WengLinModel
from kartstats.rating.state import RatedHeat, UnratedHeat, pending

MIN_COMPETITORS = 2


class RatingWriter(Protocol):
    """Persists one driver's new rating. Supplied by the persistence layer."""

    def write_rating(self, update: DriverRating) -> None: ...


@dataclass
class RatingBatchResult:
    rated: list[RatedHeat] = field(default_factory=list)
    skipped: list[InsufficientCompetitorsError] = field(default_factory=list)
    ratings: dict[int, Rating] = field(default_factory=dict)


# ── Per-heat computation ─────────────────────────────────────────────────


def effective_performances(laps: Sequence[Lap]) -> dict[int, float]:
    """Each driver's best lap time in the heat."""
    best: dict[int, float] = {}
    for lap in laps:
        current = best.get(lap.driver_id)
        if current is None or lap.duration < current:
            best[lap.driver_id] = lap.duration
    return best


def finishing_order(laps: Sequence[Lap]) -> list[int]:
    """Driver ids from fastest to slowest best lap; lower id wins a tie."""
    best = effective_performances(laps)
    return sorted(best, key=lambda driver_id: (best[driver_id], driver_id))


def validate_ordinals(laps: Sequence[Lap]) -> None:
    """Check that every driver's lap numbers within each heat run 1..n."""
    groups = group_laps(laps, lambda lap: (lap.heat_id, lap.driver_id))
    for (heat_id, driver_id), group in groups.items():
        ordinals = sorted(lap.ordinal for lap in group)
        if ordinals != list(range(1, len(ordinals) + 1)):
            raise LapOrdinalError(
                f"Driver {driver_id} in heat {heat_id} has lap numbers {ordinals}"
            )


def rate_heat(
    unrated: UnratedHeat,
    laps: Sequence[Lap],
    ratings: Mapping[int, Rating],
    model: RatingModel,
) -> RatedHeat:
    """Compute the rating effect of one heat.

    ``ratings`` must hold the current rating of every participating driver
    and is not modified; the new ratings are returned in finishing order.
    """
    if not isinstance(unrated, UnratedHeat):
        raise HeatAlreadyRatedError(f"Expected an unrated heat, got {type(unrated).__name__}")
    heat = unrated.heat

    for lap in laps:
        if lap.heat_id != heat.id:
            raise DanglingReferenceError(lap.id, "heat", lap.heat_id)

    order = finishing_order(laps)
    if len(order) < MIN_COMPETITORS:
        raise InsufficientCompetitorsError(heat.id, len(order))

    teams: list[Rating] = []
    for driver_id in order:
        if driver_id not in ratings:
            raise MissingRatingError(driver_id)
        teams.append(ratings[driver_id])

    new_ratings = model.update(teams, list(range(1, len(order) + 1)))
    if len(new_ratings) != len(order):
        raise RatingModelError(
            f"Heat {heat.id}: model returned {len(new_ratings)} ratings for {len(order)} drivers"
        )

    return RatedHeat(
        heat=heat,
        updates=tuple(
            DriverRating(driver_id=driver_id, mu=rating.mu, sigma=rating.sigma)
            for driver_id, rating in zip(order, new_ratings)
        ),
    )


def persist_heat(rated: RatedHeat, writer: RatingWriter) -> None:
    """Write every update of a rated heat; a partial write is an error."""
    written: list[int] = []
    for update in rated.updates:
        try:
            writer.write_rating(update)
        except Exception as exc:
            if written:
                raise PartialPersistenceError(rated.heat.id, written, update.driver_id) from exc
            raise RatingPersistenceError(
                rated.heat.id, f"writing driver {update.driver_id} failed: {exc}"
            ) from exc
        written.append(update.driver_id)


# ── Sequencing ───────────────────────────────────────────────────────────


class RatingEngine:
    """Single writer that applies heats to a rating table in start-time order.

    The engine owns a copy of the rating table. A heat's result is folded in
    only after it has been computed and, if a writer is given, persisted, so
    a failed heat leaves the engine exactly as it was. Every heat id is
    applied at most once.
    """

    def __init__(
        self,
        model: RatingModel | None = None,
        ratings: Mapping[int, Rating] | None = None,
        rated_until: datetime | None = None,
        rated_heat_ids: Iterable[int] = (),
    ) -> None:
        self._model = model if model is not None else WengLinModel()
        self._ratings: dict[int, Rating] = dict(ratings or {})
        self._rated_until = rated_until
        self._rated_heat_ids: set[int] = set(rated_heat_ids)

    @classmethod
    def from_drivers(
        cls,
        drivers: Iterable[Driver],
        model: RatingModel | None = None,
        rated_until: datetime | None = None,
        rated_heat_ids: Iterable[int] = (),
    ) -> RatingEngine:
        return cls(
            model,
            {driver.id: driver.rating for driver in drivers},
            rated_until,
            rated_heat_ids,
        )

    @property
    def ratings(self) -> dict[int, Rating]:
        return dict(self._ratings)

    @property
    def rated_until(self) -> datetime | None:
        """Start time of the most recently rated heat."""
        return self._rated_until

    @property
    def rated_heat_ids(self) -> frozenset[int]:
        return frozenset(self._rated_heat_ids)

    def rating_of(self, driver_id: int) -> Rating:
        try:
            return self._ratings[driver_id]
        except KeyError:
            raise MissingRatingError(driver_id) from None

    def rate(
        self,
        unrated: UnratedHeat,
        laps: Sequence[Lap],
        writer: RatingWriter | None = None,
    ) -> RatedHeat:
        """Rate one heat, persist it through *writer*, then commit it locally."""
        if not isinstance(unrated, UnratedHeat):
            raise HeatAlreadyRatedError(f"Expected an unrated heat, got {type(unrated).__name__}")
        heat = unrated.heat
        if heat.id in self._rated_heat_ids:
            raise HeatAlreadyRatedError(f"Heat {heat.id} has already been rated")
        if self._rated_until is not None and heat.start_time < self._rated_until:
            raise HeatOrderError(
                f"Heat {heat.id} started at {heat.start_time.isoformat()}, before the last "
                f"rated heat at {self._rated_until.isoformat()}"
            )

        rated = rate_heat(unrated, laps, self._ratings, self._model)
        if writer is not None:
            persist_heat(rated, writer)

        for update in rated.updates:
            self._ratings[update.driver_id] = update.rating
        self._rated_until = heat.start_time
        self._rated_heat_ids.add(heat.id)
        return rated

    def rate_all(
        self,
        heats: Iterable[Heat],
        laps: Sequence[Lap],
        writer: RatingWriter | None = None,
    ) -> RatingBatchResult:
        """Rate every heat chronologically.

        Heats with fewer than two drivers are skipped and reported; any other
        error stops the batch, leaving earlier heats applied. A heat listed
        twice is rated once, and heats this engine already rated are left out.
        """
        heats = list(heats)
        by_heat = laps_per_heat(laps, {heat.id: heat for heat in heats})
        result = RatingBatchResult()
        for unrated in pending(heats):
            if unrated.heat.id in self._rated_heat_ids:
                continue
            try:
                rated = self.rate(unrated, by_heat.get(unrated.heat.id, []), writer)
            except InsufficientCompetitorsError as exc:
                result.skipped.append(exc)
                continue
            result.rated.append(rated)
        result.ratings = self.ratings
        return result


def apply_all_ratings(
    heats: Iterable[Heat],
    laps: Sequence[Lap],
    drivers: Iterable[Driver],
    model: RatingModel | None = None,
    writer: RatingWriter | None = None,
) -> RatingBatchResult:
    """Recompute every driver's rating from their stored priors over all heats."""
    engine = RatingEngine.from_drivers(drivers, model)
    return engine.rate_all(heats, laps, writer)
