"""Unrated/Rated heat states.

A heat's rating effect is applied exactly once and in start-time order, so
the engine only accepts :class:`UnratedHeat` and only hands back
:class:`RatedHeat`.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from kartstats.models.heat import Heat
from kartstats.models.rating import DriverRating


class UnratedHeat(BaseModel):
    model_config = ConfigDict(frozen=True)

    heat: Heat


class RatedHeat(BaseModel):
    """A heat whose rating effect has been computed, with its updates in rank order."""

    model_config = ConfigDict(frozen=True)

    heat: Heat
    updates: tuple[DriverRating, ...]

    @property
    def finishing_order(self) -> list[int]:
        return [update.driver_id for update in self.updates]


def chronological(heats: Iterable[Heat]) -> list[Heat]:
    """Sort heats by start time, heat id breaking ties."""
    return sorted(heats, key=lambda heat: (heat.start_time, heat.id))


def pending(heats: Iterable[Heat]) -> list[UnratedHeat]:
    """Wrap heats as unrated, in the order they must be rated.

    A heat id that appears more than once is kept at its first occurrence.
    """
    unique: dict[int, Heat] = {}
    for heat in heats:
        unique.setdefault(heat.id, heat)
    return [UnratedHeat(heat=heat) for heat in chronological(unique.values())]
