"""Turn a results payload into heat, driver, kart and lap records."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from kartstats.exceptions import DuplicateHeatError, IngestValidationError
from kartstats.ingest.payloads import HeatResultPayload
from kartstats.models.driver import Driver
from kartstats.models.heat import Heat
from kartstats.models.kart import Kart
from kartstats.models.lap import Lap
from kartstats.models.rating import Rating

_EMAIL_RE = re.compile(
    r"[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?",
    re.IGNORECASE,
)
_DISALLOWED_CHARS = "()[]{}<>;:,/\\\"`~!@#$%^&*+=?|_"
_DISALLOWED_TABLE = str.maketrans("", "", _DISALLOWED_CHARS)


def sanitize_driver_name(name: str) -> str:
    """Normalise a driver name typed in at the counter.

    E-mail addresses and punctuation are dropped, surrounding dashes and
    whitespace trimmed, and the result lowercased.
    """
    sanitized = _EMAIL_RE.sub("", name.strip())
    sanitized = sanitized.translate(_DISALLOWED_TABLE)
    return sanitized.strip("-").strip().lower()


def _local_time(value: datetime) -> datetime:
    # The venue reports local wall-clock time with an offset; keep the wall clock.
    return value.replace(tzinfo=None)


@dataclass(frozen=True)
class NormalizedHeat:
    heat: Heat
    laps: list[Lap]
    drivers: list[Driver]
    karts: list[Kart]


class EntityRegistry:
    """In-memory id assignment for ingested entities.

    Drivers are keyed by sanitized name, karts by number and heats by their
    external id. New drivers start at *prior*.
    """

    def __init__(
        self,
        drivers: Iterable[Driver] = (),
        karts: Iterable[Kart] = (),
        heats: Iterable[Heat] = (),
        next_lap_id: int = 1,
        prior: Rating | None = None,
    ) -> None:
        self._drivers = {driver.name: driver for driver in drivers}
        self._karts = {kart.number: kart for kart in karts}
        self._heats = {heat.external_id: heat for heat in heats}
        self._next_driver_id = max((d.id for d in self._drivers.values()), default=0) + 1
        self._next_kart_id = max((k.id for k in self._karts.values()), default=0) + 1
        self._next_heat_id = max((h.id for h in self._heats.values()), default=0) + 1
        self._next_lap_id = next_lap_id
        self._prior = prior if prior is not None else Rating()

    @property
    def drivers(self) -> dict[int, Driver]:
        return {driver.id: driver for driver in self._drivers.values()}

    @property
    def karts(self) -> dict[int, Kart]:
        return {kart.id: kart for kart in self._karts.values()}

    @property
    def heats(self) -> dict[int, Heat]:
        return {heat.id: heat for heat in self._heats.values()}

    def has_heat(self, external_id: str) -> bool:
        return external_id in self._heats

    def ensure_driver(self, name: str) -> Driver:
        key = sanitize_driver_name(name)
        driver = self._drivers.get(key)
        if driver is None:
            driver = Driver(
                id=self._next_driver_id,
                name=key,
                rating_mu=self._prior.mu,
                rating_sigma=self._prior.sigma,
            )
            self._drivers[key] = driver
            self._next_driver_id += 1
        return driver

    def apply_ratings(self, ratings: Mapping[int, Rating]) -> None:
        """Replace the stored rating of every driver listed in *ratings*."""
        for key, driver in self._drivers.items():
            if driver.id in ratings:
                self._drivers[key] = driver.with_rating(ratings[driver.id])

    def ensure_kart(self, number: int, is_child_kart: bool | None = None) -> Kart:
        kart = self._karts.get(number)
        if kart is None:
            kart = Kart(id=self._next_kart_id, number=number, is_child_kart=bool(is_child_kart))
            self._karts[number] = kart
            self._next_kart_id += 1
        return kart

    def add_heat(self, external_id: str, category: str, start_time: datetime) -> Heat:
        if external_id in self._heats:
            raise DuplicateHeatError(f"Heat {external_id!r} is already registered")
        heat = Heat(
            id=self._next_heat_id,
            external_id=external_id,
            category=category,
            start_time=start_time,
        )
        self._heats[external_id] = heat
        self._next_heat_id += 1
        return heat

    def next_lap_id(self) -> int:
        lap_id = self._next_lap_id
        self._next_lap_id += 1
        return lap_id


def normalize_heat(payload: HeatResultPayload, registry: EntityRegistry) -> NormalizedHeat:
    """Register the heat and build its laps, numbering each driver's laps from 1."""
    for entry in payload.results:
        if any(lap_time <= 0 for lap_time in entry.result.lap_times):
            raise IngestValidationError(
                f"Heat {payload.heat.id!r}: non-positive lap time for "
                f"{entry.participation.driver_name!r}"
            )

    heat = registry.add_heat(
        payload.heat.id,
        payload.heat.heat_type_name,
        _local_time(payload.heat.start_time),
    )
    laps: list[Lap] = []
    drivers: dict[int, Driver] = {}
    karts: dict[int, Kart] = {}
    for entry in payload.results:
        driver = registry.ensure_driver(entry.participation.driver_name)
        kart = registry.ensure_kart(entry.result.kart_number)
        drivers[driver.id] = driver
        karts[kart.id] = kart
        for ordinal, lap_time in enumerate(entry.result.lap_times, start=1):
            laps.append(
                Lap(
                    id=registry.next_lap_id(),
                    heat_id=heat.id,
                    driver_id=driver.id,
                    kart_id=kart.id,
                    ordinal=ordinal,
                    duration=lap_time,
                )
            )
    return NormalizedHeat(
        heat=heat,
        laps=laps,
        drivers=list(drivers.values()),
        karts=list(karts.values()),
    )
