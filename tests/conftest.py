"""Shared test fixtures, factories and sample results payloads."""

from __future__ import annotations

import itertools
import logging
from datetime import datetime

import pytest

from kartstats.models import Driver, Heat, Kart, Lap

SAMPLE_HEAT_PAYLOAD = {
    "Heat": {
        "id": "H-20230506-1400",
        "JoinHeats": False,
        "ParticipationCount": 2,
        "StartTime": "2023-05-06T14:00:00.000+02:00",
        "HeatTypeName": "Grand Prix",
    },
    "Results": [
        {
            "Participation": {"driverName": "Anna de Vries"},
            "Result": {"KartNr": 7, "LapTimes": [49.8, 50.2, 50.0]},
        },
        {
            "Participation": {"driverName": "Bram_Jansen (bram@example.com)"},
            "Result": {"KartNr": 12, "LapTimes": [51.0, 52.0, 51.5]},
        },
    ],
}

SAMPLE_HEAT_LIST = {
    "Results": [
        {"Id": "H-20230506-1400"},
        {"Id": "H-20230506-1500"},
    ],
}

_lap_ids = itertools.count(1)


def _make_lap(
    duration: float,
    driver_id: int = 1,
    heat_id: int = 1,
    kart_id: int = 1,
    ordinal: int = 1,
    lap_id: int | None = None,
) -> Lap:
    return Lap(
        id=next(_lap_ids) if lap_id is None else lap_id,
        heat_id=heat_id,
        driver_id=driver_id,
        kart_id=kart_id,
        ordinal=ordinal,
        duration=duration,
    )


def _make_driver_laps(
    durations: list[float],
    driver_id: int = 1,
    heat_id: int = 1,
    kart_id: int = 1,
) -> list[Lap]:
    """One driver's laps in a heat, numbered from 1."""
    return [
        _make_lap(duration, driver_id=driver_id, heat_id=heat_id, kart_id=kart_id, ordinal=n)
        for n, duration in enumerate(durations, start=1)
    ]


@pytest.fixture(autouse=True)
def _isolated_service_log(tmp_path):
    """Send the service call log to a temporary directory for every test."""
    import kartstats._logging as mod

    old_logger, old_dir, old_file = mod._logger, mod._LOG_DIR, mod._LOG_FILE
    named_logger = logging.getLogger(mod.LOGGER_NAME)
    named_logger.handlers.clear()

    mod._logger = None
    mod._LOG_DIR = str(tmp_path / "logs")
    mod._LOG_FILE = str(tmp_path / "logs" / "service_calls.log")

    yield tmp_path / "logs"

    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    mod._logger, mod._LOG_DIR, mod._LOG_FILE = old_logger, old_dir, old_file


@pytest.fixture
def make_lap():
    """Factory fixture for creating laps."""
    return _make_lap


@pytest.fixture
def make_driver_laps():
    """Factory fixture for creating one driver's laps in a heat."""
    return _make_driver_laps


@pytest.fixture
def sample_heats() -> list[Heat]:
    """Two heats on Saturday, one on Sunday."""
    return [
        Heat(id=1, external_id="H-001", category="Grand Prix", start_time=datetime(2023, 5, 6, 14, 0)),
        Heat(id=2, external_id="H-002", category="Training", start_time=datetime(2023, 5, 6, 15, 0)),
        Heat(id=3, external_id="H-003", category="Grand Prix", start_time=datetime(2023, 5, 7, 11, 0)),
    ]


@pytest.fixture
def sample_drivers() -> list[Driver]:
    return [
        Driver(id=1, name="anna de vries"),
        Driver(id=2, name="bram jansen"),
        Driver(id=3, name="chris bakker"),
    ]


@pytest.fixture
def sample_karts() -> list[Kart]:
    return [
        Kart(id=1, number=7),
        Kart(id=2, number=12),
        Kart(id=3, number=3, is_child_kart=True),
    ]


@pytest.fixture
def sample_laps() -> list[Lap]:
    """14 laps over 3 heats.

    heat 1: driver 1 (kart 7) 49.8 50.2 50.0, driver 2 (kart 12) 51.0 52.0 51.5
    heat 2: driver 1 (kart 12) 50.5 49.9,     driver 3 (kart 3) 55.0 54.0
    heat 3: driver 2 (kart 7) 50.9 50.1,      driver 3 (kart 3) 53.0 120.0
    """
    return (
        _make_driver_laps([49.8, 50.2, 50.0], driver_id=1, heat_id=1, kart_id=1)
        + _make_driver_laps([51.0, 52.0, 51.5], driver_id=2, heat_id=1, kart_id=2)
        + _make_driver_laps([50.5, 49.9], driver_id=1, heat_id=2, kart_id=2)
        + _make_driver_laps([55.0, 54.0], driver_id=3, heat_id=2, kart_id=3)
        + _make_driver_laps([50.9, 50.1], driver_id=2, heat_id=3, kart_id=1)
        + _make_driver_laps([53.0, 120.0], driver_id=3, heat_id=3, kart_id=3)
    )
