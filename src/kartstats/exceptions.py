"""Custom exceptions for kartstats."""

from __future__ import annotations


class KartStatsError(Exception):
    """Base exception for all kartstats errors."""


class ConfigError(KartStatsError, ValueError):
    """Raised when a configuration value cannot be parsed or is out of range."""


class EmptyInputError(KartStatsError, ValueError):
    """Raised when a statistic is requested over zero laps."""


class DanglingReferenceError(KartStatsError):
    """Raised when a lap references a heat, driver or kart that was not supplied."""

    def __init__(self, lap_id: int, kind: str, ref_id: object) -> None:
        self.lap_id = lap_id
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(f"Lap {lap_id} references unknown {kind} {ref_id!r}")


class LapOrdinalError(KartStatsError):
    """Raised when a driver's lap ordinals within a heat are not 1..n."""


class InsufficientCompetitorsError(KartStatsError):
    """Raised when a heat has fewer than two ranked drivers."""

    def __init__(self, heat_id: int, competitors: int) -> None:
        self.heat_id = heat_id
        self.competitors = competitors
        super().__init__(
            f"Heat {heat_id} has {competitors} ranked driver(s), at least 2 are needed"
        )


class MissingRatingError(KartStatsError):
    """Raised when a participating driver has no prior rating state."""

    def __init__(self, driver_id: int) -> None:
        self.driver_id = driver_id
        super().__init__(f"No rating state for driver {driver_id}")


class HeatAlreadyRatedError(KartStatsError):
    """Raised when a heat that is not in the unrated state is submitted for rating."""


class HeatOrderError(KartStatsError):
    """Raised when a heat is rated before a heat that started earlier."""


class RatingModelError(KartStatsError):
    """Raised when the rating model fails or returns a malformed answer."""


class RatingPersistenceError(KartStatsError):
    """Raised when the updated ratings of a heat could not be written."""

    def __init__(self, heat_id: int, message: str) -> None:
        self.heat_id = heat_id
        super().__init__(f"Heat {heat_id}: {message}")


class PartialPersistenceError(RatingPersistenceError):
    """Raised when only some of a heat's rating writes succeeded.

    The heat must be retried as a whole; the written ids are reported so the
    caller can roll them back.
    """

    def __init__(self, heat_id: int, written: list[int], failed_driver_id: int) -> None:
        self.written = written
        self.failed_driver_id = failed_driver_id
        super().__init__(
            heat_id,
            f"wrote {len(written)} rating(s) before driver {failed_driver_id} failed",
        )


class IngestError(KartStatsError):
    """Base exception for the results ingestion adapter."""


class IngestConnectionError(IngestError):
    """Raised when the client cannot connect to the results endpoint."""


class IngestTimeoutError(IngestError):
    """Raised when a request to the results endpoint times out."""


class IngestAPIError(IngestError):
    """Raised when the results endpoint returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class IngestValidationError(IngestError):
    """Raised when a results payload fails model validation."""


class DuplicateHeatError(IngestError):
    """Raised when a heat that is already registered is normalized again."""
