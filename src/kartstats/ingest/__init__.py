"""Adapter from the venue's results endpoint to kartstats records."""

from kartstats.ingest.client import HeatResultsClient
from kartstats.ingest.normalize import (
    EntityRegistry,
    NormalizedHeat,
    normalize_heat,
    sanitize_driver_name,
)
from kartstats.ingest.payloads import HeatResultPayload

__all__ = [
    "EntityRegistry",
    "HeatResultPayload",
    "HeatResultsClient",
    "NormalizedHeat",
    "normalize_heat",
    "sanitize_driver_name",
]
