"""Client for the venue's heat results endpoint."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ValidationError

from kartstats._logging import log_service_call
from kartstats.exceptions import IngestValidationError
from kartstats.ingest._http import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    RESULTS_ENDPOINT,
    SyncTransport,
)
from kartstats.ingest.payloads import HeatList, HeatResultPayload


def _validate[T: BaseModel](model_type: type[T], data: dict[str, Any]) -> T:
    """Validate a payload dict against a Pydantic model."""
    try:
        return model_type.model_validate(data)
    except ValidationError as exc:
        raise IngestValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


class HeatResultsClient:
    """Synchronous client for the results endpoint.

    Usage:
        with HeatResultsClient() as client:
            for heat_id in client.todays_heat_ids():
                payload = client.heat(heat_id)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport = SyncTransport(base_url=base_url, timeout=timeout)

    def __enter__(self) -> HeatResultsClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    @log_service_call
    def todays_heat_ids(self) -> list[str]:
        """Ids of the heats the endpoint lists for today."""
        data = self._transport.get(RESULTS_ENDPOINT)
        return [heat.id for heat in _validate(HeatList, data).heats]

    @log_service_call
    def heat(self, heat_id: str) -> HeatResultPayload:
        """Results of a single heat."""
        data = self._transport.get(RESULTS_ENDPOINT, params={"heat": heat_id})
        return _validate(HeatResultPayload, data)

    def heats(self, heat_ids: Iterable[str]) -> list[HeatResultPayload]:
        """Results of several heats, fetched one after another."""
        return [self.heat(heat_id) for heat_id in heat_ids]
