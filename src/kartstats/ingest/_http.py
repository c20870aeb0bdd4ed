"""Low-level HTTP transport for the venue's results endpoint, wrapping httpx."""

from __future__ import annotations

import json
from typing import Any

import httpx

from kartstats.exceptions import (
    IngestAPIError,
    IngestConnectionError,
    IngestTimeoutError,
    IngestValidationError,
)

DEFAULT_BASE_URL = "http://reserveren.kartbaangroningen.nl"
RESULTS_ENDPOINT = "/GetHeatResults.ashx"
DEFAULT_TIMEOUT = 30.0


def strip_jsonp(body: str) -> str:
    """Remove the ``(`` ... ``);`` wrapper the endpoint puts around its JSON."""
    text = body.strip()
    if text.startswith("("):
        text = text[1:]
    if text.endswith(");"):
        text = text[:-2]
    elif text.endswith(")"):
        text = text[:-1]
    return text


def _handle_response(response: httpx.Response) -> dict[str, Any]:
    """Validate response status and return the unwrapped JSON object."""
    if response.status_code >= 400:
        raise IngestAPIError(
            status_code=response.status_code,
            message=response.text,
        )
    try:
        data = json.loads(strip_jsonp(response.text))
    except json.JSONDecodeError as exc:
        raise IngestValidationError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise IngestValidationError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class SyncTransport:
    """Synchronous HTTP transport using httpx.Client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json, text/javascript"},
        )

    def get(self, endpoint: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Perform a GET request and return the parsed payload."""
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise IngestConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise IngestTimeoutError(str(exc)) from exc
        return _handle_response(response)

    def close(self) -> None:
        self._client.close()
