"""Request logging for the results ingestion client."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

LOGGER_NAME = "kartstats.service"

_LOG_DIR = os.environ.get("KARTSTATS_LOG_DIR", os.path.join(os.getcwd(), "logs"))
_LOG_FILE = os.path.join(_LOG_DIR, "service_calls.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _get_logger() -> logging.Logger:
    """Return the service logger, attaching the file handler on first use.

    When the log directory cannot be created or written, records go to the
    host application's handlers instead.
    """
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG)

        if not logger.handlers:
            try:
                os.makedirs(_LOG_DIR, exist_ok=True)
                handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            except OSError:
                logger.propagate = True
            else:
                handler.setFormatter(
                    logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
                )
                logger.addHandler(handler)
                logger.propagate = False
        _logger = logger

    return _logger


def _summarise(value: Any) -> str:
    # payloads can be long; log their size or type, not their contents
    if isinstance(value, (str, int, float, bool, type(None))):
        return repr(value)
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return f"<{type(value).__name__} of {len(value)}>"
    return f"<{type(value).__name__}>"


def log_service_call(fn: F) -> F:
    """Log each call to the results endpoint with its outcome and duration."""

    @functools.wraps(fn)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        call = "{}({})".format(
            fn.__qualname__,
            ", ".join(
                [_summarise(a) for a in args]
                + [f"{k}={_summarise(v)}" for k, v in kwargs.items()]
            ),
        )
        logger.info("SERVICE CALL: %s", call)

        start = time.monotonic()
        try:
            result = fn(self, *args, **kwargs)
        except Exception as exc:
            logger.error(
                "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, time.monotonic() - start,
            )
            raise
        logger.info(
            "SERVICE OK: %s -> %s (%.3fs)",
            fn.__qualname__, _summarise(result), time.monotonic() - start,
        )
        return result

    return wrapper  # type: ignore[return-value]
