"""Tunable constants for lap classification and driver rating."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kartstats.exceptions import ConfigError

ENV_PREFIX = "KARTSTATS_"


class CenterStrategy(str, Enum):
    """Center value that the outlier threshold is measured from."""

    MEDIAN = "median"
    MEAN = "mean"


class StatsConfig(BaseModel):
    """Outlier classification settings.

    The defaults match the Groningen track: anything under 45 seconds cannot
    be a real lap there.
    """

    model_config = ConfigDict(frozen=True)

    outlier_stddev_multiplier: float = Field(default=2.0, ge=0.0)
    outlier_floor_seconds: float = Field(default=45.0, ge=0.0)
    center: CenterStrategy = CenterStrategy.MEDIAN

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StatsConfig:
        """Build a config from ``KARTSTATS_OUTLIER_*`` environment variables."""
        return _from_env(
            cls,
            environ,
            {
                "outlier_stddev_multiplier": "OUTLIER_STDDEV_MULTIPLIER",
                "outlier_floor_seconds": "OUTLIER_FLOOR_SECONDS",
                "center": "OUTLIER_CENTER",
            },
        )


class RatingConfig(BaseModel):
    """Hyperparameters of the Weng-Lin rating model."""

    model_config = ConfigDict(frozen=True)

    mu: float = 25.0
    sigma: float = Field(default=25.0 / 3.0, gt=0.0)
    beta: float = Field(default=25.0 / 6.0, gt=0.0)
    kappa: float = Field(default=0.000_001, gt=0.0)
    tau: float = Field(default=0.0, ge=0.0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RatingConfig:
        """Build a config from ``KARTSTATS_RATING_*`` environment variables."""
        return _from_env(
            cls,
            environ,
            {name: f"RATING_{name.upper()}" for name in ("mu", "sigma", "beta", "kappa", "tau")},
        )


def _from_env[T: BaseModel](
    model: type[T],
    environ: Mapping[str, str] | None,
    fields: dict[str, str],
) -> T:
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for field, suffix in fields.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is not None and raw.strip():
            values[field] = raw.strip().lower() if field == "center" else raw.strip()
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {model.__name__} from environment: {exc}") from exc


DEFAULT_STATS_CONFIG = StatsConfig()
DEFAULT_RATING_CONFIG = RatingConfig()
