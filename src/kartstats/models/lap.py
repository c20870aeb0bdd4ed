"""Lap timing model."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field


class Lap(BaseModel):
    """One timed circuit by one driver, in one kart, during one heat."""

    model_config = ConfigDict(frozen=True)

    id: int
    heat_id: int
    driver_id: int
    kart_id: int
    ordinal: int = Field(ge=1)
    duration: float = Field(gt=0.0)

    @property
    def lap_timedelta(self) -> timedelta:
        """Lap duration as a timedelta."""
        return timedelta(seconds=self.duration)
