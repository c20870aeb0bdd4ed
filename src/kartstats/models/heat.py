"""Heat (race session) model."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator


class Heat(BaseModel):
    """A single race or qualifying session at the track.

    ``start_time`` is the track's local wall-clock time without an offset, so
    heats always compare and sort against each other.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    external_id: str
    category: str = ""
    start_time: datetime

    @field_validator("start_time")
    @classmethod
    def _naive_local_time(cls, value: datetime) -> datetime:
        if value.utcoffset() is not None:
            raise ValueError("start_time must be local time without a UTC offset")
        return value

    @property
    def day(self) -> date:
        """Calendar day the heat started on."""
        return self.start_time.date()
