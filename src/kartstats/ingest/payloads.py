"""Models for the venue's heat results payload."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HeatInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    start_time: datetime = Field(alias="StartTime")
    heat_type_name: str = Field(default="", alias="HeatTypeName")
    participation_count: int | None = Field(default=None, alias="ParticipationCount")
    join_heats: bool | None = Field(default=None, alias="JoinHeats")


class ParticipationInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver_name: str = Field(alias="driverName")


class ResultInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kart_number: int = Field(alias="KartNr")
    lap_times: list[float] = Field(default_factory=list, alias="LapTimes")


class HeatResultEntry(BaseModel):
    """One driver's participation and lap times."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    participation: ParticipationInfo = Field(alias="Participation")
    result: ResultInfo = Field(alias="Result")


class HeatResultPayload(BaseModel):
    """Full results of a single heat."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    heat: HeatInfo = Field(alias="Heat")
    results: list[HeatResultEntry] = Field(default_factory=list, alias="Results")


class HeatId(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="Id")


class HeatList(BaseModel):
    """Heats listed by the endpoint when no heat id is given."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    heats: list[HeatId] = Field(default_factory=list, alias="Results")
