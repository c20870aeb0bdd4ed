"""Kart model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Kart(BaseModel):
    """A kart from the venue's fleet, identified by its painted number."""

    model_config = ConfigDict(frozen=True)

    id: int
    number: int
    is_child_kart: bool = False
