"""Skill rating models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MU = 25.0
DEFAULT_SIGMA = 25.0 / 3.0


class Rating(BaseModel):
    """Estimated skill (mu) and its uncertainty (sigma)."""

    model_config = ConfigDict(frozen=True)

    mu: float = DEFAULT_MU
    sigma: float = Field(default=DEFAULT_SIGMA, gt=0.0)

    @property
    def ordinal(self) -> float:
        """Conservative skill estimate, mu minus three sigma."""
        return self.mu - 3.0 * self.sigma


class DriverRating(BaseModel):
    """Updated rating of one driver, ready to be written back."""

    model_config = ConfigDict(frozen=True)

    driver_id: int
    mu: float
    sigma: float = Field(gt=0.0)

    @property
    def rating(self) -> Rating:
        return Rating(mu=self.mu, sigma=self.sigma)
