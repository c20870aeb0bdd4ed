"""Driver model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kartstats.models.rating import DEFAULT_MU, DEFAULT_SIGMA, Rating


class Driver(BaseModel):
    """A driver with their current rating state."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    rating_mu: float = DEFAULT_MU
    rating_sigma: float = Field(default=DEFAULT_SIGMA, gt=0.0)

    @property
    def rating(self) -> Rating:
        """Current rating as a Rating value."""
        return Rating(mu=self.rating_mu, sigma=self.rating_sigma)

    def with_rating(self, rating: Rating) -> Driver:
        """Return a copy of this driver carrying *rating*."""
        return self.model_copy(update={"rating_mu": rating.mu, "rating_sigma": rating.sigma})
