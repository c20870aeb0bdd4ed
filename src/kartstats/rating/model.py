"""Bayesian rating model interface and its openskill-backed implementation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from openskill.models import BradleyTerryFull

from kartstats.config import DEFAULT_RATING_CONFIG, RatingConfig
from kartstats.exceptions import RatingModelError
from kartstats.models.rating import Rating


class RatingModel(Protocol):
    """Updates single-competitor teams from one ranked outcome.

    ``teams`` and the returned list are parallel; a lower rank is a better
    finish. Hyperparameters are fixed for the lifetime of the model.
    """

    def update(self, teams: Sequence[Rating], ranks: Sequence[int]) -> list[Rating]: ...


class WengLinModel:
    """Weng-Lin Bradley-Terry (full pairing) multiplayer rating."""

    def __init__(self, config: RatingConfig = DEFAULT_RATING_CONFIG) -> None:
        self.config = config
        self._model = BradleyTerryFull(
            mu=config.mu,
            sigma=config.sigma,
            beta=config.beta,
            kappa=config.kappa,
            tau=config.tau,
        )

    def __repr__(self) -> str:
        return f"WengLinModel({self.config!r})"

    def initial_rating(self) -> Rating:
        """Prior rating for a driver that has never been rated."""
        return Rating(mu=self.config.mu, sigma=self.config.sigma)

    def update(self, teams: Sequence[Rating], ranks: Sequence[int]) -> list[Rating]:
        if len(teams) != len(ranks):
            raise RatingModelError(f"Got {len(teams)} teams but {len(ranks)} ranks")
        try:
            rated = self._model.rate(
                [[self._model.rating(mu=team.mu, sigma=team.sigma)] for team in teams],
                ranks=[int(rank) for rank in ranks],
            )
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise RatingModelError(f"Rating model failed: {exc}") from exc
        return [Rating(mu=team[0].mu, sigma=team[0].sigma) for team in rated]
