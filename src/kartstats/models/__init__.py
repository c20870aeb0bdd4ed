"""kartstats data models."""

from kartstats.models.driver import Driver
from kartstats.models.heat import Heat
from kartstats.models.kart import Kart
from kartstats.models.lap import Lap
from kartstats.models.rating import DriverRating, Rating

__all__ = [
    "Driver",
    "DriverRating",
    "Heat",
    "Kart",
    "Lap",
    "Rating",
]
