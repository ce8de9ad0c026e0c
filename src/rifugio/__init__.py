"""Bed availability checker for the Rifugio Lagazuoi booking calendar.

Opens each available day's detail overlay, reads the free-bed count and
reports which days in a range have enough beds.
"""

from src.rifugio.checker import AvailabilityChecker
from src.rifugio.models import UNAVAILABLE, AvailabilityCell, RevealResult
from src.rifugio.parsing import parse_capacity

__all__ = [
    "AvailabilityChecker",
    "AvailabilityCell",
    "RevealResult",
    "UNAVAILABLE",
    "parse_capacity",
]
