"""
services/filters.py
-------------------
Station-count filter for metro lines, composed at call time.
An absent bound matches everything; a present bound is inclusive.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LineFilter:
    """
    Attributes:
        min_stations: Lower bound on station_count, or None for no bound.
        max_stations: Upper bound on station_count, or None for no bound.
        sort_desc: Sort by station_count descending instead of ascending.
    """
    min_stations: Optional[int] = None
    max_stations: Optional[int] = None
    sort_desc: bool = False

    def matches(self, station_count: int) -> bool:
        """Evaluate the predicate in Python, mirroring the generated SQL."""
        if self.min_stations is not None and station_count < self.min_stations:
            return False
        if self.max_stations is not None and station_count > self.max_stations:
            return False
        return True

    @property
    def direction(self) -> str:
        return "DESC" if self.sort_desc else "ASC"


# The example run asks for lines with at least 10 stations, longest first.
EXAMPLE_FILTER = LineFilter(min_stations=10, max_stations=None, sort_desc=True)
