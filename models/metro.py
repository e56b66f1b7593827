"""
models/metro.py
---------------
Domain models for metro systems and the lines they operate.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class TrackType(IntEnum):
    """Kind of track a line runs on; stored as its integer code."""
    RAIL = 1
    MONORAIL = 2
    RUBBER = 3

    @classmethod
    def by_id(cls, code: int) -> "TrackType":
        """Decode a stored code, raising ValueError for unknown ones."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown track type: {code}") from None


@dataclass
class MetroSystem:
    """
    A metro operator.

    Attributes:
        city_id: The City this system serves.
        name: Operator name.
        daily_ridership: Average passengers per day.
        id: Database primary key (None for new records).
    """
    city_id: int
    name: str
    daily_ridership: int
    id: Optional[int] = None


@dataclass
class MetroLine:
    """
    A single line of a metro system.

    Attributes:
        system_id: The MetroSystem operating this line.
        name: Line name.
        station_count: Number of stations.
        track_type: Kind of track.
        id: Database primary key (None for new records).
    """
    system_id: int
    name: str
    station_count: int
    track_type: TrackType = TrackType.RAIL
    id: Optional[int] = None
