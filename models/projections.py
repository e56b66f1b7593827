"""
models/projections.py
---------------------
Result shapes produced by the join, grouping, and nesting queries.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.metro import MetroLine


@dataclass(frozen=True)
class MetroSystemWithCity:
    metro_system_name: str
    city_name: str
    daily_ridership: int


@dataclass(frozen=True)
class MetroLineWithSystemCityNames:
    metro_line_name: str
    metro_system_name: str
    city_name: str
    station_count: int


@dataclass(frozen=True)
class MetroSystemWithLineCount:
    metro_system_name: str
    city_name: str
    line_count: int


@dataclass
class MetroSystemWithLines:
    id: int
    name: str
    daily_ridership: int
    lines: list[MetroLine] = field(default_factory=list)


@dataclass
class CityWithSystems:
    id: int
    name: str
    population: int
    area: float
    link: Optional[str]
    systems: list[MetroSystemWithLines] = field(default_factory=list)
