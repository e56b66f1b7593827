"""
models/city.py
--------------
Domain model for cities served by a metro.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class City:
    """
    A city row.

    Attributes:
        name: City name.
        population: Number of inhabitants.
        area: Area in square kilometres.
        link: Optional external web page.
        id: Database primary key (None for new records).
    """
    name: str
    population: int
    area: float
    link: Optional[str] = None
    id: Optional[int] = None
