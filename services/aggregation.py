"""
services/aggregation.py
-----------------------
Turns flat (line, system, city) join rows into a city → system → line tree.
"""

from typing import Iterable

from models.city import City
from models.metro import MetroLine, MetroSystem
from models.projections import CityWithSystems, MetroSystemWithLines


def nest_cities(rows: Iterable[tuple[MetroLine, MetroSystem, City]]) -> list[CityWithSystems]:
    """
    Group every line under its system and every system under its city.

    Grouping is by the foreign keys (`system_id`, `city_id`), so each line
    and each system appears exactly once. Cities and systems keep the order
    in which they first occur in `rows`.

    Args:
        rows: Join rows, one per metro line.

    Returns:
        One CityWithSystems per distinct city present in `rows`.
    """
    cities: dict[int, CityWithSystems] = {}
    systems: dict[int, MetroSystemWithLines] = {}

    for line, system, city in rows:
        if line.system_id != system.id or system.city_id != city.id:
            raise ValueError(f"Join row does not match its keys: {line}, {system}, {city}")

        city_node = cities.get(city.id)
        if city_node is None:
            city_node = CityWithSystems(city.id, city.name, city.population, city.area, city.link)
            cities[city.id] = city_node

        system_node = systems.get(system.id)
        if system_node is None:
            system_node = MetroSystemWithLines(system.id, system.name, system.daily_ridership)
            systems[system.id] = system_node
            city_node.systems.append(system_node)

        system_node.lines.append(line)

    return list(cities.values())
