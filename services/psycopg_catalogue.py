"""
services/psycopg_catalogue.py
-----------------------------
The example queries written as plain SQL on psycopg2.
Reads and single writes go through the repositories; the transaction
example borrows one connection and runs both statements on it.
"""

from typing import Optional

from db.connection import transaction
from models.city import City
from models.metro import MetroLine
from models.projections import (
    CityWithSystems,
    MetroLineWithSystemCityNames,
    MetroSystemWithCity,
    MetroSystemWithLineCount,
)
from repositories.city_repo import CityRepository
from repositories.metro_repo import MetroRepository
from services.aggregation import nest_cities
from services.catalogue import (
    BIG_CITY_POPULATION,
    PLAIN_SQL,
    QueryCatalogue,
    invalid_city,
    new_york,
)
from services.filters import EXAMPLE_FILTER, LineFilter
from utils.logger import get_logger
from utils.reporter import log_message, log_results

logger = get_logger(__name__)


class PsycopgCatalogue(QueryCatalogue):
    """Query catalogue backed by psycopg2 and hand-written SQL."""

    name = "psycopg2"

    def __init__(self):
        self.cities = CityRepository()
        self.metro = MetroRepository()

    def insert_with_generated_id(self) -> City:
        city = self.cities.add(new_york())
        logger.debug(f"Generated id {city.id} for '{city.name}'")
        log_message(f"Inserted, generated id: {city.id}")
        return city

    def get_city(self, city_id: int) -> Optional[City]:
        return self.cities.get_by_id(city_id)

    def count_cities_named(self, name: str) -> int:
        return self.cities.count_by_name(name)

    def select_all(self) -> list[City]:
        return log_results("All cities", self.cities.get_all())

    def select_all_lines(self) -> list[MetroLine]:
        return log_results("All lines", self.metro.get_all_lines())

    def select_names_of_big(self) -> list[str]:
        return log_results(
            "All city names with population over 4M",
            self.cities.get_names_with_population_over(BIG_CITY_POPULATION),
        )

    def select_metro_systems_with_city_names(self) -> list[MetroSystemWithCity]:
        return log_results("Metro systems with city names", self.metro.get_systems_with_city_names())

    def select_metro_lines_sorted_by_stations(self) -> list[MetroLineWithSystemCityNames]:
        return log_results("Metro lines sorted by station count", self.metro.get_lines_sorted_by_stations())

    def select_metro_systems_with_most_lines(self) -> list[MetroSystemWithLineCount]:
        return log_results("Metro systems with most lines", self.metro.get_systems_with_most_lines())

    def select_cities_with_systems_and_lines(self) -> list[CityWithSystems]:
        return log_results(
            "Cities with list of systems with list of lines",
            nest_cities(self.metro.get_lines_with_systems_and_cities()),
        )

    def select_lines_constrained_dynamically(self, line_filter: LineFilter = EXAMPLE_FILTER) -> list[MetroLine]:
        return log_results("Lines constrained dynamically", self.metro.get_lines_filtered(line_filter))

    def plain_sql(self) -> list[MetroSystemWithCity]:
        return log_results("Plain sql", self.metro.fetch_as(MetroSystemWithCity, PLAIN_SQL))

    def transactions(self, city: Optional[City] = None) -> int:
        """Insert a city and delete it again, atomically."""
        print("Transactions")
        with transaction() as conn:
            with conn.cursor() as cur:
                inserted = CityRepository.insert(cur, city or invalid_city())
                deleted = CityRepository.delete(cur, inserted.id)
        logger.info(f"Transaction inserted city #{inserted.id} and deleted {deleted} row(s)")
        log_message(f"Deleted {deleted} rows")
        return deleted
