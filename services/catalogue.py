"""
services/catalogue.py
---------------------
The fixed sequence of example queries every library runs.
Each library module subclasses QueryCatalogue and implements the operations;
`run_all()` executes them in order and prints one report block per operation.
"""

from models.city import City
from utils.logger import get_logger

logger = get_logger(__name__)

BIG_CITY_POPULATION = 4_000_000
INVALID_CITY_NAME = "Invalid"

PLAIN_SQL = """
    SELECT ms.name AS metro_system_name, c.name AS city_name, ms.daily_ridership AS daily_ridership
    FROM metro_system AS ms
    JOIN city AS c ON ms.city_id = c.id
    ORDER BY ms.daily_ridership DESC
"""


def new_york() -> City:
    return City(name="New York", population=19795791, area=141300.0, link=None)


def invalid_city() -> City:
    return City(name=INVALID_CITY_NAME, population=0, area=0.0, link=None)


class QueryCatalogue:
    """Base class for a library's rendition of the example queries."""

    name = ""

    OPERATIONS = (
        "insert_with_generated_id",
        "select_all",
        "select_all_lines",
        "select_names_of_big",
        "select_metro_systems_with_city_names",
        "select_metro_lines_sorted_by_stations",
        "select_metro_systems_with_most_lines",
        "select_cities_with_systems_and_lines",
        "select_lines_constrained_dynamically",
        "plain_sql",
        "transactions",
    )

    def run_all(self) -> None:
        """Execute every operation in order; the first failure aborts the rest."""
        logger.info(f"Running {self.name} examples")
        for operation in self.OPERATIONS:
            logger.debug(f"{self.name}: {operation}")
            getattr(self, operation)()
        logger.info(f"Finished {self.name} examples")
