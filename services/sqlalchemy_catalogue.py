"""
services/sqlalchemy_catalogue.py
--------------------------------
The example queries written with SQLAlchemy's ORM and `select()` builder.
Every operation opens its own session; `Session.begin()` scopes the
transaction so a failure inside the block rolls everything back.
"""

from typing import Optional

from sqlalchemy import and_, delete, func, select, text, true
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import Select

from models.city import City
from models.metro import MetroLine
from models.projections import (
    CityWithSystems,
    MetroLineWithSystemCityNames,
    MetroSystemWithCity,
    MetroSystemWithLineCount,
)
from orm.models import CityModel, MetroLineModel, MetroSystemModel
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


def build_lines_statement(line_filter: LineFilter) -> Select:
    """
    Compose the metro line query for `line_filter`.

    An absent bound contributes `true()`, which SQLAlchemy folds away
    inside `and_()`; a present bound is an inclusive comparison.
    """
    station_count = MetroLineModel.station_count
    min_clause = station_count >= line_filter.min_stations if line_filter.min_stations is not None else true()
    max_clause = station_count <= line_filter.max_stations if line_filter.max_stations is not None else true()
    order = station_count.desc() if line_filter.sort_desc else station_count.asc()
    return select(MetroLineModel).where(and_(min_clause, max_clause)).order_by(order)


def _lines_systems_cities(*columns) -> Select:
    """SELECT `columns` FROM metro_line JOIN metro_system JOIN city."""
    return (
        select(*columns)
        .select_from(MetroLineModel)
        .join(MetroSystemModel, MetroLineModel.system_id == MetroSystemModel.id)
        .join(CityModel, MetroSystemModel.city_id == CityModel.id)
    )


class SqlAlchemyCatalogue(QueryCatalogue):
    """Query catalogue backed by the SQLAlchemy ORM."""

    name = "sqlalchemy"

    def __init__(self, session_factory: sessionmaker):
        self.Session = session_factory

    def insert_with_generated_id(self) -> City:
        with self.Session.begin() as session:
            row = self._to_model(new_york())
            session.add(row)
            session.flush()
            city = row.to_domain()
        logger.debug(f"Generated id {city.id} for '{city.name}'")
        log_message(f"Inserted, generated id: {city.id}")
        return city

    def get_city(self, city_id: int) -> Optional[City]:
        with self.Session() as session:
            row = session.get(CityModel, city_id)
            return row.to_domain() if row else None

    def count_cities_named(self, name: str) -> int:
        with self.Session() as session:
            return session.scalar(select(func.count()).select_from(CityModel).where(CityModel.name == name))

    def select_all(self) -> list[City]:
        with self.Session() as session:
            rows = session.scalars(select(CityModel).order_by(CityModel.id)).all()
            return log_results("All cities", [r.to_domain() for r in rows])

    def select_all_lines(self) -> list[MetroLine]:
        with self.Session() as session:
            rows = session.scalars(select(MetroLineModel).order_by(MetroLineModel.id)).all()
            return log_results("All lines", [r.to_domain() for r in rows])

    def select_names_of_big(self) -> list[str]:
        stmt = select(CityModel.name).where(CityModel.population > BIG_CITY_POPULATION).order_by(CityModel.id)
        with self.Session() as session:
            return log_results("All city names with population over 4M", session.scalars(stmt).all())

    def select_metro_systems_with_city_names(self) -> list[MetroSystemWithCity]:
        stmt = (
            select(MetroSystemModel.name, CityModel.name, MetroSystemModel.daily_ridership)
            .select_from(MetroSystemModel)
            .join(CityModel, MetroSystemModel.city_id == CityModel.id)
            .order_by(MetroSystemModel.id)
        )
        with self.Session() as session:
            return log_results(
                "Metro systems with city names",
                [MetroSystemWithCity(*r) for r in session.execute(stmt)],
            )

    def select_metro_lines_sorted_by_stations(self) -> list[MetroLineWithSystemCityNames]:
        stmt = _lines_systems_cities(
            MetroLineModel.name, MetroSystemModel.name, CityModel.name, MetroLineModel.station_count
        ).order_by(MetroLineModel.station_count.desc())
        with self.Session() as session:
            return log_results(
                "Metro lines sorted by station count",
                [MetroLineWithSystemCityNames(*r) for r in session.execute(stmt)],
            )

    def select_metro_systems_with_most_lines(self) -> list[MetroSystemWithLineCount]:
        line_count = func.count(MetroLineModel.id).label("line_count")
        stmt = (
            _lines_systems_cities(MetroSystemModel.name, CityModel.name, line_count)
            .group_by(MetroSystemModel.id, CityModel.id, MetroSystemModel.name, CityModel.name)
            .order_by(line_count.desc())
        )
        with self.Session() as session:
            return log_results(
                "Metro systems with most lines",
                [MetroSystemWithLineCount(*r) for r in session.execute(stmt)],
            )

    def select_cities_with_systems_and_lines(self) -> list[CityWithSystems]:
        stmt = _lines_systems_cities(MetroLineModel, MetroSystemModel, CityModel).order_by(
            CityModel.id, MetroSystemModel.id, MetroLineModel.id
        )
        with self.Session() as session:
            rows = [(ml.to_domain(), ms.to_domain(), c.to_domain()) for ml, ms, c in session.execute(stmt)]
        return log_results("Cities with list of systems with list of lines", nest_cities(rows))

    def select_lines_constrained_dynamically(self, line_filter: LineFilter = EXAMPLE_FILTER) -> list[MetroLine]:
        with self.Session() as session:
            rows = session.scalars(build_lines_statement(line_filter)).all()
            return log_results("Lines constrained dynamically", [r.to_domain() for r in rows])

    def plain_sql(self) -> list[MetroSystemWithCity]:
        with self.Session() as session:
            rows = session.execute(text(PLAIN_SQL)).mappings()
            return log_results("Plain sql", [MetroSystemWithCity(**r) for r in rows])

    def transactions(self, city: Optional[City] = None) -> int:
        """Insert a city and delete it again, atomically."""
        print("Transactions")
        with self.Session.begin() as session:
            row = self._to_model(city or invalid_city())
            session.add(row)
            session.flush()
            deleted = self._delete_city(session, row.id)
            logger.info(f"Transaction inserted city #{row.id} and deleted {deleted} row(s)")
        log_message(f"Deleted {deleted} rows")
        return deleted

    @staticmethod
    def _delete_city(session: Session, city_id: int) -> int:
        result = session.execute(
            delete(CityModel).where(CityModel.id == city_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    @staticmethod
    def _to_model(city: City) -> CityModel:
        return CityModel(name=city.name, population=city.population, area=city.area, link=city.link)
