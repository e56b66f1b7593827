"""
repositories/metro_repo.py
---------------------------
Data access layer for metro systems and metro lines.
Covers the joins across city, metro_system and metro_line.
"""

from psycopg2 import extras

from db.connection import get_connection, release_connection
from models.city import City
from models.metro import MetroLine, MetroSystem, TrackType
from models.projections import (
    MetroLineWithSystemCityNames,
    MetroSystemWithCity,
    MetroSystemWithLineCount,
)
from services.filters import LineFilter
from utils.logger import get_logger

logger = get_logger(__name__)

_LINE_COLUMNS = "ml.id, ml.system_id, ml.name, ml.station_count, ml.track_type"


def build_lines_query(line_filter: LineFilter) -> tuple[str, list]:
    """
    Compose the SELECT for metro lines matching `line_filter`.

    Absent bounds add no condition; present bounds add an inclusive
    comparison. Only the fixed strings ASC/DESC are ever spliced in.

    Returns:
        The SQL text and its positional parameters.
    """
    sql = f"SELECT {_LINE_COLUMNS} FROM metro_line AS ml WHERE TRUE"
    params: list = []
    if line_filter.min_stations is not None:
        sql += " AND ml.station_count >= %s"
        params.append(line_filter.min_stations)
    if line_filter.max_stations is not None:
        sql += " AND ml.station_count <= %s"
        params.append(line_filter.max_stations)
    sql += f" ORDER BY ml.station_count {line_filter.direction};"
    return sql, params


class MetroRepository:
    """Read-side queries over metro_system and metro_line."""

    # ── LINES ─────────────────────────────────────────────

    def get_all_lines(self) -> list[MetroLine]:
        """Fetch every metro line ordered by id."""
        sql = f"SELECT {_LINE_COLUMNS} FROM metro_line AS ml ORDER BY ml.id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_line(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_lines_filtered(self, line_filter: LineFilter) -> list[MetroLine]:
        """Fetch lines constrained by an optional station-count range."""
        sql, params = build_lines_query(line_filter)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_line(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── JOINS ─────────────────────────────────────────────

    def get_systems_with_city_names(self) -> list[MetroSystemWithCity]:
        """Metro systems joined with the name of the city they serve."""
        sql = """
            SELECT ms.name, c.name, ms.daily_ridership
            FROM metro_system AS ms
            JOIN city AS c ON c.id = ms.city_id
            ORDER BY ms.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [MetroSystemWithCity(*r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_lines_sorted_by_stations(self) -> list[MetroLineWithSystemCityNames]:
        """Lines with their system and city names, most stations first."""
        sql = """
            SELECT ml.name, ms.name, c.name, ml.station_count
            FROM metro_line AS ml
            JOIN metro_system AS ms ON ms.id = ml.system_id
            JOIN city AS c ON c.id = ms.city_id
            ORDER BY ml.station_count DESC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [MetroLineWithSystemCityNames(*r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_systems_with_most_lines(self) -> list[MetroSystemWithLineCount]:
        """Systems with the number of lines they run, largest first."""
        sql = """
            SELECT ms.name, c.name, COUNT(ml.id) AS line_count
            FROM metro_line AS ml
            JOIN metro_system AS ms ON ms.id = ml.system_id
            JOIN city AS c ON c.id = ms.city_id
            GROUP BY ms.id, c.id, ms.name, c.name
            ORDER BY line_count DESC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [MetroSystemWithLineCount(*r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_lines_with_systems_and_cities(self) -> list[tuple[MetroLine, MetroSystem, City]]:
        """
        One row per line, joined with its system and city.

        Returns:
            (MetroLine, MetroSystem, City) triples ordered by city, system, line id.
        """
        sql = f"""
            SELECT {_LINE_COLUMNS},
                   ms.id, ms.city_id, ms.name, ms.daily_ridership,
                   c.id, c.name, c.population, c.area, c.link
            FROM metro_line AS ml
            JOIN metro_system AS ms ON ms.id = ml.system_id
            JOIN city AS c ON c.id = ms.city_id
            ORDER BY c.id, ms.id, ml.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [
                    (
                        self._row_to_line(r[0:5]),
                        MetroSystem(id=r[5], city_id=r[6], name=r[7], daily_ridership=r[8]),
                        City(id=r[9], name=r[10], population=r[11], area=float(r[12]), link=r[13]),
                    )
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    # ── RAW SQL ───────────────────────────────────────────

    def fetch_as(self, record_type, sql: str, params: tuple = ()) -> list:
        """
        Run arbitrary SQL and build `record_type` from each row by column name.

        Column aliases in `sql` must match the record's field names.
        """
        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                return [record_type(**row) for row in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_line(row: tuple) -> MetroLine:
        """Convert a database row tuple to a MetroLine domain object."""
        return MetroLine(
            id=row[0],
            system_id=row[1],
            name=row[2],
            station_count=row[3],
            track_type=TrackType.by_id(row[4]),
        )
