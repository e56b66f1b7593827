"""
repositories/city_repo.py
--------------------------
Data access layer for cities.
All SQL queries related to the `city` table live here.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.city import City
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, population, area, link"


class CityRepository:
    """Repository for CRUD operations on the city table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, city: City) -> City:
        """
        Insert a new city.

        Args:
            city: The City domain object to persist.

        Returns:
            The same City with its generated `id` populated.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                self.insert(cur, city)
            conn.commit()
            logger.info(f"Added city '{city.name}' #{city.id}")
            return city
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add city: {e}")
            raise
        finally:
            release_connection(conn)

    @staticmethod
    def insert(cur, city: City) -> City:
        """Insert on a caller-owned cursor; the caller commits."""
        cur.execute(
            "INSERT INTO city (name, population, area, link) VALUES (%s, %s, %s, %s) RETURNING id;",
            (city.name, city.population, city.area, city.link),
        )
        city.id = cur.fetchone()[0]
        return city

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, city_id: int) -> Optional[City]:
        """Fetch a single city by primary key, or None if absent."""
        sql = f"SELECT {_COLUMNS} FROM city WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (city_id,))
                row = cur.fetchone()
                return self._row_to_city(row) if row else None
        finally:
            release_connection(conn)

    def get_all(self) -> list[City]:
        """Fetch every city ordered by id."""
        sql = f"SELECT {_COLUMNS} FROM city ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_city(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_names_with_population_over(self, limit: int) -> list[str]:
        """Names of cities whose population is strictly greater than `limit`."""
        sql = "SELECT name FROM city WHERE population > %s ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (limit,))
                return [r[0] for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def count_by_name(self, name: str) -> int:
        sql = "SELECT COUNT(*) FROM city WHERE name = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (name,))
                return cur.fetchone()[0]
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    @staticmethod
    def delete(cur, city_id: int) -> int:
        """Delete on a caller-owned cursor and return the number of rows removed."""
        cur.execute("DELETE FROM city WHERE id = %s;", (city_id,))
        return cur.rowcount

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_city(row: tuple) -> City:
        """Convert a database row tuple to a City domain object."""
        return City(
            id=row[0],
            name=row[1],
            population=row[2],
            area=float(row[3]),
            link=row[4],
        )
