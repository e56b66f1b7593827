"""
db/migrate.py
-------------
Versioned schema migrations, applied the way Flyway does it.
Scripts named ``V<version>__<description>.sql`` in db/migrations/ are run
in version order; each applied version is recorded in ``schema_history``
together with a checksum of the script.
Run this module directly to clean and migrate the configured database:
    python -m db.migrate
"""

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_FILENAME_RE = re.compile(r"^V(\d+)__(\w+)\.sql$")

HISTORY_SQL = """
CREATE TABLE IF NOT EXISTS schema_history (
    version         INTEGER PRIMARY KEY,
    description     VARCHAR(200) NOT NULL,
    script          VARCHAR(1000) NOT NULL,
    checksum        CHAR(64) NOT NULL,
    installed_on    TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


class MigrationError(Exception):
    """A migration script is malformed, duplicated, or was edited after being applied."""


@dataclass
class Migration:
    version: int
    description: str
    script: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """
    Load every migration script from a directory, ordered by version.

    Raises:
        MigrationError: If a .sql file is misnamed or two scripts share a version.
    """
    migrations: dict[int, Migration] = {}
    for path in sorted(directory.glob("*.sql")):
        match = _FILENAME_RE.match(path.name)
        if not match:
            raise MigrationError(f"Invalid migration file name: {path.name}")
        version = int(match.group(1))
        if version in migrations:
            raise MigrationError(
                f"Duplicate migration version {version}: "
                f"{migrations[version].script} and {path.name}"
            )
        migrations[version] = Migration(
            version=version,
            description=match.group(2).replace("_", " "),
            script=path.name,
            sql=path.read_text(encoding="utf-8"),
        )
    return [migrations[v] for v in sorted(migrations)]


def clean() -> None:
    """Drop every object in the public schema."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("DROP SCHEMA public CASCADE;")
            cur.execute("CREATE SCHEMA public;")
        conn.commit()
        logger.info("Database schema cleaned.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to clean schema: {e}")
        raise
    finally:
        release_connection(conn)


def _applied_checksums(conn) -> dict[int, str]:
    with conn.cursor() as cur:
        cur.execute(HISTORY_SQL)
        cur.execute("SELECT version, checksum FROM schema_history ORDER BY version;")
        applied = {row[0]: row[1] for row in cur.fetchall()}
    conn.commit()
    return applied


def migrate(directory: Path = MIGRATIONS_DIR) -> int:
    """
    Apply all pending migrations, each in its own transaction.

    Returns:
        The number of migrations applied.

    Raises:
        MigrationError: If an applied script's checksum no longer matches.
    """
    migrations = discover_migrations(directory)
    conn = get_connection()
    try:
        applied = _applied_checksums(conn)
        count = 0
        for migration in migrations:
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    raise MigrationError(
                        f"Checksum mismatch for applied migration {migration.script}"
                    )
                continue
            try:
                with conn.cursor() as cur:
                    cur.execute(migration.sql)
                    cur.execute(
                        "INSERT INTO schema_history (version, description, script, checksum) "
                        "VALUES (%s, %s, %s, %s);",
                        (migration.version, migration.description, migration.script, migration.checksum),
                    )
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to apply migration {migration.script}: {e}")
                raise
            logger.info(f"Applied migration: {migration.script}")
            count += 1
        logger.info(f"Schema is up to date ({count} migration(s) applied).")
        return count
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import close_pool, default_connection_info, init_pool
    init_pool(default_connection_info().dsn)
    try:
        clean()
        migrate()
    finally:
        close_pool()
