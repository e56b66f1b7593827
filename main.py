"""
main.py
-------
Entry point for the metro SQL showcase.

Responsibilities:
    - Start a throwaway PostgreSQL container (or use the configured server).
    - Reset the schema and load the fixture data through the migrations.
    - Run each selected library's query catalogue under one overall deadline.
    - Close pools, dispose engines, and stop the container whatever happens.

Usage:
    python main.py                          # both libraries, in Docker
    python main.py --library sqlalchemy     # one library
    python main.py --no-docker              # use DB_HOST / DB_PORT / ... from .env
"""

import argparse
import sys
import threading
from typing import Callable

from sqlalchemy.orm import sessionmaker

from config import RUN_TIMEOUT_SECONDS, USE_DOCKER
from db.connection import close_pool, default_connection_info, init_pool
from db.container import PostgresContainer
from db.migrate import clean, migrate
from orm.session import create_session_factory
from services.psycopg_catalogue import PsycopgCatalogue
from services.sqlalchemy_catalogue import SqlAlchemyCatalogue
from utils.logger import get_logger

logger = get_logger(__name__)

LIBRARIES = ("psycopg2", "sqlalchemy")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the same example queries through several database libraries")
    parser.add_argument(
        "--library",
        choices=LIBRARIES + ("all",),
        default="all",
        help="Which library's examples to run (default: all)",
    )
    docker_group = parser.add_mutually_exclusive_group()
    docker_group.add_argument("--docker", dest="docker", action="store_true", help="Start PostgreSQL in Docker")
    docker_group.add_argument("--no-docker", dest="docker", action="store_false", help="Use the configured server")
    parser.set_defaults(docker=USE_DOCKER)
    parser.add_argument(
        "--skip-migrate",
        action="store_true",
        help="Do not clean and re-migrate the schema before each library",
    )
    return parser.parse_args(argv)


def reset_schema() -> None:
    """Flyway-style clean + migrate, so every library starts from the fixture."""
    clean()
    migrate()


def run_examples(
    libraries: tuple[str, ...],
    skip_migrate: bool = False,
    session_factory: sessionmaker | None = None,
) -> None:
    """Run the catalogues one after the other; `session_factory` backs the SQLAlchemy one."""
    for library in libraries:
        if not skip_migrate:
            reset_schema()
        if library == "psycopg2":
            PsycopgCatalogue().run_all()
        elif library == "sqlalchemy":
            if session_factory is None:
                raise ValueError("The sqlalchemy examples need a session factory")
            SqlAlchemyCatalogue(session_factory).run_all()
        else:
            raise ValueError(f"Unknown library: {library}")


def run_with_deadline(target: Callable, timeout: float, *args) -> bool:
    """
    Run `target(*args)` on a daemon thread and wait at most `timeout` seconds.

    Returns:
        True if it finished in time, False if it is still running. A thread
        left running does not keep the interpreter alive.

    Raises:
        Whatever `target` raised, re-raised in the calling thread.
    """
    errors: list[BaseException] = []

    def _worker() -> None:
        try:
            target(*args)
        except BaseException as e:
            errors.append(e)

    thread = threading.Thread(target=_worker, name="examples", daemon=True)
    thread.start()
    thread.join(timeout)
    if thread.is_alive():
        return False
    if errors:
        raise errors[0]
    return True


def main(argv: list[str] | None = None) -> int:
    """Run the showcase; returns the process exit code."""
    args = parse_args(argv)
    libraries = LIBRARIES if args.library == "all" else (args.library,)

    container = PostgresContainer() if args.docker else None
    engine = None
    try:
        info = container.start() if container else default_connection_info()
        init_pool(info.dsn)
        session_factory = None
        if "sqlalchemy" in libraries:
            engine, session_factory = create_session_factory(info.sqlalchemy_url)
        if not run_with_deadline(run_examples, RUN_TIMEOUT_SECONDS, libraries, args.skip_migrate, session_factory):
            logger.error(f"Examples did not finish within {RUN_TIMEOUT_SECONDS}s")
            return 1
        return 0
    finally:
        if engine is not None:
            engine.dispose()
        close_pool()
        if container:
            container.stop()


if __name__ == "__main__":
    sys.exit(main())
