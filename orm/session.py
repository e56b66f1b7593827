"""
orm/session.py
--------------
Engine and session factory for the SQLAlchemy catalogue.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from utils.logger import get_logger

logger = get_logger(__name__)


def create_session_factory(url: str, **engine_kwargs) -> tuple[Engine, sessionmaker]:
    """
    Create an engine and a session factory bound to it.

    Args:
        url: SQLAlchemy database URL.
        **engine_kwargs: Passed through to `create_engine`.

    Returns:
        The engine (dispose it when done) and a `sessionmaker`.
    """
    engine = create_engine(url, **engine_kwargs)
    logger.info(f"SQLAlchemy engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine, sessionmaker(bind=engine, expire_on_commit=False)
