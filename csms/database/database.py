import logging
import os
from contextlib import contextmanager
from typing import Iterator
from urllib.parse import quote_plus

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

# Pick up a local .env when present
load_dotenv()

logger = logging.getLogger(__name__)

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "60"))


class DataAccessError(Exception):
    """The relational store could not be reached or a statement failed."""


def build_db_url() -> str:
    """DB_URL wins; otherwise the MySQL URL is assembled from the DB_* parts."""
    url = os.getenv("DB_URL")
    if url:
        return url
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "3306")
    user = os.getenv("DB_USER", "root")
    password = os.getenv("DB_PASSWORD", "")
    name = os.getenv("DB_NAME", "csms_db")
    return f"mysql+pymysql://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/{name}?charset=utf8mb4"


_engine: Engine | None = None


def configure_engine(url: str | None = None) -> Engine:
    """(Re)create the process-wide pool. Any previous pool is closed first."""
    global _engine
    if _engine is not None:
        _engine.dispose()

    url = url or build_db_url()
    kwargs = dict(
        echo=os.getenv("SQL_ECHO", "0") == "1",
        future=True,
        pool_pre_ping=True,
    )
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=DB_POOL_TIMEOUT,
            pool_recycle=3600,
            connect_args={"connect_timeout": DB_POOL_TIMEOUT, "read_timeout": DB_POOL_TIMEOUT},
        )
    _engine = create_engine(url, **kwargs)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return configure_engine()
    return _engine


@contextmanager
def connection() -> Iterator[Connection]:
    """Pooled connection; every SQLAlchemy failure surfaces as DataAccessError."""
    try:
        with get_engine().connect() as conn:
            yield conn
    except SQLAlchemyError as e:
        raise DataAccessError(str(e)) from e


def test_connection() -> bool:
    """Acquire and release one pooled connection."""
    try:
        with connection() as conn:
            conn.execute(text("SELECT 1"))
        logger.debug("Database connected successfully")
        return True
    except DataAccessError as e:
        logger.error("Database connection failed: %s", e)
        return False


def close_pool():
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
