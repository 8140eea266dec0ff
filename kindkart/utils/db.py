import logging
import os
from contextlib import contextmanager

import psycopg2
from psycopg2.pool import ThreadedConnectionPool
from dotenv import load_dotenv
from flask import current_app, g

from kindkart.errors import DatabaseError

load_dotenv()

logger = logging.getLogger(__name__)


def database_settings() -> dict:
    """
    Connection settings for PostgreSQL. Uses DATABASE_URL if set (e.g. for a
    hosted database); otherwise falls back to DB_HOST, DB_NAME, DB_USER,
    DB_PASSWORD, DB_PORT.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return {"dsn": url}
    return {
        "host": os.getenv("DB_HOST", "127.0.0.1"),
        "database": os.getenv("DB_NAME", "kindkart_dev"),
        "user": os.getenv("DB_USER", "dev"),
        "password": os.getenv("DB_PASSWORD", "dev"),
        "port": os.getenv("DB_PORT", "5432"),
    }


def get_db_connection():
    """Standalone connection for scripts that run outside a Flask app."""
    return psycopg2.connect(**database_settings())


def init_db(app, pool=None) -> None:
    """
    Attach a connection pool to the app. The pool is created on first use
    unless one is handed in (tests pass a fake).
    """
    app.extensions["db_pool"] = pool
    app.teardown_appcontext(close_db)


def _pool():
    pool = current_app.extensions.get("db_pool")
    if pool is None:
        pool = ThreadedConnectionPool(
            current_app.config["DB_POOL_MIN"],
            current_app.config["DB_POOL_MAX"],
            **current_app.config["DB_SETTINGS"],
        )
        current_app.extensions["db_pool"] = pool
        logger.info("database pool ready (max=%s)", current_app.config["DB_POOL_MAX"])
    return pool


def get_db():
    """Connection borrowed from the pool for the rest of this request."""
    if "db" not in g:
        try:
            g.db = _pool().getconn()
        except psycopg2.Error as e:
            logger.exception("could not obtain a database connection")
            raise DatabaseError() from e
    return g.db


def close_db(exc=None) -> None:
    conn = g.pop("db", None)
    if conn is not None:
        current_app.extensions["db_pool"].putconn(conn)


@contextmanager
def transaction(conn, error_message: str = "Database error"):
    """
    Commit on success, roll back on any exception. Driver errors surface as
    DatabaseError(error_message); API errors raised inside pass through.
    """
    try:
        yield conn
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        logger.exception("%s", error_message)
        raise DatabaseError(error_message) from e
    except Exception:
        conn.rollback()
        raise
