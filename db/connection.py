"""
db/connection.py
----------------
Opens connections to the configured relational backend.

Connections are not pooled: every repository operation asks the provider
for a fresh connection through ``provider.connection()`` and the provider
closes it when the ``with`` block exits, whatever the outcome.

Two backends are supported:
    - PostgreSQL through psycopg2 (the shared database).
    - SQLite through the standard library (local files and tests).
"""

import sqlite3
from abc import ABC, abstractmethod
from contextlib import closing, contextmanager
from decimal import Decimal
from typing import Any, Iterator

import psycopg2
from psycopg2 import extras

import config
from db.exceptions import DatabaseConnectionError
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionProvider(ABC):
    """
    Base class for backend connection providers.

    Subclasses supply the driver-specific pieces: how to open a connection,
    which placeholder the driver expects, how a transaction is started and
    how the last generated key is read back.
    """

    name = "generic"
    placeholder = "?"

    @abstractmethod
    def connect(self):
        """
        Open a new live connection.

        Raises:
            DatabaseConnectionError: If the backend cannot be reached.
        """

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Yield a connection that is closed on every exit path."""
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def cursor(self, conn) -> Iterator[Any]:
        """Yield a cursor whose rows can be addressed by column name."""
        with closing(conn.cursor()) as cur:
            yield cur

    def adapt(self, value: Any) -> Any:
        """Convert a bound Python value into something the driver accepts."""
        return value

    @abstractmethod
    def begin(self, conn) -> None:
        """Start a transaction, switching off per-statement auto-commit."""

    @abstractmethod
    def last_insert_id_sql(self, table_name: str) -> tuple[str, tuple]:
        """Return the query and parameters that read the last generated key."""

    def execute_script(self, conn, sql: str) -> None:
        """Run a multi-statement DDL script."""
        with self.cursor(conn) as cur:
            cur.execute(sql)


class PostgresConnectionProvider(ConnectionProvider):
    """Provider backed by psycopg2."""

    name = "postgres"
    placeholder = "%s"

    def __init__(self, dsn: str = config.DATABASE_URL):
        self.dsn = dsn

    def connect(self):
        try:
            conn = psycopg2.connect(self.dsn)
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise DatabaseConnectionError(str(e)) from e
        conn.autocommit = True
        return conn

    @contextmanager
    def cursor(self, conn) -> Iterator[Any]:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            yield cur

    def begin(self, conn) -> None:
        # psycopg2 opens the transaction on the next statement.
        conn.autocommit = False

    def last_insert_id_sql(self, table_name: str) -> tuple[str, tuple]:
        return (
            "SELECT currval(pg_get_serial_sequence(%s, %s)) AS last_id",
            (table_name, f"{table_name}_id"),
        )


def _dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    cols = [d[0] for d in cursor.description]
    return {cols[i]: row[i] for i in range(len(cols))}


class SQLiteConnectionProvider(ConnectionProvider):
    """Provider backed by a SQLite database file."""

    name = "sqlite"
    placeholder = "?"

    def __init__(self, path: str = config.SQLITE_PATH):
        self.path = path

    def connect(self):
        try:
            conn = sqlite3.connect(self.path, isolation_level=None)
        except sqlite3.Error as e:
            logger.error(f"Failed to open SQLite database '{self.path}': {e}")
            raise DatabaseConnectionError(str(e)) from e
        try:
            conn.execute("PRAGMA foreign_keys=ON;")
        except sqlite3.Error as e:
            conn.close()
            logger.error(f"Failed to open SQLite database '{self.path}': {e}")
            raise DatabaseConnectionError(str(e)) from e
        conn.row_factory = _dict_factory
        return conn

    def adapt(self, value: Any) -> Any:
        if isinstance(value, Decimal):
            return str(value)
        return value

    def begin(self, conn) -> None:
        conn.execute("BEGIN")

    def last_insert_id_sql(self, table_name: str) -> tuple[str, tuple]:
        # last_insert_rowid() is per-connection, not per-table.
        return "SELECT last_insert_rowid() AS last_id", ()

    def execute_script(self, conn, sql: str) -> None:
        conn.executescript(sql)


def get_provider() -> ConnectionProvider:
    """
    Build the provider selected by ``DB_BACKEND``.

    Raises:
        ValueError: If the configured backend is unknown.
    """
    if config.DB_BACKEND == "postgres":
        return PostgresConnectionProvider(config.DATABASE_URL)
    if config.DB_BACKEND == "sqlite":
        return SQLiteConnectionProvider(config.SQLITE_PATH)
    raise ValueError(f"Unknown DB_BACKEND '{config.DB_BACKEND}' (expected 'postgres' or 'sqlite').")
