"""Tests for the connection providers and backend selection."""

from __future__ import annotations

import pathlib
import sqlite3
from decimal import Decimal

import psycopg2
import pytest

import config
from db import connection
from db.connection import PostgresConnectionProvider, SQLiteConnectionProvider
from db.exceptions import DatabaseConnectionError


def test_sqlite_connection_is_closed_after_use(tmp_path: pathlib.Path) -> None:
    provider = SQLiteConnectionProvider(str(tmp_path / "x.db"))
    with provider.connection() as conn:
        conn.execute("SELECT 1")
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_sqlite_connection_is_closed_on_error(tmp_path: pathlib.Path) -> None:
    provider = SQLiteConnectionProvider(str(tmp_path / "x.db"))
    with pytest.raises(RuntimeError):
        with provider.connection() as conn:
            raise RuntimeError("boom")
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_sqlite_rows_are_addressed_by_name(tmp_path: pathlib.Path) -> None:
    provider = SQLiteConnectionProvider(str(tmp_path / "x.db"))
    with provider.connection() as conn, provider.cursor(conn) as cur:
        cur.execute("SELECT 1 AS one, 'two' AS two")
        assert cur.fetchone() == {"one": 1, "two": "two"}


def test_sqlite_unreachable_path_raises_connection_error(tmp_path: pathlib.Path) -> None:
    provider = SQLiteConnectionProvider(str(tmp_path / "missing" / "dir" / "x.db"))
    with pytest.raises(DatabaseConnectionError):
        provider.connect()


def test_sqlite_adapts_decimal_to_text() -> None:
    provider = SQLiteConnectionProvider(":memory:")
    assert provider.adapt(Decimal("1.50")) == "1.50"
    assert provider.adapt(3) == 3


def test_postgres_connect_failure_raises_connection_error(monkeypatch) -> None:
    def refuse(dsn):
        raise psycopg2.OperationalError("could not connect to server")

    monkeypatch.setattr(connection.psycopg2, "connect", refuse)
    provider = PostgresConnectionProvider("postgresql://u:p@nowhere:5432/db")
    with pytest.raises(DatabaseConnectionError) as excinfo:
        provider.connect()
    assert isinstance(excinfo.value.__cause__, psycopg2.OperationalError)


def test_postgres_begin_disables_autocommit(monkeypatch) -> None:
    class FakeConnection:
        autocommit = None

    monkeypatch.setattr(connection.psycopg2, "connect", lambda dsn: FakeConnection())
    provider = PostgresConnectionProvider("postgresql://u:p@localhost:5432/db")
    conn = provider.connect()
    assert conn.autocommit is True
    provider.begin(conn)
    assert conn.autocommit is False


def test_postgres_last_insert_id_uses_table_sequence() -> None:
    sql, params = PostgresConnectionProvider("dsn").last_insert_id_sql("project")
    assert "pg_get_serial_sequence" in sql
    assert params == ("project", "project_id")


def test_get_provider_selects_backend(monkeypatch) -> None:
    monkeypatch.setattr(config, "DB_BACKEND", "sqlite")
    monkeypatch.setattr(config, "SQLITE_PATH", "local.db")
    provider = connection.get_provider()
    assert isinstance(provider, SQLiteConnectionProvider)
    assert provider.path == "local.db"

    monkeypatch.setattr(config, "DB_BACKEND", "postgres")
    assert isinstance(connection.get_provider(), PostgresConnectionProvider)


def test_get_provider_rejects_unknown_backend(monkeypatch) -> None:
    monkeypatch.setattr(config, "DB_BACKEND", "oracle")
    with pytest.raises(ValueError, match="oracle"):
        connection.get_provider()


def test_provider_without_backend_hooks_cannot_be_built() -> None:
    class HalfWritten(connection.ConnectionProvider):
        def connect(self):
            return None

    with pytest.raises(TypeError):
        HalfWritten()


def test_sqlite_setup_failure_closes_connection(monkeypatch, tmp_path: pathlib.Path) -> None:
    class FailingConnection:
        closed = False

        def execute(self, sql):
            raise sqlite3.OperationalError("database is locked")

        def close(self):
            self.closed = True

    opened = FailingConnection()
    monkeypatch.setattr(connection.sqlite3, "connect", lambda path, isolation_level=None: opened)
    provider = SQLiteConnectionProvider(str(tmp_path / "x.db"))

    with pytest.raises(DatabaseConnectionError):
        provider.connect()
    assert opened.closed
