"""Tests for the transaction state machine and unit_of_work."""

from __future__ import annotations

import sqlite3

import pytest

from db.exceptions import DataAccessError, MappingError, TransactionStateError
from db.transaction import Transaction, TransactionState, unit_of_work


def _count(raw_conn: sqlite3.Connection) -> int:
    return raw_conn.execute("SELECT COUNT(*) FROM category").fetchone()[0]


def test_state_transitions_commit(provider) -> None:
    with provider.connection() as conn:
        tx = Transaction(provider, conn)
        assert tx.state is TransactionState.NOT_STARTED
        tx.start()
        assert tx.state is TransactionState.ACTIVE
        tx.commit()
        assert tx.state is TransactionState.COMMITTED


def test_commit_requires_active(provider) -> None:
    with provider.connection() as conn:
        tx = Transaction(provider, conn)
        with pytest.raises(TransactionStateError):
            tx.commit()
        with pytest.raises(TransactionStateError):
            tx.rollback()


def test_cannot_finish_twice(provider) -> None:
    with provider.connection() as conn:
        tx = Transaction(provider, conn)
        tx.start()
        tx.rollback()
        assert tx.state is TransactionState.ROLLED_BACK
        with pytest.raises(TransactionStateError):
            tx.commit()
        with pytest.raises(TransactionStateError):
            tx.start()


def test_commit_is_visible_to_other_connections(provider, raw_conn) -> None:
    with provider.connection() as conn:
        tx = Transaction(provider, conn)
        tx.start()
        conn.execute("INSERT INTO category (category_name) VALUES ('Outdoor')")
        tx.commit()
    assert _count(raw_conn) == 1


def test_rollback_discards_changes(provider, raw_conn) -> None:
    with provider.connection() as conn:
        tx = Transaction(provider, conn)
        tx.start()
        conn.execute("INSERT INTO category (category_name) VALUES ('Outdoor')")
        tx.rollback()
    assert _count(raw_conn) == 0


def test_unit_of_work_commits_on_success(provider, raw_conn) -> None:
    with provider.connection() as conn, unit_of_work(provider, conn) as tx:
        conn.execute("INSERT INTO category (category_name) VALUES ('Outdoor')")
    assert tx.state is TransactionState.COMMITTED
    assert _count(raw_conn) == 1


def test_unit_of_work_rolls_back_and_wraps_driver_errors(provider, raw_conn) -> None:
    with pytest.raises(DataAccessError) as excinfo:
        with provider.connection() as conn, unit_of_work(provider, conn) as tx:
            conn.execute("INSERT INTO category (category_name) VALUES ('Outdoor')")
            conn.execute("INSERT INTO no_such_table VALUES (1)")
    assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)
    assert tx.state is TransactionState.ROLLED_BACK
    assert _count(raw_conn) == 0


def test_unit_of_work_keeps_database_errors_unwrapped(provider, raw_conn) -> None:
    with pytest.raises(MappingError):
        with provider.connection() as conn, unit_of_work(provider, conn) as tx:
            conn.execute("INSERT INTO category (category_name) VALUES ('Outdoor')")
            raise MappingError("drift")
    assert tx.state is TransactionState.ROLLED_BACK
    assert _count(raw_conn) == 0


def test_unit_of_work_respects_explicit_commit(provider) -> None:
    with provider.connection() as conn, unit_of_work(provider, conn) as tx:
        tx.commit()
    assert tx.state is TransactionState.COMMITTED
