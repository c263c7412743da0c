"""
db/transaction.py
-----------------
Explicit transaction handling for a single connection.

    NOT_STARTED -> ACTIVE -> COMMITTED | ROLLED_BACK

``unit_of_work`` wraps the usual start / commit / rollback-on-error dance
so that repositories never leave partial writes behind.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from db.connection import ConnectionProvider
from db.exceptions import DataAccessError, DbException, TransactionStateError
from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionState(Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """A unit of work spanning one or more statements on one connection."""

    def __init__(self, provider: ConnectionProvider, conn):
        self.provider = provider
        self.conn = conn
        self.state = TransactionState.NOT_STARTED

    @property
    def active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    def start(self) -> None:
        """Begin the transaction and switch off implicit auto-commit."""
        self._require(TransactionState.NOT_STARTED, "start")
        self.provider.begin(self.conn)
        self.state = TransactionState.ACTIVE

    def commit(self) -> None:
        """Make every change since ``start`` durable."""
        self._require(TransactionState.ACTIVE, "commit")
        self.conn.commit()
        self.state = TransactionState.COMMITTED

    def rollback(self) -> None:
        """Discard every change since ``start``."""
        self._require(TransactionState.ACTIVE, "roll back")
        try:
            self.conn.rollback()
        finally:
            self.state = TransactionState.ROLLED_BACK

    def _require(self, state: TransactionState, action: str) -> None:
        if self.state is not state:
            raise TransactionStateError(
                f"Cannot {action} a transaction in state '{self.state.value}'"
            )


@contextmanager
def unit_of_work(provider: ConnectionProvider, conn) -> Iterator[Transaction]:
    """
    Run the body of a ``with`` block inside one transaction.

    On normal exit the transaction is committed unless the body already
    finished it. If the body raises while the transaction is active, the
    transaction is rolled back first and the error re-raised:
    database-layer errors as they are, anything else wrapped in
    DataAccessError with the original as its cause.

    Usage:
        with provider.connection() as conn, unit_of_work(provider, conn) as tx:
            ...
    """
    tx = Transaction(provider, conn)
    try:
        tx.start()
        yield tx
        if tx.active:
            tx.commit()
    except Exception as e:
        if tx.active:
            try:
                tx.rollback()
            except Exception as rollback_error:
                logger.error(f"Rollback failed: {rollback_error}")
        if isinstance(e, DbException):
            raise
        raise DataAccessError(str(e)) from e
