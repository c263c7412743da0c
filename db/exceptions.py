"""
db/exceptions.py
----------------
Error taxonomy for the data-access layer.

"Not found" is deliberately absent from this module: repositories
return ``None`` for a missing row and leave it to the caller to decide
whether that is an error.
"""


class DbException(Exception):
    """Base class for every error raised by the database layer."""


class DatabaseConnectionError(DbException):
    """The backend is unreachable or rejected the credentials."""


class TypeMismatchError(DbException):
    """A value could not be bound to a statement parameter."""


class MappingError(DbException):
    """A result row could not be mapped onto an entity."""


class TransactionStateError(DbException):
    """A transaction was asked to move through an invalid transition."""


class DataAccessError(DbException):
    """
    A statement failed while a transaction was active.

    Raised only after the transaction has been rolled back.
    The original driver error is available as ``__cause__``.
    """
