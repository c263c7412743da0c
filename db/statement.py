"""
db/statement.py
---------------
Parameter binding and row mapping shared by the repositories.

SQL is written once with ``?`` markers and rendered to the placeholder
style of the provider in use. Parameters are bound by 1-based position
with an explicit expected type, and result rows are mapped onto entity
dataclasses by column name, so column order in a query never matters.
"""

import dataclasses
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from db.connection import ConnectionProvider
from db.exceptions import DataAccessError, MappingError, TypeMismatchError

T = TypeVar("T")

TWO_PLACES = Decimal("0.01")

_UNBOUND = object()


def to_fixed(value: Decimal) -> Decimal:
    """Quantize a decimal to 2 fraction digits, rounding half-up."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class Statement:
    """A parameterized SQL statement plus its positional parameter slots."""

    def __init__(self, sql: str, placeholder: str = "?"):
        self.count = sql.count("?")
        self.sql = sql.replace("?", placeholder) if placeholder != "?" else sql
        self._params: list = [_UNBOUND] * self.count

    @property
    def params(self) -> tuple:
        """The bound parameters, in position order."""
        missing = [i + 1 for i, p in enumerate(self._params) if p is _UNBOUND]
        if missing:
            raise TypeMismatchError(f"Unbound parameter position(s): {missing}")
        return tuple(self._params)

    def set(self, position: int, value: Any) -> None:
        if not 1 <= position <= self.count:
            raise TypeMismatchError(
                f"Parameter position {position} is out of range (1..{self.count})"
            )
        self._params[position - 1] = value


def _matches(value: Any, expected_type: type) -> bool:
    # bool is an int subclass but never a valid integer column value.
    if expected_type is int and isinstance(value, bool):
        return False
    return isinstance(value, expected_type)


def _unwrap_optional(hint: Any) -> Any:
    if get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


class StatementHelper:
    """
    Binds parameters, executes statements and maps rows to entities.

    A helper is tied to one ConnectionProvider because the placeholder
    style, value adaptation and generated-key lookup all depend on the
    backend.
    """

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider
        self._columns: dict[type, dict[str, type]] = {}

    def prepare(self, sql: str) -> Statement:
        """Create a statement for ``sql`` written with ``?`` markers."""
        return Statement(sql, self.provider.placeholder)

    def bind_parameter(self, statement: Statement, position: int, value: Any, expected_type: type) -> None:
        """
        Bind ``value`` at a 1-based ``position``.

        ``None`` always binds as SQL NULL. Decimals are stored at two
        fraction digits, rounded half-up.

        Raises:
            TypeMismatchError: If the value is not an ``expected_type`` or
                the position does not exist in the statement.
        """
        if value is None:
            statement.set(position, None)
            return
        if not _matches(value, expected_type):
            raise TypeMismatchError(
                f"Parameter {position}: expected {expected_type.__name__}, "
                f"got {type(value).__name__} ({value!r})"
            )
        if isinstance(value, Decimal):
            value = to_fixed(value)
        statement.set(position, self.provider.adapt(value))

    def execute(self, cur, statement: Statement) -> None:
        """Execute a fully bound statement on ``cur``."""
        cur.execute(statement.sql, statement.params)

    def extract_row(self, row: dict, entity_kind: Type[T]) -> T:
        """
        Build a new ``entity_kind`` from the named columns of ``row``.

        Every mapped field of the entity must be present as a column;
        extra columns in the row are ignored. Fields flagged with
        ``metadata={"relation": True}`` are collections and are skipped.

        Raises:
            MappingError: On a missing column or an incompatible stored type.
        """
        values = {}
        for name, kind in self._mapped_columns(entity_kind).items():
            if name not in row:
                raise MappingError(f"{entity_kind.__name__}: column '{name}' missing from result")
            values[name] = self._convert(row[name], kind, entity_kind, name)
        return entity_kind(**values)

    def last_insert_id(self, conn, table_name: str) -> int:
        """
        Return the key generated by the most recent insert into ``table_name``.

        Must run on the connection that performed the insert and before
        its transaction commits.

        Raises:
            DataAccessError: If the backend reports no generated key.
        """
        sql, params = self.provider.last_insert_id_sql(table_name)
        with self.provider.cursor(conn) as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
        if row is None or row["last_id"] is None:
            raise DataAccessError(f"No generated key available for table '{table_name}'")
        return int(row["last_id"])

    # ── HELPERS ───────────────────────────────────────────

    def _mapped_columns(self, entity_kind: type) -> dict[str, type]:
        if entity_kind not in self._columns:
            hints = get_type_hints(entity_kind)
            self._columns[entity_kind] = {
                f.name: _unwrap_optional(hints[f.name])
                for f in dataclasses.fields(entity_kind)
                if not f.metadata.get("relation")
            }
        return self._columns[entity_kind]

    @staticmethod
    def _convert(value: Any, kind: type, entity_kind: type, name: str) -> Optional[Any]:
        if value is None:
            return None
        if kind is Decimal:
            if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
                raise MappingError(
                    f"{entity_kind.__name__}.{name}: cannot read {type(value).__name__} as Decimal"
                )
            try:
                return to_fixed(Decimal(str(value)))
            except InvalidOperation as e:
                raise MappingError(f"{entity_kind.__name__}.{name}: {value!r} is not a number") from e
        if not _matches(value, kind):
            raise MappingError(
                f"{entity_kind.__name__}.{name}: expected {kind.__name__}, "
                f"got {type(value).__name__}"
            )
        return value
