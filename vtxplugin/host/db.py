"""Host-side SQL helpers and native value marshalling."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from vtxplugin.core.errors import HostCallError, SerializationError, db_error_from_host
from vtxplugin.core.serialization import from_json
from vtxplugin.core.types import DB_VALUE_TYPES, DbValue, IntegerValue, NullValue, RealValue, TextValue

from .binding import current_host

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


@runtime_checkable
class ToDbValue(Protocol):
    """Custom types may supply their own parameter mapping."""

    def __db_value__(self) -> DbValue: ...


def to_db_value(value: Any) -> DbValue:
    """Map a native scalar (or None) to exactly one DbValue variant."""
    if value is None:
        return NullValue()
    if isinstance(value, DB_VALUE_TYPES):
        return value
    # bool is an int subclass, so it has to be checked first.
    if isinstance(value, bool):
        return IntegerValue(1 if value else 0)
    if isinstance(value, int):
        if not _I64_MIN <= value <= _I64_MAX:
            raise OverflowError(f"integer out of signed 64-bit range: {value}")
        return IntegerValue(int(value))
    if isinstance(value, float):
        return RealValue(float(value))
    if isinstance(value, str):
        return TextValue(value)
    if isinstance(value, ToDbValue):
        return value.__db_value__()
    raise TypeError(f"unsupported SQL parameter type: {type(value).__name__}")


def to_db_params(params: Iterable[Any]) -> list[DbValue]:
    return [to_db_value(p) for p in params]


def execute(sql: str, params: Iterable[Any] = ()) -> int:
    """Run INSERT / UPDATE / DELETE and return the affected row count.

    Placeholders use the host's syntax (`?`). Host failures become
    PermissionDenied when the message says so, DatabaseError otherwise.
    Hosts running under a restricted policy reject this call.
    """
    try:
        return int(current_host().sql_execute(sql, to_db_params(params)))
    except HostCallError as exc:
        raise db_error_from_host(exc.message) from exc


def query_json(sql: str, params: Iterable[Any] = ()) -> str:
    """Run a SELECT and return the host's JSON array of rows."""
    try:
        return current_host().sql_query_json(sql, to_db_params(params))
    except HostCallError as exc:
        raise db_error_from_host(exc.message) from exc


def query(sql: str, params: Iterable[Any] = (), model: Any = None) -> list[Any]:
    """Run a SELECT and decode its rows.

    Without `model` rows come back as dicts; with one each row is validated by
    pydantic. Keep result sets small (about 1 MiB) and paginate with LIMIT.
    """
    rows = from_json(query_json(sql, params), model=list[model] if model is not None else None)
    if not isinstance(rows, list):
        raise SerializationError(f"expected a JSON array of rows, got {type(rows).__name__}")
    return rows
