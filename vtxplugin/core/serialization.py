"""JSON helpers for values crossing the boundary."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import SerializationError


def _json_default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    """Encode to compact JSON text. NaN/Infinity are rejected."""
    try:
        return json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":"), default=_json_default)
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(str(exc)) from exc


def to_json_bytes(data: Any) -> bytes:
    return to_json(data).encode("utf-8")


def from_json(text: str | bytes, model: Any = None) -> Any:
    """Decode JSON and, when `model` is given, validate it with pydantic."""
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SerializationError(str(exc)) from exc
    if model is None:
        return parsed
    try:
        return TypeAdapter(model).validate_python(parsed)
    except ValidationError as exc:
        raise SerializationError(str(exc)) from exc
