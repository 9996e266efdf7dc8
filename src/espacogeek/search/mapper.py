# espacogeek/search/mapper.py
from __future__ import annotations

import numbers
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from ..errors import RowMappingError
from ..logging import get_logger
from .metadata import TEMPORAL_TYPES, EntityMetadata

"""
Row -> partially-populated entity.

coerce_value() is pure and never raises: a value it cannot convert comes
back as None and that one field is left at its default. Only a failure to
construct the entity itself is an error (RowMappingError).
"""

log = get_logger("search.mapper")

_TRUE_TEXT = {"true", "t", "1", "yes", "y"}
_FALSE_TEXT = {"false", "f", "0", "no", "n"}


# --- Coercion ------------------------------------------------------------------

def _to_number(raw: Any, target: type) -> Any:
    if isinstance(raw, bool):
        raw = int(raw)
    if isinstance(raw, numbers.Number):
        if target is Decimal:
            return raw if isinstance(raw, Decimal) else Decimal(str(raw))
        return target(raw)
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return target(raw.strip())
    return None


def _to_bool(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, numbers.Number):
        return bool(raw)
    if isinstance(raw, str):
        v = raw.strip().lower()
        if v in _TRUE_TEXT:
            return True
        if v in _FALSE_TEXT:
            return False
    return None


def _to_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            pass
    return str(raw)


def coerce_value(raw: Any, target: Optional[type]) -> Any:
    """
    Convert a raw column value to `target`, or return None.

      int/float/Decimal  <- any number (widening/truncating) or numeric text
      str                <- str() of anything
      bool               <- bool, number, or true/false/yes/no/1/0 text
      date/time types    <- passed through unchanged
      anything else      <- the value itself if already of that type, else None
    """
    if raw is None or not isinstance(target, type):
        return None
    try:
        if target is bool:
            return _to_bool(raw)
        if target in (int, float, Decimal):
            if type(raw) is target:
                return raw
            return _to_number(raw, target)
        if issubclass(target, str):
            return raw if isinstance(raw, str) else _to_text(raw)
        if issubclass(target, TEMPORAL_TYPES):
            return raw
        if isinstance(raw, target):
            return raw
    except (TypeError, ValueError, ArithmeticError, UnicodeDecodeError) as exc:
        log.debug("cannot coerce %r to %s: %s", raw, getattr(target, "__name__", target), exc)
    return None


# --- Rows ----------------------------------------------------------------------

def _row_values(row: Any) -> Sequence:
    # single-column results may arrive as a bare scalar
    if isinstance(row, (str, bytes, bytearray)) or not isinstance(row, Sequence):
        return (row,)
    return row


def map_row(model: type, metadata: EntityMetadata, fields: List[str], row: Any) -> Any:
    values = _row_values(row)
    try:
        instance = model()
    except Exception as exc:
        raise RowMappingError(
            f"cannot instantiate {getattr(model, '__name__', model)!r} for a result row: {exc}",
            model=model,
        ) from exc

    for i, name in enumerate(fields):
        raw = values[i] if i < len(values) else None
        value = coerce_value(raw, metadata.python_type_for(name))
        try:
            setattr(instance, name, value)
        except Exception as exc:
            # leave the field at its default
            log.debug("cannot set %s.%s: %s", model.__name__, name, exc)
    return instance


def map_rows(model: type, metadata: EntityMetadata, fields: List[str], rows: Iterable[Any]) -> List[Any]:
    return [map_row(model, metadata, fields, row) for row in rows]
