"""Cell-level type inference and coercion.

Coercion never raises: a value that does not fit the target type comes back
unchanged, which is how a malformed field degrades to an untyped cell instead
of failing the fetch.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from datafetch_shared.dataframe import ColumnType

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_ISO_DATE_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?)?(Z|[+-]\d{2}:?\d{2})?$"
)
_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


def infer_type(value: Any) -> ColumnType | None:
    """Return the column type a single JSON value suggests, or None for null."""
    if value is None:
        return None
    if isinstance(value, bool):
        return ColumnType.BOOLEAN
    if isinstance(value, int | float):
        return ColumnType.NUMERIC
    if isinstance(value, datetime | date):
        return ColumnType.DATE
    if isinstance(value, str):
        if _ISO_DATE_RE.match(value.strip()) and _parse_datetime(value) is not None:
            return ColumnType.DATE
        return ColumnType.STRING
    return ColumnType.UNKNOWN


def dominant_type(values: Iterable[Any]) -> ColumnType:
    """Most frequent non-null type among ``values``.

    Ties go to the type observed first. A column with no non-null values is
    typed STRING.
    """
    counts: Counter[ColumnType] = Counter()
    for value in values:
        observed = infer_type(value)
        if observed is not None:
            counts[observed] += 1
    if not counts:
        return ColumnType.STRING
    # most_common keeps insertion order among equal counts
    return counts.most_common(1)[0][0]


def coerce(value: Any, column_type: ColumnType) -> Any:
    """Convert ``value`` to ``column_type``, or return it unchanged if it does not fit."""
    if value is None:
        return None
    converter = _CONVERTERS.get(column_type)
    if converter is None:
        return value
    converted = converter(value)
    return value if converted is _MISMATCH else converted


_MISMATCH = object()


def _to_numeric(value: Any) -> Any:
    if isinstance(value, bool):
        return _MISMATCH
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_RE.match(text):
            return int(text)
        if not _DECIMAL_RE.match(text):
            return _MISMATCH
        number = float(text)
        return number if math.isfinite(number) else _MISMATCH
    return _MISMATCH


def _to_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    return _MISMATCH


def _to_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        parsed = _parse_datetime(value)
        return _MISMATCH if parsed is None else parsed
    return _MISMATCH


def _to_string(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    return _MISMATCH


def _parse_datetime(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return None


_CONVERTERS = {
    ColumnType.NUMERIC: _to_numeric,
    ColumnType.BOOLEAN: _to_boolean,
    ColumnType.DATE: _to_date,
    ColumnType.STRING: _to_string,
}
