"""Default response parser for JSON payloads.

Path lookup: an empty path selects the document root. Otherwise the path is
a dot-separated walk through nested objects (``"data.items"``). At each level
the longest matching key wins, so a literal key that itself contains dots
(``"meta.v1"``) is still reachable.

Column inference when none are declared: the union of keys across all
elements, in first-seen order, each typed by the dominant non-null value type.
Array elements that are not objects are read as ``{"value": element}``.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from datafetch_shared.dataframe import Column, Dataframe

from datafetch_http_provider.errors import PathNotFoundError, ResponseParseError
from datafetch_http_provider.parsers.values import coerce, dominant_type

SCALAR_COLUMN = "value"

_MISSING = object()


class JsonResponseParser:
    """Parse a JSON body into a Dataframe."""

    def parse(self, raw_body: str | bytes, path: str, columns: Sequence[Column]) -> Dataframe:
        try:
            document = json.loads(raw_body, parse_constant=_reject_constant)
        except ValueError as e:
            raise ResponseParseError(f"Response body is not valid JSON: {e}", path=path) from e

        items = locate(document, path)
        records = [item if isinstance(item, dict) else {SCALAR_COLUMN: item} for item in items]

        resolved = tuple(columns) if columns else infer_columns(records)
        rows = tuple(
            tuple(coerce(record.get(column.name), column.type) for column in resolved)
            for record in records
        )
        return Dataframe(columns=resolved, rows=rows)


def locate(document: Any, path: str) -> list[Any]:
    """Return the array at ``path`` inside ``document``."""
    path = (path or "").strip()
    node = document if not path else _walk(document, path.split("."))
    if node is _MISSING:
        raise PathNotFoundError(f"Property '{path}' not found in response", path=path)
    if not isinstance(node, list):
        raise PathNotFoundError(
            f"Property '{path}' is a {type(node).__name__}, not an array", path=path
        )
    return node


def _walk(node: Any, parts: list[str]) -> Any:
    if not parts:
        return node
    if not isinstance(node, dict):
        return _MISSING
    for end in range(len(parts), 0, -1):
        key = ".".join(parts[:end])
        if key in node:
            found = _walk(node[key], parts[end:])
            if found is not _MISSING:
                return found
    return _MISSING


def infer_columns(records: Sequence[dict[str, Any]]) -> tuple[Column, ...]:
    """Union of keys across ``records`` in first-seen order, typed by dominant value."""
    names: dict[str, None] = {}
    for record in records:
        for key in record:
            names.setdefault(str(key), None)
    return tuple(
        Column(name=name, type=dominant_type(record.get(name) for record in records))
        for name in names
    )


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Non-standard JSON constant {name!r}")
