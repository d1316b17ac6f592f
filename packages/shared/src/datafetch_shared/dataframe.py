"""Tabular result model produced by every data provider.

A Dataframe is an in-memory table: ordered, uniquely named columns and ordered
rows, where every row is a tuple aligned to the column list. Instances are
frozen once built. The provider renames a parsed frame with ``model_copy``,
never by assignment.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ColumnType(StrEnum):
    """Primitive value types a column can carry."""

    STRING = "STRING"
    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | ColumnType) -> ColumnType:
        """Resolve a type name from configuration, accepting common aliases."""
        if isinstance(value, ColumnType):
            return value
        key = str(value).strip().lower()
        resolved = _TYPE_ALIASES.get(key)
        if resolved is None:
            supported = ", ".join(sorted(_TYPE_ALIASES))
            raise ValueError(f"Unknown column type '{value}'. Supported: {supported}")
        return resolved


_TYPE_ALIASES: dict[str, ColumnType] = {
    "string": ColumnType.STRING,
    "str": ColumnType.STRING,
    "text": ColumnType.STRING,
    "numeric": ColumnType.NUMERIC,
    "number": ColumnType.NUMERIC,
    "int": ColumnType.NUMERIC,
    "integer": ColumnType.NUMERIC,
    "float": ColumnType.NUMERIC,
    "double": ColumnType.NUMERIC,
    "boolean": ColumnType.BOOLEAN,
    "bool": ColumnType.BOOLEAN,
    "date": ColumnType.DATE,
    "datetime": ColumnType.DATE,
    "timestamp": ColumnType.DATE,
    "unknown": ColumnType.UNKNOWN,
    "mixed": ColumnType.UNKNOWN,
}


class Column(BaseModel):
    """A named, typed column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType = ColumnType.STRING


class Dataframe(BaseModel):
    """Named table of typed columns and fixed-width rows."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    columns: tuple[Column, ...] = ()
    rows: tuple[tuple[Any, ...], ...] = ()

    @model_validator(mode="after")
    def _check_shape(self) -> Dataframe:
        names = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate column names in dataframe '{self.name}': {names}")
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} values but dataframe has {width} columns"
                )
        return self

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_records(self) -> list[dict[str, Any]]:
        """Return the rows as dicts keyed by column name."""
        names = self.column_names
        return [dict(zip(names, row, strict=True)) for row in self.rows]
