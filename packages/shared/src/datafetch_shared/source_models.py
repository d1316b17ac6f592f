"""Source boundary models: the contract between workflow callers and the HTTP provider.

These types cross the Temporal activity boundary. Callers build a
SourceLoadRequest from a persisted source definition; the provider's activities
receive it and return one of the result envelopes below.

Design choices:
  - ``properties`` stays an untyped mapping at the boundary. It is the source
    definition exactly as the caller stored it. The provider validates it into
    typed request specs before doing any I/O, so bad configuration is reported
    as a configuration failure rather than a network one.
  - Results carry full Dataframes. Temporal serializes everything to JSON,
    so cell values arrive as JSON primitives on the workflow side.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from datafetch_shared.dataframe import Column, Dataframe
from datafetch_shared.models import PlatformResult


class SourceLoadRequest(BaseModel):
    """Parameters for a load_source_data activity call."""

    source_id: str
    properties: dict[str, Any] = {}
    max_concurrency: int = 1


class LoadResult(PlatformResult):
    """Returned by load_source_data: one dataframe per configured schema."""

    source_id: str = ""
    dataframes: list[Dataframe] = []
    table_count: int = 0
    row_count: int = 0


class ConnectionResult(PlatformResult):
    """Returned by test_source_connection."""

    source_id: str = ""


class TableSchema(BaseModel):
    """Column layout of one loaded table."""

    name: str
    columns: list[Column] = []


class SourceSchema(PlatformResult):
    """Returned by get_source_schema: per-table column names and types."""

    source_id: str = ""
    tables: list[TableSchema] = []
