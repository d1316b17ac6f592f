"""HTTP data provider: source configuration → list of named Dataframes.

A source configuration is either one schema or a batch under ``schemas``.
Every schema is validated before the first request goes out, then fetched in
declared order. A batch is all-or-nothing: the first failure propagates and no
partial list is returned.

The provider also owns the HTTP client lifecycle. It borrows a client when
given one; otherwise it creates one lazily and closes it in ``close()``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from typing import Any

import httpx
from datafetch_shared.dataframe import Dataframe
from datafetch_shared.source_models import ConnectionResult, SourceSchema, TableSchema

from datafetch_http_provider.errors import ProviderError
from datafetch_http_provider.fetcher import HttpDataFetcher
from datafetch_http_provider.request_params import (
    TABLE,
    RequestSpec,
    build_request_specs,
    expand_schemas,
)

logger = logging.getLogger(__name__)

GENERATED_NAME_PREFIX = "TEST"


def table_name(schema: Mapping[str, Any]) -> str:
    """The schema's ``table`` value if non-blank, else a fresh unique name."""
    table = schema.get(TABLE)
    if table is not None and str(table).strip():
        return str(table)
    return f"{GENERATED_NAME_PREFIX}{uuid.uuid4().hex}"


class HttpDataProvider:
    """Loads Dataframes from HTTP endpoints described by a source configuration."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpDataProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def load_data(
        self,
        config: Mapping[str, Any] | None,
        *,
        max_concurrency: int = 1,
    ) -> list[Dataframe]:
        """Fetch every schema in ``config`` and return one Dataframe per schema.

        With ``max_concurrency`` above 1, independent schemas are fetched
        concurrently over the shared client. The result order is always the
        declaration order.
        """
        schemas = expand_schemas(config)
        if not schemas:
            return []

        specs = build_request_specs(config)
        names = [table_name(schema) for schema in schemas]
        fetcher = HttpDataFetcher(self._get_client())

        if max_concurrency > 1 and len(specs) > 1:
            frames = await self._fetch_concurrently(fetcher, specs, max_concurrency)
        else:
            frames = [
                await self._fetch_one(fetcher, index, spec) for index, spec in enumerate(specs)
            ]

        dataframes = [
            frame.model_copy(update={"name": name})
            for frame, name in zip(frames, names, strict=True)
        ]
        logger.info(
            f"Loaded {len(dataframes)} tables "
            f"({sum(df.row_count for df in dataframes)} rows) from HTTP source"
        )
        return dataframes

    async def _fetch_one(
        self, fetcher: HttpDataFetcher, index: int, spec: RequestSpec
    ) -> Dataframe:
        try:
            return await fetcher.fetch(spec)
        except ProviderError as e:
            raise e.with_schema_index(index)

    async def _fetch_concurrently(
        self,
        fetcher: HttpDataFetcher,
        specs: list[RequestSpec],
        max_concurrency: int,
    ) -> list[Dataframe]:
        semaphore = asyncio.Semaphore(max_concurrency)

        async def bounded(index: int, spec: RequestSpec) -> Dataframe:
            async with semaphore:
                return await self._fetch_one(fetcher, index, spec)

        try:
            # TaskGroup cancels the remaining fetches as soon as one fails
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(bounded(index, spec)) for index, spec in enumerate(specs)
                ]
        except ExceptionGroup as eg:
            raise eg.exceptions[0]
        return [task.result() for task in tasks]

    async def test_connection(
        self, config: Mapping[str, Any] | None, source_id: str = ""
    ) -> ConnectionResult:
        """Load the source once and report whether it worked.

        Provider failures come back as ``success=False`` results rather than
        exceptions.
        """
        try:
            dataframes = await self.load_data(config)
        except ProviderError as e:
            return ConnectionResult(
                success=False,
                message=f"Connection failed: {e}",
                error_kind=e.kind,
                source_id=source_id,
                data={"schema_index": e.schema_index},
            )
        rows = sum(df.row_count for df in dataframes)
        return ConnectionResult(
            success=True,
            message=f"Loaded {len(dataframes)} tables ({rows} rows)",
            source_id=source_id,
            data={"table_count": len(dataframes), "row_count": rows},
        )

    async def get_schema(
        self, config: Mapping[str, Any] | None, source_id: str = ""
    ) -> SourceSchema:
        """Load the source and report each table's column names and types."""
        try:
            dataframes = await self.load_data(config)
        except ProviderError as e:
            return SourceSchema(
                success=False,
                message=f"Schema discovery failed: {e}",
                error_kind=e.kind,
                source_id=source_id,
            )
        tables = [TableSchema(name=df.name, columns=list(df.columns)) for df in dataframes]
        column_count = sum(len(t.columns) for t in tables)
        return SourceSchema(
            success=True,
            message=f"Discovered {column_count} columns in {len(tables)} tables",
            source_id=source_id,
            tables=tables,
        )
