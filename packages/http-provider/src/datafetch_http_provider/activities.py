"""HTTP provider activities: Temporal activity functions for HTTP sources.

These run on the http-provider worker (HTTP_PROVIDER_QUEUE). Three activities,
each an atomic business verb:

  load_source_data       — fetch every schema and return the Dataframes
  test_source_connection — load once and report success as a result object
  get_source_schema      — load once and report per-table columns

Each activity creates a provider, delegates, and closes the provider's HTTP
client afterward. Provider failures from load_source_data become
non-retryable ApplicationErrors: this pipeline makes a single attempt per
schema, and a bad configuration will not fix itself on retry.
"""

from datafetch_shared.source_models import (
    ConnectionResult,
    LoadResult,
    SourceLoadRequest,
    SourceSchema,
)
from temporalio import activity
from temporalio.exceptions import ApplicationError

from datafetch_http_provider.errors import ProviderError
from datafetch_http_provider.provider import HttpDataProvider


@activity.defn
async def load_source_data(request: SourceLoadRequest) -> LoadResult:
    """Load every table of an HTTP source."""
    activity.logger.info(f"Loading HTTP source '{request.source_id}'")
    provider = HttpDataProvider()
    try:
        dataframes = await provider.load_data(
            request.properties, max_concurrency=request.max_concurrency
        )
    except ProviderError as e:
        activity.logger.warning(f"Loading HTTP source '{request.source_id}' failed: {e}")
        raise ApplicationError(
            f"Loading source '{request.source_id}' failed: {e}",
            {"kind": e.kind, **e.context},
            type=type(e).__name__,
            non_retryable=True,
        ) from e
    finally:
        await provider.close()

    rows = sum(df.row_count for df in dataframes)
    return LoadResult(
        success=True,
        message=f"Loaded {len(dataframes)} tables ({rows} rows)",
        source_id=request.source_id,
        dataframes=dataframes,
        table_count=len(dataframes),
        row_count=rows,
    )


@activity.defn
async def test_source_connection(request: SourceLoadRequest) -> ConnectionResult:
    """Lightweight "does this source work?" check for configuration screens."""
    activity.logger.info(f"Testing HTTP source '{request.source_id}'")
    provider = HttpDataProvider()
    try:
        return await provider.test_connection(request.properties, source_id=request.source_id)
    finally:
        await provider.close()


@activity.defn
async def get_source_schema(request: SourceLoadRequest) -> SourceSchema:
    """Discover table and column layout of an HTTP source."""
    activity.logger.info(f"Discovering schema for HTTP source '{request.source_id}'")
    provider = HttpDataProvider()
    try:
        return await provider.get_schema(request.properties, source_id=request.source_id)
    finally:
        await provider.close()
