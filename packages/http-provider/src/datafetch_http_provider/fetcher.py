"""HTTP fetcher: one RequestSpec → one request → one parsed Dataframe.

The fetcher owns transport only. It never looks inside the response beyond
the status code; the body goes to the parser named in the spec, and whatever
the parser returns is handed back as-is. There is no retry: a failed attempt
raises immediately and the caller decides what to do.
"""

from __future__ import annotations

import logging

import httpx
from datafetch_shared.dataframe import Dataframe

from datafetch_http_provider.errors import FetchError, FetchTimeoutError
from datafetch_http_provider.parsers import get_parser
from datafetch_http_provider.request_params import RequestSpec

logger = logging.getLogger(__name__)


class HttpDataFetcher:
    """Executes RequestSpecs against a borrowed ``httpx.AsyncClient``.

    The client (and its connection pool) belongs to the caller, so many
    fetchers can share it and run concurrently.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def _build_request(self, spec: RequestSpec) -> httpx.Request:
        headers = dict(spec.headers)
        if spec.body is not None and not any(k.lower() == "content-type" for k in headers):
            headers["Content-Type"] = spec.content_type
        return self._client.build_request(
            spec.method,
            spec.url,
            params=list(spec.query_params) or None,
            headers=headers,
            content=spec.body.encode("utf-8") if spec.body is not None else None,
            timeout=httpx.Timeout(spec.timeout_seconds),
        )

    async def _send(self, spec: RequestSpec) -> httpx.Response:
        auth = httpx.BasicAuth(spec.username, spec.password) if spec.has_credentials else None
        try:
            request = self._build_request(spec)
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            raise FetchError(f"Invalid request: {e}", url=spec.url) from e
        try:
            response = await self._client.send(request, auth=auth)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(
                f"Request timed out after {spec.timeout_ms}ms: {e.__class__.__name__}",
                url=spec.url,
                timeout_ms=spec.timeout_ms,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed: {e}", url=spec.url) from e

        if not response.is_success:
            raise FetchError(
                f"{spec.method} returned HTTP {response.status_code}",
                url=spec.url,
                status_code=response.status_code,
            )
        return response

    async def fetch(self, spec: RequestSpec) -> Dataframe:
        """Issue the request and parse the body into an unnamed Dataframe."""
        response = await self._send(spec)
        parser = get_parser(spec.parser)
        dataframe = parser.parse(response.text, spec.property_path, spec.columns)
        logger.info(
            f"Fetched {spec.method} {spec.url}: {dataframe.row_count} rows, "
            f"{len(dataframe.columns)} columns"
        )
        return dataframe
