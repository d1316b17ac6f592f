"""Tests for the HTTP fetcher with mocked transport.

Verifies:
  - The request carries method, url, query params, headers, body and basic auth
  - Exactly one request per fetch, no retries
  - Non-2xx, transport failures and timeouts map to the error taxonomy
  - The body is handed to the parser named in the RequestSpec
"""

import asyncio
import base64

import httpx
import pytest
from datafetch_http_provider.errors import FetchError, FetchTimeoutError, PathNotFoundError
from datafetch_http_provider.fetcher import HttpDataFetcher
from datafetch_http_provider.request_params import build_request_spec
from mock_http import MockTransport


async def test_get_with_query_params_and_headers(mock_client, users_schema, users_payload):
    users_schema["queryParam"] = {"page": "2"}
    users_schema["headers"] = {"X-Trace": "t-1"}
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)])
    fetcher = HttpDataFetcher(mock_client(transport))

    frame = await fetcher.fetch(build_request_spec(users_schema))

    assert frame.rows == ((1, "a"), (2, "b"))
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/users"
    assert request.url.params["page"] == "2"
    assert request.headers["X-Trace"] == "t-1"
    assert "Authorization" not in request.headers


async def test_post_body_and_content_type(mock_client, users_schema, users_payload):
    users_schema.update({"method": "POST", "body": '{"q": 1}', "contentType": "application/json"})
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)])
    fetcher = HttpDataFetcher(mock_client(transport))

    await fetcher.fetch(build_request_spec(users_schema))

    request = transport.requests[0]
    assert request.method == "POST"
    assert request.content == b'{"q": 1}'
    assert request.headers["Content-Type"] == "application/json"


async def test_explicit_content_type_header_wins(mock_client, users_schema, users_payload):
    users_schema.update(
        {"method": "PUT", "body": "a=1", "headers": {"content-type": "text/plain"}}
    )
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)])
    fetcher = HttpDataFetcher(mock_client(transport))

    await fetcher.fetch(build_request_spec(users_schema))

    assert transport.requests[0].headers["Content-Type"] == "text/plain"


async def test_basic_auth_sent(mock_client, users_schema, users_payload):
    users_schema.update({"username": "alice", "password": "s3cret"})
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)])
    fetcher = HttpDataFetcher(mock_client(transport))

    await fetcher.fetch(build_request_spec(users_schema))

    expected = base64.b64encode(b"alice:s3cret").decode()
    assert transport.requests[0].headers["Authorization"] == f"Basic {expected}"


async def test_non_success_status(mock_client, users_schema):
    transport = MockTransport(responses=[httpx.Response(401, json={"error": "Unauthorized"})])
    fetcher = HttpDataFetcher(mock_client(transport))

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch(build_request_spec(users_schema))
    assert exc_info.value.status_code == 401
    assert exc_info.value.context["url"] == users_schema["url"]
    assert len(transport.requests) == 1


async def test_transport_failure_not_retried(mock_client, users_schema, users_payload):
    transport = MockTransport(
        responses=[
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json=users_payload),
        ]
    )
    fetcher = HttpDataFetcher(mock_client(transport))

    with pytest.raises(FetchError, match="Request failed") as exc_info:
        await fetcher.fetch(build_request_spec(users_schema))
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert len(transport.requests) == 1


async def test_timeout(mock_client, users_schema, users_payload):
    users_schema["timeout"] = 1
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)], delay=0.2)
    fetcher = HttpDataFetcher(mock_client(transport))

    with pytest.raises(FetchTimeoutError) as exc_info:
        await fetcher.fetch(build_request_spec(users_schema))
    assert isinstance(exc_info.value, FetchError)
    assert exc_info.value.context["timeout_ms"] == 1


async def test_timeout_against_slow_server(users_schema):
    async def stall(reader, writer):
        await asyncio.sleep(0.5)
        writer.close()

    server = await asyncio.start_server(stall, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    users_schema.update({"url": f"http://127.0.0.1:{port}/users", "timeout": 50})

    async with server, httpx.AsyncClient(trust_env=False) as client:
        with pytest.raises(FetchTimeoutError) as exc_info:
            await HttpDataFetcher(client).fetch(build_request_spec(users_schema))
    assert exc_info.value.context["timeout_ms"] == 50
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


async def test_request_timeout_from_spec(mock_client, users_schema, users_payload):
    users_schema["timeout"] = 2500
    transport = MockTransport(responses=[httpx.Response(200, json=users_payload)])
    fetcher = HttpDataFetcher(mock_client(transport))

    await fetcher.fetch(build_request_spec(users_schema))

    timeout = transport.requests[0].extensions["timeout"]
    assert timeout == {"connect": 2.5, "read": 2.5, "write": 2.5, "pool": 2.5}


async def test_parser_errors_propagate(mock_client, users_schema):
    users_schema["property"] = "rows"
    transport = MockTransport(responses=[httpx.Response(200, json={"data": []})])
    fetcher = HttpDataFetcher(mock_client(transport))

    with pytest.raises(PathNotFoundError):
        await fetcher.fetch(build_request_spec(users_schema))


async def test_unencodable_request_maps_to_fetch_error(mock_client, users_schema):
    spec = build_request_spec(users_schema).model_copy(update={"headers": (("X-Name", "café"),)})
    transport = MockTransport(responses=[])
    fetcher = HttpDataFetcher(mock_client(transport))

    with pytest.raises(FetchError, match="Invalid request") as exc_info:
        await fetcher.fetch(spec)
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
    assert transport.requests == []
