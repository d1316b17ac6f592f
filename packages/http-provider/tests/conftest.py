"""Shared test fixtures for HTTP provider tests.

Provides:
  - A minimal valid schema description
  - The users payload used across fetcher and provider tests
  - A factory wiring an httpx client onto a MockTransport
"""

from typing import Any

import httpx
import pytest
from mock_http import MockTransport


@pytest.fixture
def users_payload() -> dict[str, Any]:
    return {
        "data": [
            {"id": 1, "name": "a"},
            {"id": 2, "name": "b"},
        ],
        "meta": {"total": 2},
    }


@pytest.fixture
def users_schema() -> dict[str, Any]:
    return {
        "url": "https://api.example.com/users",
        "username": "",
        "password": "",
        "property": "data",
        "columns": [
            {"name": "id", "type": "NUMERIC"},
            {"name": "name", "type": "STRING"},
        ],
    }


@pytest.fixture
async def mock_client():
    """Yield a factory ``(transport) -> httpx.AsyncClient``; clients are closed on teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(transport: MockTransport) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()
