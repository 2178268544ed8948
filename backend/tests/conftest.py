"""Pytest fixtures for testing."""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from bunlint.api.main import app
from bunlint.db import mongo
from bunlint.llm import ProviderConfig


@pytest_asyncio.fixture
async def mock_db() -> AsyncGenerator[Any, None]:
    """Provide a mock MongoDB database for testing."""
    mock_client = AsyncMongoMockClient()
    mock_database = mock_client[mongo.DATABASE_NAME]

    # Replace the real client with mock
    mongo.set_client(mock_client)

    yield mock_database

    mongo.set_client(None)


@pytest_asyncio.fixture
async def client(mock_db: Any) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def provider_config() -> ProviderConfig:
    """Two models by two API versions."""
    return ProviderConfig(
        api_key="test-key",
        models=("gemini-2.0-flash-lite", "gemini-2.0-flash"),
        api_versions=("v1beta", "v1"),
        base_url="https://gemini.test",
        timeout=5.0,
    )


def gemini_body(text: str) -> dict[str, Any]:
    """A successful generateContent body carrying ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def gemini_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Build a MockTransport that replays queued responses.

    Each queued item is either an ``httpx.Response`` or an exception to raise.
    Returns the transport and the list of requests it received.
    """

    def factory(*responses: httpx.Response | Exception) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        queue = list(responses)
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            item = queue.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        return httpx.MockTransport(handler), seen

    return factory


@pytest.fixture
def gemini_ok() -> Callable[[str], httpx.Response]:
    """Build a 200 generateContent response carrying the given text."""

    def factory(text: str) -> httpx.Response:
        return httpx.Response(200, json=gemini_body(text))

    return factory


@pytest.fixture
def gemini_error() -> Callable[[int, str], httpx.Response]:
    """Build an error response with a Google-style error body."""

    def factory(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, content=json.dumps({"error": {"message": message}}))

    return factory
