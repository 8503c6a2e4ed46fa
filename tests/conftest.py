"""Pytest fixtures and shared test configuration.

Fixtures:
    - config: Pipeline configuration with default limits
    - session: Fresh StreamSession per test
    - async_client: HTTPX client bound to the FastAPI app
    - tool_stream: Framed event stream with text and a tool round trip
"""

import json
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from chatstream.api import app
from chatstream.config import PipelineConfig
from chatstream.transcript.session import StreamSession


def frame(payload: dict[str, Any] | str) -> str:
    """Frame one payload as a ``data:`` record."""
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return f"data: {body}\n\n"


@pytest.fixture
def config() -> PipelineConfig:
    """Return configuration with default structuring limits."""
    return PipelineConfig(api_base_url="http://test")


@pytest.fixture
def session(config: PipelineConfig) -> StreamSession:
    """Create an empty session.

    Args:
        config: Pipeline configuration.

    Returns:
        StreamSession with no messages.
    """
    return StreamSession(config=config)


@pytest.fixture
def tool_events() -> list[dict[str, Any]]:
    """Wire payloads for a reply that lists a directory."""
    return [
        {"type": "text", "content": "Let me look. "},
        {"type": "function_call", "functionCall": {"name": "fs.list", "args": {"path": "/home/me/src"}}},
        {"type": "function_response", "functionResponse": {"name": "fs.list", "response": {"total": 2}}},
        {"type": "text", "content": "### Files\n\n| name | kind |\n|---|---|\n"},
        {"type": "text", "content": "| app.py | file |\n| lib | folder |\n"},
    ]


@pytest.fixture
def tool_stream(tool_events: list[dict[str, Any]]) -> str:
    """Framed stream of ``tool_events`` followed by the done token."""
    return "".join(frame(event) for event in tool_events) + frame("[DONE]")


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
