"""
Shared fixtures for the Logseq bridge tests.

Nothing here talks to a real Logseq instance: dispatcher tests use
FakeLogseqClient, API client tests use httpx.MockTransport.
"""

import os
import sys
from typing import Any, Sequence

import pytest

# Ensure project root is on sys.path so the top-level packages resolve in tests
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from logseq_core.dispatcher import ToolDispatcher  # noqa: E402
from logseq_core.models import Settings  # noqa: E402


class FakeLogseqClient:
    """Records every call and answers from a method → response table.

    A response may be a plain value, an exception instance (raised), or a
    callable taking the positional args and returning the value.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, list[Any]]] = []

    async def call(self, method: str, args: Sequence[Any] = ()) -> Any:
        self.calls.append((method, list(args)))
        response = self.responses.get(method)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(list(args))
        return response


@pytest.fixture
def fake_client() -> FakeLogseqClient:
    return FakeLogseqClient()


@pytest.fixture
def dispatcher(fake_client: FakeLogseqClient) -> ToolDispatcher:
    return ToolDispatcher(fake_client)


@pytest.fixture
def settings() -> Settings:
    return Settings(token="test-token", base_url="http://logseq.test", timeout_seconds=5.0)
