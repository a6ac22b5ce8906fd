"""Shared test fixtures for RootScope."""

import inspect
from collections.abc import Callable
from typing import Any

import pytest

from rootscope.config import Settings
from rootscope.upstream import UpstreamClient, UpstreamResponse
from rootscope.upstream.base import UpstreamApplicationError


class FakeUpstreamClient(UpstreamClient):
    """In-memory upstream that records every call.

    ``responses`` maps an endpoint to its ``data`` payload, to an exception
    instance to raise, or to a callable receiving the request body. A
    callable may return an awaitable, which is awaited before responding.
    Endpoints without an entry return ``None``.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        config: Settings | None = None,
    ) -> None:
        super().__init__(config)
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.closed = True

    async def call(self, endpoint: str, body: dict[str, Any] | None = None) -> UpstreamResponse:
        self.calls.append((endpoint, dict(body or {})))
        value = self.responses.get(endpoint)
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(body or {})
        if inspect.isawaitable(value):
            value = await value
        return UpstreamResponse(result=200, data=value)

    @property
    def endpoints(self) -> list[str]:
        return [endpoint for endpoint, _ in self.calls]

    def bodies(self, endpoint: str) -> list[dict[str, Any]]:
        return [body for name, body in self.calls if name == endpoint]


def search_hit(entity_id: int, name: str, type_code: int) -> dict[str, Any]:
    return {"id": entity_id, "name": name, "type": type_code}


@pytest.fixture
def make_client() -> Callable[..., FakeUpstreamClient]:
    """Factory for fake upstream clients."""

    def _make(responses: dict[str, Any] | None = None) -> FakeUpstreamClient:
        return FakeUpstreamClient(responses)

    return _make


@pytest.fixture
def project_record() -> dict[str, Any]:
    """Sample RootData project record."""
    return {
        "project_id": 12,
        "project_name": "Ethereum",
        "establishment_date": "2013",
        "total_funding": 2340000,
        "ecosystem": ["Ethereum", "Arbitrum"],
        "tags": ["Infrastructure", "Layer 1"],
    }


@pytest.fixture
def project_responses(project_record: dict[str, Any]) -> dict[str, Any]:
    """Upstream data for a fully populated project analysis."""
    return {
        "ser_inv": [search_hit(12, "Ethereum", 1), search_hit(99, "Ethereum Fdn", 2)],
        "get_item": project_record,
        "get_fac": {"items": [{"name": "Ethereum", "amount": 1000}], "total": 1},
        "ecosystem_map": [
            {"ecosystem_id": 52, "ecosystem_name": "Ethereum", "project_num": 3000},
            {"ecosystem_id": 11, "ecosystem_name": "Solana", "project_num": 900},
        ],
        "projects_by_ecosystems": [{"project_id": 7, "project_name": "Uniswap"}],
        "hot_index": [
            {"project_id": 3, "rank": 1, "eval": 99.1},
            {"project_id": 12, "rank": 4, "eval": 87.5},
        ],
        "new_tokens": [{"project_id": 200}, {"project_id": 201}],
    }


@pytest.fixture
def application_error() -> UpstreamApplicationError:
    return UpstreamApplicationError("Insufficient credits", endpoint="get_fac", code=110)
