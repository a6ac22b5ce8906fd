"""Base upstream client interface.

Defines the abstract interface the analysis engine depends on, plus one
typed helper per RootData endpoint. Concrete clients only implement
``call()``; everything else is expressed in terms of it, so tests can swap
in an in-memory fake without touching callers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

from ..config import Settings, settings

SUCCESS_CODE = 200


@dataclass(frozen=True)
class UpstreamResponse:
    """Envelope returned by every RootData endpoint."""

    result: int
    data: Any = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.result == SUCCESS_CODE


class UpstreamError(Exception):
    """Base exception for upstream failures."""

    def __init__(self, message: str, endpoint: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint


class UpstreamConfigurationError(UpstreamError):
    """Raised when the client cannot be configured (e.g. missing API key)."""

    pass


class UpstreamTransportError(UpstreamError):
    """Raised on a non-2xx HTTP status or a network failure."""

    def __init__(self, message: str, endpoint: str = "", status_code: int | None = None) -> None:
        super().__init__(message, endpoint)
        self.status_code = status_code


class UpstreamApplicationError(UpstreamError):
    """Raised when the envelope's ``result`` field is not 200."""

    def __init__(self, message: str, endpoint: str = "", code: int | None = None) -> None:
        super().__init__(message, endpoint)
        self.code = code


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop unset keys so the upstream applies its own defaults."""
    return {key: value for key, value in body.items() if value is not None}


class UpstreamClient(ABC):
    """Abstract RootData client.

    Subclasses implement ``call()`` (and connection lifecycle if they hold
    resources). The typed helpers below return the envelope's ``data`` and
    apply the paging limits of ``config``.
    """

    def __init__(self, config: Settings | None = None) -> None:
        self._config = config or settings

    @property
    def config(self) -> Settings:
        return self._config

    def _capped(self, page_size: int | None, cap: int) -> int:
        return min(page_size or self._config.default_page_size, cap)

    async def connect(self) -> None:
        """Acquire any resources needed to issue calls."""
        pass

    async def disconnect(self) -> None:
        """Release resources acquired by connect()."""
        pass

    @abstractmethod
    async def call(self, endpoint: str, body: dict[str, Any] | None = None) -> UpstreamResponse:
        """Issue one request/response exchange against a named endpoint.

        Args:
            endpoint: Upstream operation name (e.g. "ser_inv")
            body: JSON body

        Returns:
            UpstreamResponse with ``result == 200``

        Raises:
            UpstreamTransportError: On transport failure
            UpstreamApplicationError: On a non-200 envelope
        """
        ...

    async def __aenter__(self) -> "UpstreamClient":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.disconnect()

    async def _data(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        response = await self.call(endpoint, _compact(body or {}))
        return response.data

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    async def search(self, query: str, precise_x_search: bool | None = None) -> Any:
        return await self._data("ser_inv", {"query": query, "precise_x_search": precise_x_search})

    async def get_project(
        self,
        project_id: int,
        include_team: bool | None = None,
        include_investors: bool | None = None,
    ) -> Any:
        return await self._data(
            "get_item",
            {
                "project_id": project_id,
                "include_team": include_team,
                "include_investors": include_investors,
            },
        )

    async def get_org(
        self,
        org_id: int,
        include_team: bool | None = None,
        include_investments: bool | None = None,
    ) -> Any:
        return await self._data(
            "get_org",
            {
                "org_id": org_id,
                "include_team": include_team,
                "include_investments": include_investments,
            },
        )

    async def get_people(self, people_id: int) -> Any:
        return await self._data("get_people", {"people_id": people_id})

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_investors(self, page: int | None = None, page_size: int | None = None) -> Any:
        return await self._data(
            "get_invest",
            {
                "page": page or 1,
                "page_size": self._capped(page_size, self._config.max_page_size),
            },
        )

    async def get_funding_rounds(
        self,
        page: int | None = None,
        page_size: int | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
        project_id: int | None = None,
    ) -> Any:
        return await self._data(
            "get_fac",
            {
                "page": page or 1,
                "page_size": self._capped(page_size, self._config.max_funding_page_size),
                "start_time": start_time,
                "end_time": end_time,
                "min_amount": min_amount,
                "max_amount": max_amount,
                "project_id": project_id,
            },
        )

    async def sync_update(self, begin_time: int, end_time: int | None = None) -> Any:
        return await self._data("ser_change", {"begin_time": begin_time, "end_time": end_time})

    async def get_hot_projects(self, days: int) -> Any:
        return await self._data("hot_index", {"days": days})

    async def get_x_hot_projects(
        self,
        heat: bool | None = None,
        influence: bool | None = None,
        followers: bool | None = None,
    ) -> Any:
        return await self._data(
            "hot_project_on_x",
            {
                "heat": heat is not False,
                "influence": influence is not False,
                "followers": followers is not False,
            },
        )

    async def get_x_popular_figures(
        self,
        rank_type: Literal["heat", "influence"],
        page: int | None = None,
        page_size: int | None = None,
    ) -> Any:
        return await self._data(
            "leading_figures_on_crypto_x",
            {
                "page": page or 1,
                "page_size": self._capped(page_size, self._config.max_page_size),
                "rank_type": rank_type,
            },
        )

    async def get_job_changes(
        self,
        recent_joinees: bool | None = None,
        recent_resignations: bool | None = None,
    ) -> Any:
        return await self._data(
            "job_changes",
            {
                "recent_joinees": recent_joinees is not False,
                "recent_resignations": recent_resignations is not False,
            },
        )

    async def get_new_tokens(self) -> Any:
        return await self._data("new_tokens")

    async def get_ecosystem_map(self) -> Any:
        return await self._data("ecosystem_map")

    async def get_tag_map(self) -> Any:
        return await self._data("tag_map")

    async def get_projects_by_ecosystem(self, ecosystem_ids: str) -> Any:
        return await self._data("projects_by_ecosystems", {"ecosystem_ids": ecosystem_ids})

    async def get_projects_by_tags(self, tag_ids: str) -> Any:
        return await self._data("projects_by_tags", {"tag_ids": tag_ids})
