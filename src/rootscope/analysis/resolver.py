"""Entity resolution against the upstream search endpoint.

A resolution strategy picks one hit out of the search result list. The
default, ``first_result``, takes the first element as canonical with no
ranking or disambiguation; ``exact_name`` prefers a case-insensitive name
match and otherwise behaves like ``first_result``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..config import ResolutionStrategyName
from ..upstream import UpstreamClient
from .exceptions import AnalysisError, NotFoundError
from .models import Entity, EntityKind

logger = logging.getLogger(__name__)


class ResolutionStrategy(ABC):
    """Chooses the canonical hit among search results."""

    name: str = ""

    @abstractmethod
    def choose(self, query: str, hits: list[Mapping[str, Any]]) -> Mapping[str, Any]:
        """Pick one hit. ``hits`` is never empty."""
        ...


class FirstResultStrategy(ResolutionStrategy):
    name = "first_result"

    def choose(self, query: str, hits: list[Mapping[str, Any]]) -> Mapping[str, Any]:
        return hits[0]


class ExactNameStrategy(ResolutionStrategy):
    name = "exact_name"

    def choose(self, query: str, hits: list[Mapping[str, Any]]) -> Mapping[str, Any]:
        wanted = query.casefold()
        for hit in hits:
            if str(hit.get("name", "")).casefold() == wanted:
                return hit
        return hits[0]


STRATEGIES: dict[str, ResolutionStrategy] = {
    FirstResultStrategy.name: FirstResultStrategy(),
    ExactNameStrategy.name: ExactNameStrategy(),
}


def get_strategy(name: ResolutionStrategyName) -> ResolutionStrategy:
    """Look up a resolution strategy by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown resolution strategy: {name}. Available: {list(STRATEGIES)}"
        ) from None


class EntityResolver:
    """Turns free text into an ``Entity`` with one search call."""

    def __init__(
        self,
        client: UpstreamClient,
        strategy: ResolutionStrategy | None = None,
    ) -> None:
        self._client = client
        self._strategy = strategy or STRATEGIES["first_result"]

    @property
    def strategy(self) -> ResolutionStrategy:
        return self._strategy

    async def resolve(self, query: str) -> Entity:
        """Resolve ``query`` to a canonical entity.

        Raises:
            NotFoundError: If the search yields no hits
            AnalysisError: If the chosen hit carries no usable id
            UpstreamError: If the search call fails
        """
        data = await self._client.search(query)
        hits = [hit for hit in data if isinstance(hit, Mapping)] if isinstance(data, list) else []

        if not hits:
            logger.warning(f"Resolution miss for '{query}'")
            raise NotFoundError(query)

        hit = self._strategy.choose(query, hits)
        try:
            entity_id = int(hit["id"])
        except (KeyError, TypeError, ValueError):
            raise AnalysisError(f"Search result for '{query}' has no valid id") from None

        entity = Entity(
            id=entity_id,
            display_name=str(hit.get("name") or query),
            kind=EntityKind.from_code(hit.get("type")),
        )
        logger.info(f"Resolved '{query}' to {entity.kind.value} #{entity.id} ({entity.display_name})")
        return entity
