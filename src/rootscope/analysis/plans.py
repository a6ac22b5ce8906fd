"""Sub-query registry for single-entity analysis.

Each entity kind maps to a list of ``SubQuery`` entries. An entry declares
when it runs (``selected``), how it fetches (``fetch``) and which fields of
the composite record it fills (``apply``). Adding a new enrichment means
adding an entry here; ``QueryOrchestrator.analyze()`` never changes.

The first entry of every plan is the primary record fetch. Branches that
depend on the primary record await ``context.primary()`` instead of
fetching it again.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..upstream import UpstreamClient
from ..validation import AnalyzeRequest
from .models import CompositeResult, Entity, EntityKind

HOT_INDEX_WINDOW_DAYS = 7


@dataclass
class AnalysisContext:
    """Per-call state shared by the sub-queries of one ``analyze``."""

    client: UpstreamClient
    entity: Entity
    request: AnalyzeRequest
    primary_task: asyncio.Task[Any] | None = field(default=None, repr=False)

    async def primary(self) -> Any:
        """Wait for the shared primary record fetch."""
        if self.primary_task is None:
            raise RuntimeError("Primary fetch has not been scheduled")
        return await self.primary_task

    @property
    def detailed(self) -> bool:
        return self.request.depth != "basic"


@dataclass
class SubQuery:
    """One upstream enrichment of a composite record.

    Attributes:
        name: Identifier used in logs and in ``CompositeResult.failures``
        fetch: Coroutine function issuing the upstream call(s)
        apply: Writes the fetched value into the composite record
        selected: Predicate on the request deciding whether the branch runs
        primary: Whether this entry produces ``primary_data``
    """

    name: str
    fetch: Callable[[AnalysisContext], Awaitable[Any]]
    apply: Callable[[CompositeResult, Any], None]
    selected: Callable[[AnalyzeRequest], bool] = lambda request: True
    primary: bool = False


@dataclass
class EcosystemPeers:
    """Outcome of the ecosystem branch."""

    matches: list[dict[str, Any]]
    projects: Any = None


def items_of(data: Any) -> list[Any]:
    """Extract the record list of a listing payload (``{"items": [...]}`` or a bare list)."""
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        items = data.get("items")
        if isinstance(items, list):
            return items
    return []


def same_id(value: Any, entity_id: int) -> bool:
    try:
        return int(value) == entity_id
    except (TypeError, ValueError):
        return False


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """Await every awaitable to completion, then raise the first failure.

    Unlike a bare ``gather`` no sibling is left running when one fails.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes


def ecosystem_names(record: Any) -> list[str]:
    """Ecosystem names declared on a project record."""
    if not isinstance(record, Mapping):
        return []
    raw = record.get("ecosystem")
    if isinstance(raw, str):
        return [name.strip() for name in raw.split(",") if name.strip()]
    if isinstance(raw, list):
        return [str(name) for name in raw if name]
    return []


def analysis_type_in(*types: str) -> Callable[[AnalyzeRequest], bool]:
    return lambda request: request.analysis_type in types


def include_related(request: AnalyzeRequest) -> bool:
    return request.include_related


# ============================================================================
# Fetchers
# ============================================================================


async def _fetch_project(ctx: AnalysisContext) -> Any:
    return await ctx.client.get_project(
        ctx.entity.id,
        include_team=ctx.detailed,
        include_investors=ctx.detailed,
    )


async def _fetch_project_fundraising(ctx: AnalysisContext) -> list[Any]:
    data = await ctx.client.get_funding_rounds(project_id=ctx.entity.id)
    return items_of(data)


async def _fetch_ecosystem_peers(ctx: AnalysisContext) -> EcosystemPeers:
    project, catalog = await gather_all(ctx.primary(), ctx.client.get_ecosystem_map())

    names = set(ecosystem_names(project))
    matches = [
        entry
        for entry in items_of(catalog)
        if isinstance(entry, Mapping) and entry.get("ecosystem_name") in names
    ]
    if not matches:
        return EcosystemPeers(matches=[])

    ids = ",".join(str(entry.get("ecosystem_id")) for entry in matches)
    projects = await ctx.client.get_projects_by_ecosystem(ids)
    return EcosystemPeers(matches=matches, projects=projects)


async def _fetch_hot_index(ctx: AnalysisContext) -> dict[str, Any]:
    data = await ctx.client.get_hot_projects(days=HOT_INDEX_WINDOW_DAYS)
    entry = next(
        (
            item
            for item in items_of(data)
            if isinstance(item, Mapping) and same_id(item.get("project_id"), ctx.entity.id)
        ),
        None,
    )
    return {"windowDays": HOT_INDEX_WINDOW_DAYS, "hotIndex": entry}


async def _fetch_org(ctx: AnalysisContext) -> Any:
    return await ctx.client.get_org(
        ctx.entity.id,
        include_team=ctx.detailed,
        include_investments=True,
    )


async def _fetch_investor_listing(ctx: AnalysisContext) -> dict[str, Any]:
    data = await ctx.client.get_investors(page=1, page_size=ctx.client.config.max_page_size)
    listing = items_of(data)
    entry = next(
        (
            item
            for item in listing
            if isinstance(item, Mapping) and same_id(item.get("invest_id"), ctx.entity.id)
        ),
        None,
    )
    return {"listing": entry, "scanned": len(listing)}


async def _fetch_person(ctx: AnalysisContext) -> Any:
    return await ctx.client.get_people(ctx.entity.id)


async def _fetch_job_changes(ctx: AnalysisContext) -> Any:
    # Market-wide listing; the upstream has no per-person filter.
    return await ctx.client.get_job_changes()


async def _fetch_new_tokens(ctx: AnalysisContext) -> Any:
    return await ctx.client.get_new_tokens()


# ============================================================================
# Appliers
# ============================================================================


def _set_primary(result: CompositeResult, value: Any) -> None:
    result.primary_data = value


def _set_fundraising(result: CompositeResult, value: list[Any]) -> None:
    result.fundraising = value


def _set_ecosystem(result: CompositeResult, value: EcosystemPeers) -> None:
    result.ecosystem = value.matches
    if value.projects is not None:
        result.related_projects = items_of(value.projects)


def _set_trends(result: CompositeResult, value: dict[str, Any]) -> None:
    result.trends = value


def _set_investors(result: CompositeResult, value: dict[str, Any]) -> None:
    result.investors = value


def _set_people(result: CompositeResult, value: Any) -> None:
    result.people = value


def _set_tokens(result: CompositeResult, value: Any) -> None:
    result.tokens = value


# ============================================================================
# Registry
# ============================================================================

PROJECT_PLAN: list[SubQuery] = [
    SubQuery("project_detail", _fetch_project, _set_primary, primary=True),
    SubQuery(
        "fundraising",
        _fetch_project_fundraising,
        _set_fundraising,
        selected=analysis_type_in("comprehensive", "fundraising"),
    ),
    SubQuery("ecosystem_peers", _fetch_ecosystem_peers, _set_ecosystem, selected=include_related),
    SubQuery(
        "hot_index",
        _fetch_hot_index,
        _set_trends,
        selected=analysis_type_in("trends", "comprehensive"),
    ),
]

INVESTOR_PLAN: list[SubQuery] = [
    SubQuery("org_detail", _fetch_org, _set_primary, primary=True),
    SubQuery(
        "investor_listing",
        _fetch_investor_listing,
        _set_investors,
        selected=analysis_type_in("comprehensive", "investor"),
    ),
]

PERSON_PLAN: list[SubQuery] = [
    SubQuery("person_detail", _fetch_person, _set_primary, primary=True),
    SubQuery("job_changes", _fetch_job_changes, _set_people, selected=include_related),
]

# Appended to every classified plan
COMMON_PLAN: list[SubQuery] = [
    SubQuery(
        "new_tokens",
        _fetch_new_tokens,
        _set_tokens,
        selected=analysis_type_in("comprehensive"),
    ),
]

PLAN_REGISTRY: dict[EntityKind, list[SubQuery]] = {
    EntityKind.PROJECT: PROJECT_PLAN,
    EntityKind.INVESTOR: INVESTOR_PLAN,
    EntityKind.PERSON: PERSON_PLAN,
    EntityKind.UNCLASSIFIED: [],
}


def plan_for(kind: EntityKind, request: AnalyzeRequest) -> list[SubQuery]:
    """Selected sub-queries for ``kind``, primary first, in declaration order."""
    base = PLAN_REGISTRY.get(kind, [])
    if not base:
        return []
    return [query for query in base + COMMON_PLAN if query.selected(request)]
