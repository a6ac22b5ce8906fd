"""Comparison engine.

Names are processed one at a time in input order. A name that does not
resolve is dropped and the remaining names continue; any upstream failure
aborts the comparison.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..upstream import UpstreamClient
from ..validation import CompareType
from .exceptions import AnalysisError, NotFoundError
from .models import ComparisonResult, Entity, EntityAnalysis, EntityKind, MetricSet
from .plans import ecosystem_names, gather_all, items_of, same_id
from .resolver import EntityResolver
from .summarizer import as_number, summarize_comparison

logger = logging.getLogger(__name__)

SOCIAL_RANKINGS = ("heat", "influence", "followers")


def _wants_full(compare_type: CompareType | None) -> bool:
    return compare_type in (None, "all")


def _wants_funding(compare_type: CompareType | None) -> bool:
    return compare_type in (None, "all", "funding")


def _wants_social(compare_type: CompareType | None) -> bool:
    return compare_type in (None, "all", "social")


def _tag_names(record: Mapping[str, Any]) -> list[str] | None:
    raw = record.get("tags")
    if isinstance(raw, str):
        return [tag.strip() for tag in raw.split(",") if tag.strip()]
    if isinstance(raw, list):
        return [str(tag.get("name") if isinstance(tag, Mapping) else tag) for tag in raw]
    return None


def social_scores(data: Any, entity_id: int) -> dict[str, Any]:
    """Pick the entity's entry out of each X ranking list."""
    rankings = data if isinstance(data, Mapping) else {}
    scores: dict[str, Any] = {}
    for ranking in SOCIAL_RANKINGS:
        scores[ranking] = next(
            (
                entry
                for entry in items_of(rankings.get(ranking))
                if isinstance(entry, Mapping) and same_id(entry.get("project_id"), entity_id)
            ),
            None,
        )
    return scores


def _score(entry: Any, ranking: str) -> float | None:
    if not isinstance(entry, Mapping):
        return None
    for key in ("score", ranking, "value"):
        number = as_number(entry.get(key))
        if number is not None:
            return number
    return None


def extract_metrics(
    entity: Entity,
    record: Any,
    social: dict[str, Any] | None = None,
) -> MetricSet:
    """Type-dependent metrics of one entity."""
    metrics = MetricSet(kind=entity.kind)
    if not isinstance(record, Mapping):
        return metrics

    if entity.kind is EntityKind.PROJECT:
        metrics.funding_total = as_number(record.get("total_funding"))
        metrics.establishment_date = record.get("establishment_date") or None
        metrics.ecosystems = ecosystem_names(record) or None
        metrics.tags = _tag_names(record)
        if social:
            metrics.heat = _score(social.get("heat"), "heat")
            metrics.influence = _score(social.get("influence"), "influence")
            metrics.followers = _score(social.get("followers"), "followers")

    elif entity.kind is EntityKind.INVESTOR:
        investments = record.get("investments")
        if isinstance(investments, list):
            metrics.investment_count = len(investments)
        metrics.establishment_date = record.get("establishment_date") or None
        metrics.category = record.get("category")

    return metrics


class ComparisonEngine:
    """Resolves several names and builds a side-by-side comparison."""

    def __init__(self, client: UpstreamClient, resolver: EntityResolver | None = None) -> None:
        self._client = client
        self._resolver = resolver or EntityResolver(client)

    async def compare(
        self,
        names: list[str],
        compare_type: CompareType | None = None,
    ) -> ComparisonResult:
        """Compare ``names`` in input order.

        Raises:
            UpstreamError: If any upstream call other than a search miss fails
        """
        result = ComparisonResult()

        for name in names:
            try:
                entity = await self._resolver.resolve(name)
            except (NotFoundError, AnalysisError) as e:
                logger.warning(f"Skipping '{name}' in comparison: {e}")
                continue

            analysis = await self._analyze(entity, compare_type)
            result.entities.append(analysis)
            result.metrics[entity.display_name] = analysis.metrics

        result.summary = summarize_comparison(result.entities)
        return result

    async def _analyze(self, entity: Entity, compare_type: CompareType | None) -> EntityAnalysis:
        record = await self._fetch_record(entity, compare_type)
        fundraising: list[Any] | None = None
        social: dict[str, Any] | None = None

        if entity.kind is EntityKind.PROJECT:
            funding_call = (
                self._client.get_funding_rounds(project_id=entity.id)
                if _wants_funding(compare_type)
                else None
            )
            social_call = self._client.get_x_hot_projects() if _wants_social(compare_type) else None
            funding_data, social_data = await gather_all(
                funding_call or _nothing(),
                social_call or _nothing(),
            )
            if funding_call is not None:
                fundraising = items_of(funding_data)
            if social_call is not None:
                social = social_scores(social_data, entity.id)

        return EntityAnalysis(
            entity=entity,
            primary_data=record,
            metrics=extract_metrics(entity, record, social),
            fundraising=fundraising,
            social=social,
        )

    async def _fetch_record(self, entity: Entity, compare_type: CompareType | None) -> Any:
        full = _wants_full(compare_type)
        if entity.kind is EntityKind.PROJECT:
            return await self._client.get_project(
                entity.id, include_team=full, include_investors=full
            )
        if entity.kind is EntityKind.INVESTOR:
            return await self._client.get_org(
                entity.id, include_team=full, include_investments=True
            )
        if entity.kind is EntityKind.PERSON:
            return await self._client.get_people(entity.id)
        return {"id": entity.id, "name": entity.display_name}


async def _nothing() -> None:
    return None
