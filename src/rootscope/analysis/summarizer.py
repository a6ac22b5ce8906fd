"""Text digests of composite and comparison results.

Pure functions with no I/O. Formatting rules:
- the entity label is the first of ``project_name``, ``org_name``,
  ``people_name`` present on the primary record
- funding amounts are divided by 1,000,000 and rendered with two decimals
  and an ``M`` suffix (``2340000`` -> ``2.34M``)
- dates are rendered verbatim
- a line whose driving field is absent is omitted; no placeholders
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any

from ..validation import AnalyzeRequest
from .models import CompositeResult, EntityAnalysis, EntityKind

LABEL_FIELDS = ("project_name", "org_name", "people_name")


def format_funding(amount: float) -> str:
    """Render a USD amount in millions, e.g. ``2.34M``."""
    return f"{amount / 1_000_000:.2f}M"


def as_number(value: Any) -> float | None:
    """Return ``value`` if it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def entity_label(record: Any) -> str | None:
    if not isinstance(record, Mapping):
        return None
    for key in LABEL_FIELDS:
        value = record.get(key)
        if value:
            return str(value)
    return None


def _count(value: Any) -> int:
    return len(value) if isinstance(value, Sequence) and not isinstance(value, str) else 0


def summarize(result: CompositeResult, request: AnalyzeRequest) -> str:
    """Fold a composite result into a human-readable digest."""
    primary: Mapping[str, Any] = (
        result.primary_data if isinstance(result.primary_data, Mapping) else {}
    )
    lines: list[str] = []

    label = entity_label(primary)
    if label:
        lines.append(f"{result.entity.kind.value}: {label}")
    lines.append(f"Analysis: {request.analysis_type} ({request.depth})")

    funding = as_number(primary.get("total_funding"))
    if funding is not None:
        lines.append(f"Total funding: {format_funding(funding)}")

    established = primary.get("establishment_date")
    if established:
        lines.append(f"Established: {established}")

    if _count(primary.get("investments")):
        lines.append(f"Investments: {_count(primary['investments'])}")

    hot = (result.trends or {}).get("hotIndex")
    if isinstance(hot, Mapping):
        window = result.trends.get("windowDays")
        if hot.get("rank") is not None:
            lines.append(f"Hot index rank ({window}d): #{hot['rank']}")
        if hot.get("eval") is not None:
            lines.append(f"Hot index score: {hot['eval']}")

    if _count(result.related_projects):
        lines.append(f"Related projects: {_count(result.related_projects)}")

    if _count(result.fundraising):
        lines.append(f"Fundraising rounds: {_count(result.fundraising)}")

    if _count(result.tokens):
        lines.append(f"New tokens (market-wide): {_count(result.tokens)}")

    if result.failures:
        lines.append(f"Unavailable: {', '.join(result.failures)}")

    return "\n".join(lines)


def funding_ranking(entities: Sequence[EntityAnalysis]) -> list[tuple[str, float]]:
    """Entities with a numeric funding metric, highest first.

    Equal amounts keep their input order.
    """
    funded = [
        (analysis.entity.display_name, analysis.metrics.funding_total)
        for analysis in entities
        if as_number(analysis.metrics.funding_total) is not None
    ]
    return sorted(funded, key=lambda pair: pair[1], reverse=True)


def _describe(analysis: EntityAnalysis) -> str:
    metrics = analysis.metrics
    details: list[str] = [analysis.entity.kind.value]

    if metrics.funding_total is not None:
        details.append(f"funding {format_funding(metrics.funding_total)}")
    if metrics.establishment_date:
        details.append(f"established {metrics.establishment_date}")
    if metrics.kind is EntityKind.INVESTOR and metrics.investment_count is not None:
        details.append(f"{metrics.investment_count} investments")
    if metrics.ecosystems:
        details.append(f"ecosystems {', '.join(metrics.ecosystems)}")
    for score in ("heat", "influence", "followers"):
        value = getattr(metrics, score)
        if value is not None:
            details.append(f"{score} {value}")

    return f"{analysis.entity.display_name} ({'; '.join(details)})"


def summarize_comparison(entities: Sequence[EntityAnalysis]) -> str:
    """Input-ordered listing followed by the funding ranking."""
    if not entities:
        return "No entities could be resolved for comparison."

    lines = [f"Compared {len(entities)} entities:"]
    lines.extend(f"{i}. {_describe(analysis)}" for i, analysis in enumerate(entities, start=1))

    ranking = funding_ranking(entities)
    if ranking:
        lines.append("")
        lines.append("Funding ranking:")
        lines.extend(
            f"{i}. {name}: {format_funding(amount)}" for i, (name, amount) in enumerate(ranking, 1)
        )

    return "\n".join(lines)
