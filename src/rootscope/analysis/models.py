"""Data model of the analysis engine.

All records are created fresh per request and discarded once the response
is serialized. Optional fields stay ``None`` unless the sub-query that
produces them ran to completion, and ``None`` fields are omitted from the
serialized output.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel


class EntityKind(Enum):
    """Discriminator of a resolved entity."""

    PROJECT = "Project"
    INVESTOR = "Investor"
    PERSON = "Person"
    UNCLASSIFIED = "Unclassified"

    @classmethod
    def from_code(cls, code: Any) -> "EntityKind":
        """Map the numeric type code of a search hit to a kind."""
        try:
            number = int(code)
        except (TypeError, ValueError):
            return cls.UNCLASSIFIED
        return _KIND_CODES.get(number, cls.UNCLASSIFIED)


_KIND_CODES: dict[int, EntityKind] = {
    1: EntityKind.PROJECT,
    2: EntityKind.INVESTOR,
    3: EntityKind.PERSON,
}


def _serialize(record: Any, skip: tuple[str, ...] = ()) -> dict[str, Any]:
    """Dataclass -> camelCase dict, dropping unset optional fields."""
    output: dict[str, Any] = {}
    for f in fields(record):
        if f.name in skip:
            continue
        value = getattr(record, f.name)
        if value is None:
            continue
        output[to_camel(f.name)] = value
    return output


@dataclass(frozen=True)
class Entity:
    """Canonical reference produced by the entity resolver."""

    id: int
    display_name: str
    kind: EntityKind

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "displayName": self.display_name, "kind": self.kind.value}


@dataclass
class CompositeResult:
    """Merged record of a single ``analyze`` call."""

    entity: Entity
    primary_data: Any
    related_projects: list[Any] | None = None
    investors: Any = None
    ecosystem: list[Any] | None = None
    trends: dict[str, Any] | None = None
    fundraising: list[Any] | None = None
    people: Any = None
    tokens: Any = None
    summary: str | None = None
    failures: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        output = {"entity": self.entity.to_dict()}
        output.update(_serialize(self, skip=("entity", "failures")))
        if self.failures:
            output["failures"] = dict(self.failures)
        return output


@dataclass
class MetricSet:
    """Comparable metrics of one entity.

    Projects carry funding, establishment date, ecosystem tags and social
    scores; investors carry investment count, establishment date and
    category. Everything else stays unset.
    """

    kind: EntityKind
    funding_total: float | None = None
    establishment_date: str | None = None
    ecosystems: list[str] | None = None
    tags: list[str] | None = None
    heat: float | None = None
    influence: float | None = None
    followers: float | None = None
    investment_count: int | None = None
    category: Any = None

    def to_dict(self) -> dict[str, Any]:
        output = _serialize(self, skip=("kind",))
        output["kind"] = self.kind.value
        return output


@dataclass
class EntityAnalysis:
    """Per-entity slice of a comparison."""

    entity: Entity
    primary_data: Any
    metrics: MetricSet
    fundraising: list[Any] | None = None
    social: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        output = {"entity": self.entity.to_dict()}
        output.update(_serialize(self, skip=("entity", "metrics")))
        output["metrics"] = self.metrics.to_dict()
        return output


@dataclass
class ComparisonResult:
    """Side-by-side comparison of several entities, in input order."""

    entities: list[EntityAnalysis] = field(default_factory=list)
    metrics: dict[str, MetricSet] = field(default_factory=dict)
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [analysis.to_dict() for analysis in self.entities],
            "metrics": {name: metrics.to_dict() for name, metrics in self.metrics.items()},
            "summary": self.summary,
        }


@dataclass
class TrendBundle:
    """Result of ``track_trends``; one optional field per category branch."""

    category: str
    time_range: str | None = None
    hot_projects: list[Any] | None = None
    funding_rounds: Any = None
    job_changes: Any = None
    new_tokens: Any = None
    ecosystems: list[Any] | None = None
    ecosystem_projects: Any = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)
