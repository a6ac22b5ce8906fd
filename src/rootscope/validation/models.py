"""Input validation models using Pydantic.

These models validate tool and CLI arguments before they reach the
analysis engine, so malformed options are rejected without any upstream
call. Field names are snake_case; the camelCase spellings used by tool
callers (``analysisType``, ``filterBy`` ...) are accepted as aliases.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

AnalysisType = Literal["comprehensive", "fundraising", "trends", "investor", "profile"]
Depth = Literal["basic", "detailed", "full"]
CompareType = Literal["funding", "social", "all", "basic"]
TrendCategory = Literal["hot_projects", "funding", "job_changes", "new_tokens", "ecosystem", "all"]


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class FilterBy(_RequestModel):
    """Optional narrowing applied to trend tracking."""

    ecosystem: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = None
    min_funding: float | None = Field(default=None, ge=0)

    @field_validator("ecosystem")
    @classmethod
    def strip_ecosystem(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class AnalyzeRequest(_RequestModel):
    """Validated input for a single-entity analysis."""

    query: str = Field(min_length=1, max_length=200, description="Entity name or keyword")
    analysis_type: AnalysisType = "comprehensive"
    depth: Depth = "detailed"
    include_related: bool = False
    investigation_scope: list[str] | None = None
    time_range: str | None = None
    filter_by: FilterBy | None = None

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Query must not be blank")
        return v


class CompareRequest(_RequestModel):
    """Validated input for a multi-entity comparison."""

    entities: list[str] = Field(min_length=2, max_length=10)
    compare_type: CompareType | None = None

    @field_validator("entities")
    @classmethod
    def validate_entities(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("Entity names must not be blank")
        return names


class TrendRequest(_RequestModel):
    """Validated input for trend tracking."""

    category: TrendCategory = "all"
    time_range: str | None = "7d"
    filter_by: FilterBy | None = None


# Union of request shapes accepted by the analysis engine
AnalysisRequest = AnalyzeRequest | CompareRequest | TrendRequest
