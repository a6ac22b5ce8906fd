"""Input validation models using Pydantic."""

from .models import (
    AnalysisRequest,
    AnalysisType,
    AnalyzeRequest,
    CompareRequest,
    CompareType,
    Depth,
    FilterBy,
    TrendCategory,
    TrendRequest,
    ValidationError,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisType",
    "AnalyzeRequest",
    "CompareRequest",
    "CompareType",
    "Depth",
    "FilterBy",
    "TrendCategory",
    "TrendRequest",
    "ValidationError",
]
