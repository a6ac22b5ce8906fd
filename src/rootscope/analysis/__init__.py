"""Cross-functional analysis engine.

Resolver -> orchestrator -> summarizer for single entities, plus the
comparison engine and trend tracker.
"""

from .comparison import ComparisonEngine, extract_metrics
from .exceptions import AnalysisError, NotFoundError, ServiceError
from .models import (
    ComparisonResult,
    CompositeResult,
    Entity,
    EntityAnalysis,
    EntityKind,
    MetricSet,
    TrendBundle,
)
from .orchestrator import QueryOrchestrator
from .resolver import (
    STRATEGIES,
    EntityResolver,
    ExactNameStrategy,
    FirstResultStrategy,
    ResolutionStrategy,
    get_strategy,
)
from .summarizer import format_funding, summarize, summarize_comparison
from .trends import TrendTracker

__all__ = [
    # Components
    "ComparisonEngine",
    "EntityResolver",
    "QueryOrchestrator",
    "TrendTracker",
    # Resolution strategies
    "STRATEGIES",
    "ExactNameStrategy",
    "FirstResultStrategy",
    "ResolutionStrategy",
    "get_strategy",
    # Records
    "ComparisonResult",
    "CompositeResult",
    "Entity",
    "EntityAnalysis",
    "EntityKind",
    "MetricSet",
    "TrendBundle",
    # Formatting
    "extract_metrics",
    "format_funding",
    "summarize",
    "summarize_comparison",
    # Exceptions
    "AnalysisError",
    "NotFoundError",
    "ServiceError",
]
