"""Service layer for RootScope.

- AnalysisService: tool-call boundary for the analysis engine and the
  single-endpoint pass-through tools
"""

from .analysis_service import AnalysisService, ToolResult, to_json, validate_arguments

__all__ = [
    "AnalysisService",
    "ToolResult",
    "to_json",
    "validate_arguments",
]
