"""Analysis service - the tool-call boundary of the analysis engine.

Single responsibility: validate arguments, open an upstream client for the
duration of one call, run the engine, and turn every outcome into a
``ToolResult``. Nothing raised below this layer escapes it; failures become
error-flagged results so the server keeps serving.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..analysis import (
    ComparisonEngine,
    EntityResolver,
    NotFoundError,
    QueryOrchestrator,
    ServiceError,
    get_strategy,
)
from ..config import Settings, settings
from ..upstream import UpstreamClient, UpstreamError, create_client
from ..validation import AnalyzeRequest, CompareRequest, TrendRequest, ValidationError

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


@dataclass
class ToolResult:
    """Outcome of one tool call."""

    content: str = ""
    is_error: bool = False
    error_message: str = ""

    @property
    def success(self) -> bool:
        return not self.is_error


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def validate_arguments(model: type[RequestT], arguments: Mapping[str, Any] | BaseModel) -> RequestT:
    """Build a request model from raw tool arguments.

    Raises:
        ValidationError: With the first validation message
    """
    if isinstance(arguments, model):
        return arguments
    try:
        return model.model_validate(dict(arguments))
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
        raise ValidationError(f"Invalid {location}: {first['msg']}") from e


class AnalysisService:
    """Entry points of the analysis engine.

    A new upstream client is created and closed for every call; no state is
    kept between calls.
    """

    def __init__(
        self,
        client_factory: Callable[[], UpstreamClient] | None = None,
        config: Settings | None = None,
    ) -> None:
        self._config = config or settings
        self._client_factory = client_factory or (lambda: create_client(self._config))

    def _resolver(self, client: UpstreamClient) -> EntityResolver:
        return EntityResolver(client, get_strategy(self._config.resolution_strategy))

    async def analyze_entity(self, arguments: Mapping[str, Any] | AnalyzeRequest) -> ToolResult:
        """Resolve a query and build its composite analysis."""

        async def operation(client: UpstreamClient, request: AnalyzeRequest) -> Any:
            entity = await self._resolver(client).resolve(request.query)
            orchestrator = QueryOrchestrator(client, join_mode=self._config.join_mode)
            result = await orchestrator.analyze(entity, request)
            return result.to_dict()

        return await self._run_validated("analyzeEntity", AnalyzeRequest, arguments, operation)

    async def compare_entities(self, arguments: Mapping[str, Any] | CompareRequest) -> ToolResult:
        """Side-by-side comparison of several named entities."""

        async def operation(client: UpstreamClient, request: CompareRequest) -> Any:
            engine = ComparisonEngine(client, self._resolver(client))
            result = await engine.compare(request.entities, request.compare_type)
            return result.to_dict()

        return await self._run_validated("compareEntities", CompareRequest, arguments, operation)

    async def track_trends(self, arguments: Mapping[str, Any] | TrendRequest) -> ToolResult:
        """Category-driven market trend snapshot."""

        async def operation(client: UpstreamClient, request: TrendRequest) -> Any:
            bundle = await QueryOrchestrator(client).track_trends(request)
            return bundle.to_dict()

        return await self._run_validated("trackTrends", TrendRequest, arguments, operation)

    async def call_upstream(
        self,
        tool_name: str,
        operation: Callable[[UpstreamClient], Awaitable[Any]],
    ) -> ToolResult:
        """Run a single-endpoint pass-through and serialize its data."""
        logger.info(f"Calling tool: {tool_name}")
        try:
            async with self._client_factory() as client:
                data = await operation(client)
            return ToolResult(content=to_json(data))
        except Exception as e:
            return self._handle_error(tool_name, e)

    async def _run_validated(
        self,
        tool_name: str,
        model: type[RequestT],
        arguments: Mapping[str, Any] | RequestT,
        operation: Callable[[UpstreamClient, RequestT], Awaitable[Any]],
    ) -> ToolResult:
        try:
            request = validate_arguments(model, arguments)
        except ValidationError as e:
            return self._handle_error(tool_name, e)

        return await self.call_upstream(tool_name, lambda client: operation(client, request))

    def _handle_error(self, tool_name: str, error: Exception) -> ToolResult:
        if isinstance(error, ValidationError | NotFoundError | UpstreamError | ServiceError):
            logger.warning(f"{tool_name} failed: {error}")
        else:
            logger.exception(f"{tool_name} failed unexpectedly")
        return ToolResult(is_error=True, error_message=f"Error: {error}")
