"""Query orchestrator.

Given a resolved entity and analysis options, selects the sub-queries of
the entity's plan (see ``plans.py``), runs them concurrently and merges the
outcomes into one ``CompositeResult``.

Every selected sub-query is awaited to completion before the join policy
is applied, and branch values are written into the composite record only
after the join. Two policies exist:

- ``strict``: any failed branch fails the whole call with the first failure
  in plan order; no optional field is populated.
- ``settle``: successful branches populate their fields and failed ones are
  listed in ``CompositeResult.failures``. A failed primary fetch still
  fails the call.
"""

import asyncio
import logging
from typing import Any

from ..config import JoinMode, settings
from ..upstream import UpstreamClient
from ..validation import AnalyzeRequest, TrendRequest
from .exceptions import AnalysisError
from .models import CompositeResult, Entity, EntityKind, TrendBundle
from .plans import AnalysisContext, SubQuery, plan_for
from .summarizer import summarize
from .trends import TrendTracker

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Runs the type- and option-dependent sub-queries of one analysis."""

    def __init__(
        self,
        client: UpstreamClient,
        join_mode: JoinMode | None = None,
        trend_tracker: TrendTracker | None = None,
    ) -> None:
        self._client = client
        self._join_mode: JoinMode = join_mode or settings.join_mode
        self._trends = trend_tracker or TrendTracker(client)

    @property
    def join_mode(self) -> JoinMode:
        return self._join_mode

    async def analyze(self, entity: Entity, request: AnalyzeRequest) -> CompositeResult:
        """Build the composite record for ``entity``.

        Raises:
            UpstreamError: strict mode, when any sub-query fails
            AnalysisError: settle mode, when the primary fetch fails
        """
        plan = plan_for(entity.kind, request)
        result = CompositeResult(entity=entity, primary_data=None)

        if entity.kind is EntityKind.UNCLASSIFIED or not plan:
            logger.info(f"No plan for {entity.kind.value} #{entity.id}; using search record")
            result.primary_data = {"id": entity.id, "name": entity.display_name}
            result.summary = summarize(result, request)
            return result

        logger.info(
            f"Analyzing {entity.kind.value} #{entity.id} with "
            f"{[query.name for query in plan]} ({self._join_mode})"
        )
        outcomes = await self._run(plan, AnalysisContext(self._client, entity, request))

        failures = [
            (query, outcome)
            for query, outcome in zip(plan, outcomes, strict=True)
            if isinstance(outcome, BaseException)
        ]
        for query, error in failures:
            if not isinstance(error, Exception):
                raise error
            logger.warning(f"Sub-query {query.name} failed for #{entity.id}: {error}")

        if failures and self._join_mode == "strict":
            raise failures[0][1]

        failed = {query.name for query, _ in failures}
        for query, outcome in zip(plan, outcomes, strict=True):
            if query.primary and query.name in failed:
                raise AnalysisError(
                    f"Primary record for {entity.display_name} unavailable: {outcome}"
                ) from outcome
            if query.name in failed:
                result.failures[query.name] = str(outcome)
            else:
                query.apply(result, outcome)

        result.summary = summarize(result, request)
        return result

    async def _run(self, plan: list[SubQuery], context: AnalysisContext) -> list[Any]:
        """Start every sub-query, then wait for all of them."""
        tasks: list[asyncio.Task[Any]] = []
        for query in plan:
            task = asyncio.create_task(query.fetch(context), name=query.name)
            if query.primary:
                context.primary_task = task
            tasks.append(task)
        return await asyncio.gather(*tasks, return_exceptions=True)

    async def track_trends(self, request: TrendRequest) -> TrendBundle:
        """Category-driven market trend snapshot; no entity resolution."""
        return await self._trends.track(request)
