"""Market trend tracking.

Each category branch issues its own upstream call; branches run one after
another in a fixed order (hot projects, funding, job changes, new tokens,
ecosystem). ``category="all"`` runs every branch.
"""

import calendar
import logging
from collections.abc import Callable, Mapping
from datetime import date, timedelta
from typing import Any

from ..upstream import UpstreamClient
from ..validation import FilterBy, TrendRequest
from .models import TrendBundle
from .plans import items_of

logger = logging.getLogger(__name__)

CATEGORY_ORDER = ("hot_projects", "funding", "job_changes", "new_tokens", "ecosystem")

DEFAULT_LOOKBACK = timedelta(days=7)


def hot_index_days(time_range: str | None) -> int:
    """``1d`` maps to the 1-day hot index, anything else to 7 days."""
    return 1 if time_range == "1d" else 7


def _months_back(day: date, months: int) -> date:
    year, month = divmod(day.year * 12 + day.month - 1 - months, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def funding_window(time_range: str | None, today: date) -> tuple[str, str]:
    """Start/end month (``yyyy-MM``) for the funding-rounds call.

    ``1d`` and ``7d`` look back that many days, ``30d`` one month and
    ``3m`` three months. Any other value looks back 7 days.
    """
    if time_range == "1d":
        start = today - timedelta(days=1)
    elif time_range == "7d":
        start = today - timedelta(days=7)
    elif time_range == "30d":
        start = _months_back(today, 1)
    elif time_range == "3m":
        start = _months_back(today, 3)
    else:
        start = today - DEFAULT_LOOKBACK
    return start.strftime("%Y-%m"), today.strftime("%Y-%m")


def _tags_of(entry: Mapping[str, Any]) -> set[str]:
    raw = entry.get("tags")
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return set()
    names = (tag.get("name") if isinstance(tag, Mapping) else tag for tag in raw)
    return {str(name).strip().casefold() for name in names if name}


def filter_by_tags(entries: list[Any], tags: list[str] | None) -> list[Any]:
    """Keep hot-project entries sharing at least one tag (case-insensitive)."""
    if not tags:
        return entries
    wanted = {tag.strip().casefold() for tag in tags if tag.strip()}
    return [
        entry for entry in entries if isinstance(entry, Mapping) and _tags_of(entry) & wanted
    ]


class TrendTracker:
    """Runs the category branches of a trend request."""

    def __init__(
        self,
        client: UpstreamClient,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        self._clock = clock

    async def track(self, request: TrendRequest) -> TrendBundle:
        """Fetch every branch selected by ``request.category``.

        Raises:
            UpstreamError: If any branch call fails
        """
        filters = request.filter_by or FilterBy()
        bundle = TrendBundle(category=request.category, time_range=request.time_range)
        selected = CATEGORY_ORDER if request.category == "all" else (request.category,)

        logger.info(f"Tracking trends: {list(selected)} ({request.time_range or 'default range'})")

        if "hot_projects" in selected:
            data = await self._client.get_hot_projects(days=hot_index_days(request.time_range))
            bundle.hot_projects = filter_by_tags(items_of(data), filters.tags)

        if "funding" in selected:
            start, end = funding_window(request.time_range, self._clock())
            bundle.funding_rounds = await self._client.get_funding_rounds(
                start_time=start,
                end_time=end,
                min_amount=filters.min_funding,
            )

        if "job_changes" in selected:
            bundle.job_changes = await self._client.get_job_changes()

        if "new_tokens" in selected:
            bundle.new_tokens = await self._client.get_new_tokens()

        if "ecosystem" in selected:
            catalog = items_of(await self._client.get_ecosystem_map())
            bundle.ecosystems = catalog
            if filters.ecosystem:
                bundle.ecosystem_projects = await self._ecosystem_projects(
                    catalog, filters.ecosystem
                )

        return bundle

    async def _ecosystem_projects(self, catalog: list[Any], name: str) -> Any:
        wanted = name.casefold()
        matches = [
            entry
            for entry in catalog
            if isinstance(entry, Mapping)
            and str(entry.get("ecosystem_name", "")).casefold() == wanted
        ]
        if not matches:
            logger.info(f"Ecosystem '{name}' not found in catalog")
            return None

        ids = ",".join(str(entry.get("ecosystem_id")) for entry in matches)
        return await self._client.get_projects_by_ecosystem(ids)
