"""RootScope MCP tool server.

Exposes the RootData pass-through tools and the three analysis tools over
the Model Context Protocol (stdio transport). Every tool returns
pretty-printed JSON text; failures raise ``ToolError`` so the calling agent
receives an ``isError`` result carrying the message.

Running:
    rootscope serve
"""

import logging
from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from . import __version__
from .services import AnalysisService, ToolResult
from .validation import AnalysisType, CompareType, Depth, TrendCategory

logger = logging.getLogger(__name__)

SERVER_NAME = "rootscope"


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.error_message)
    return result.content


def create_server(service: AnalysisService | None = None) -> FastMCP:
    """Build the FastMCP server with every tool registered."""
    service = service or AnalysisService()
    mcp = FastMCP(SERVER_NAME)

    # ========================================================================
    # Pass-through tools (one upstream endpoint each)
    # ========================================================================

    @mcp.tool(name="searchEntities", description="Search for projects, VCs, or people by keywords")
    async def search_entities(query: str, precise_x_search: bool | None = None) -> str:
        return _unwrap(
            await service.call_upstream(
                "searchEntities", lambda client: client.search(query, precise_x_search)
            )
        )

    @mcp.tool(name="getProject", description="Get detailed project information")
    async def get_project(
        project_id: int,
        include_team: bool | None = None,
        include_investors: bool | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getProject",
                lambda client: client.get_project(project_id, include_team, include_investors),
            )
        )

    @mcp.tool(name="getOrg", description="Get detailed VC/organization information")
    async def get_org(
        org_id: int,
        include_team: bool | None = None,
        include_investments: bool | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getOrg",
                lambda client: client.get_org(org_id, include_team, include_investments),
            )
        )

    @mcp.tool(name="getPeople", description="Get detailed information about a person (Pro only)")
    async def get_people(people_id: int) -> str:
        return _unwrap(
            await service.call_upstream("getPeople", lambda client: client.get_people(people_id))
        )

    @mcp.tool(
        name="getInvestors", description="Get investor information in batches (Plus/Pro only)"
    )
    async def get_investors(page: int | None = None, page_size: int | None = None) -> str:
        return _unwrap(
            await service.call_upstream(
                "getInvestors", lambda client: client.get_investors(page, page_size)
            )
        )

    @mcp.tool(
        name="getFundingRounds", description="Get fundraising rounds information (Plus/Pro only)"
    )
    async def get_funding_rounds(
        page: int | None = None,
        page_size: int | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
        project_id: int | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getFundingRounds",
                lambda client: client.get_funding_rounds(
                    page=page,
                    page_size=page_size,
                    start_time=start_time,
                    end_time=end_time,
                    min_amount=min_amount,
                    max_amount=max_amount,
                    project_id=project_id,
                ),
            )
        )

    @mcp.tool(name="syncUpdate", description="Get projects updated within a time range (Pro only)")
    async def sync_update(begin_time: int, end_time: int | None = None) -> str:
        return _unwrap(
            await service.call_upstream(
                "syncUpdate", lambda client: client.sync_update(begin_time, end_time)
            )
        )

    @mcp.tool(name="getHotProjects", description="Get top 100 hot crypto projects (Pro only)")
    async def get_hot_projects(days: Literal[1, 7]) -> str:
        return _unwrap(
            await service.call_upstream(
                "getHotProjects", lambda client: client.get_hot_projects(days)
            )
        )

    @mcp.tool(
        name="getXHotProjects", description="Get X platform hot projects rankings (Pro only)"
    )
    async def get_x_hot_projects(
        heat: bool | None = None,
        influence: bool | None = None,
        followers: bool | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getXHotProjects",
                lambda client: client.get_x_hot_projects(heat, influence, followers),
            )
        )

    @mcp.tool(name="getXPopularFigures", description="Get X platform popular figures (Pro only)")
    async def get_x_popular_figures(
        rank_type: Literal["heat", "influence"],
        page: int | None = None,
        page_size: int | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getXPopularFigures",
                lambda client: client.get_x_popular_figures(rank_type, page, page_size),
            )
        )

    @mcp.tool(name="getJobChanges", description="Get job position changes (Pro only)")
    async def get_job_changes(
        recent_joinees: bool | None = None,
        recent_resignations: bool | None = None,
    ) -> str:
        return _unwrap(
            await service.call_upstream(
                "getJobChanges",
                lambda client: client.get_job_changes(recent_joinees, recent_resignations),
            )
        )

    @mcp.tool(
        name="getNewTokens", description="Get newly issued tokens in the past 3 months (Pro only)"
    )
    async def get_new_tokens() -> str:
        return _unwrap(
            await service.call_upstream("getNewTokens", lambda client: client.get_new_tokens())
        )

    @mcp.tool(name="getEcosystemMap", description="Get ecosystem map list (Pro only)")
    async def get_ecosystem_map() -> str:
        return _unwrap(
            await service.call_upstream(
                "getEcosystemMap", lambda client: client.get_ecosystem_map()
            )
        )

    @mcp.tool(name="getTagMap", description="Get tag map list (Pro only)")
    async def get_tag_map() -> str:
        return _unwrap(
            await service.call_upstream("getTagMap", lambda client: client.get_tag_map())
        )

    @mcp.tool(
        name="getProjectsByEcosystem", description="Get projects by ecosystem IDs (Pro only)"
    )
    async def get_projects_by_ecosystem(ecosystem_ids: str) -> str:
        return _unwrap(
            await service.call_upstream(
                "getProjectsByEcosystem",
                lambda client: client.get_projects_by_ecosystem(ecosystem_ids),
            )
        )

    @mcp.tool(name="getProjectsByTags", description="Get projects by tag IDs (Pro only)")
    async def get_projects_by_tags(tag_ids: str) -> str:
        return _unwrap(
            await service.call_upstream(
                "getProjectsByTags", lambda client: client.get_projects_by_tags(tag_ids)
            )
        )

    # ========================================================================
    # Analysis tools
    # ========================================================================

    @mcp.tool(name="analyzeEntity")
    async def analyze_entity(
        query: str,
        analysis_type: AnalysisType = "comprehensive",
        depth: Depth = "detailed",
        include_related: bool = False,
        investigation_scope: list[str] | None = None,
        time_range: str | None = None,
    ) -> str:
        """Resolve a project, VC or person by name and build a composite analysis.

        The entity type decides which extra data is fetched: fundraising
        rounds, ecosystem peers and hot-index rank for projects, investor
        listing for VCs, job changes for people. ``comprehensive`` also adds
        the market-wide new-token listing. The result ends with a text
        summary.
        """
        return _unwrap(
            await service.analyze_entity(
                {
                    "query": query,
                    "analysis_type": analysis_type,
                    "depth": depth,
                    "include_related": include_related,
                    "investigation_scope": investigation_scope,
                    "time_range": time_range,
                }
            )
        )

    @mcp.tool(name="compareEntities")
    async def compare_entities(entities: list[str], compare_type: CompareType | None = None) -> str:
        """Compare 2-10 named entities side by side.

        Names that cannot be found are skipped. The summary ranks entities by
        total funding, highest first.
        """
        return _unwrap(
            await service.compare_entities(
                {"entities": entities, "compare_type": compare_type}
            )
        )

    @mcp.tool(name="trackTrends")
    async def track_trends(
        category: TrendCategory = "all",
        time_range: str | None = "7d",
        ecosystem: str | None = None,
        tags: list[str] | None = None,
        min_funding: float | None = None,
    ) -> str:
        """Market trend snapshot: hot projects, funding, job changes, new tokens, ecosystems.

        time_range: 1d, 7d, 30d or 3m (anything else means 7 days).
        """
        filter_by = None
        if ecosystem or tags or min_funding is not None:
            filter_by = {"ecosystem": ecosystem, "tags": tags, "min_funding": min_funding}
        return _unwrap(
            await service.track_trends(
                {"category": category, "time_range": time_range, "filter_by": filter_by}
            )
        )

    logger.debug(f"{SERVER_NAME} v{__version__} tools registered")
    return mcp


def run_server() -> None:
    """Run the tool server over stdio until the process is terminated."""
    logger.info(f"{SERVER_NAME} MCP server running on stdio")
    create_server().run()
