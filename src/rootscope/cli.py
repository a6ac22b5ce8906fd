"""RootScope CLI - crypto market intelligence over the RootData API."""

import asyncio
import json
from typing import Annotated

import typer
from rich.panel import Panel

from . import __version__
from .config import settings
from .services import AnalysisService, ToolResult
from .utils.console import console
from .utils.logging import set_log_level, setup_logging

app = typer.Typer(
    name="rootscope",
    help="Crypto market intelligence - analyze, compare and track entities on RootData",
    no_args_is_help=True,
)


def _print_panel(message: str, style: str = "blue") -> None:
    console.print(Panel(f"[bold]{message}[/bold]", style=style))


def _render(result: ToolResult, title: str) -> None:
    """Print a tool result, exit with code 1 on error."""
    if result.is_error:
        console.print(f"[red]{result.error_message}[/red]")
        raise typer.Exit(code=1)

    payload = json.loads(result.content)
    summary = payload.get("summary") if isinstance(payload, dict) else None
    if summary:
        console.print(Panel(summary, title=title, style="green"))
    console.print_json(data=payload)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]RootScope[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """RootScope - know the project before you ape in."""
    setup_logging(settings)


@app.command("serve")
def serve(
    debug: Annotated[bool, typer.Option("--debug", help="Log every upstream call")] = False,
) -> None:
    """Run the MCP tool server over stdio."""
    from .server import run_server

    if not settings.has_api_key:
        console.print("[red]ROOTDATA_API_KEY environment variable is required[/red]")
        raise typer.Exit(code=1)
    if debug:
        set_log_level("DEBUG")
    run_server()


@app.command("analyze")
def analyze(
    query: Annotated[str, typer.Argument(help="Project, VC or person name")],
    analysis_type: Annotated[
        str,
        typer.Option(
            "--type", "-t", help="comprehensive, fundraising, trends, investor or profile"
        ),
    ] = "comprehensive",
    depth: Annotated[str, typer.Option("--depth", "-d", help="basic, detailed or full")] = (
        "detailed"
    ),
    related: Annotated[
        bool, typer.Option("--related", "-r", help="Include ecosystem peers / job changes")
    ] = False,
) -> None:
    """Analyze one entity across funding, ecosystem, trends and people."""
    _print_panel(f"Analyzing '{query}'...")
    result = asyncio.run(
        AnalysisService().analyze_entity(
            {
                "query": query,
                "analysis_type": analysis_type,
                "depth": depth,
                "include_related": related,
            }
        )
    )
    _render(result, query)


@app.command("compare")
def compare(
    names: Annotated[list[str], typer.Argument(help="Two to ten entity names")],
    compare_type: Annotated[
        str | None, typer.Option("--type", "-t", help="funding, social, all or basic")
    ] = None,
) -> None:
    """Compare entities side by side and rank them by funding."""
    _print_panel(f"Comparing {', '.join(names)}...")
    result = asyncio.run(
        AnalysisService().compare_entities({"entities": names, "compare_type": compare_type})
    )
    _render(result, "Comparison")


@app.command("trends")
def trends(
    category: Annotated[
        str,
        typer.Option(
            "--category",
            "-c",
            help="hot_projects, funding, job_changes, new_tokens, ecosystem or all",
        ),
    ] = "all",
    time_range: Annotated[str, typer.Option("--range", help="1d, 7d, 30d or 3m")] = "7d",
    ecosystem: Annotated[
        str | None, typer.Option("--ecosystem", "-e", help="Ecosystem name to drill into")
    ] = None,
    tags: Annotated[
        list[str] | None, typer.Option("--tag", help="Keep hot projects with this tag")
    ] = None,
    min_funding: Annotated[
        float | None, typer.Option("--min-funding", help="Minimum round size (USD)")
    ] = None,
) -> None:
    """Track market trends by category."""
    _print_panel(f"Tracking trends: {category} ({time_range})")
    filter_by = None
    if ecosystem or tags or min_funding is not None:
        filter_by = {"ecosystem": ecosystem, "tags": tags, "min_funding": min_funding}
    result = asyncio.run(
        AnalysisService().track_trends(
            {"category": category, "time_range": time_range, "filter_by": filter_by}
        )
    )
    _render(result, "Trends")


if __name__ == "__main__":
    app()
