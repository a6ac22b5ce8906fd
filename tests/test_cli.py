"""CLI smoke tests for RootScope."""

from typer.testing import CliRunner

from rootscope import cli
from rootscope.cli import app
from rootscope.services import ToolResult

runner = CliRunner()


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_app_shows_help(self) -> None:
        """Test app shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "analyze" in result.output
        assert "trends" in result.output

    def test_version_flag(self) -> None:
        """Test --version flag shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "RootScope" in result.output

    def test_analyze_help(self) -> None:
        """Test analyze subcommand shows help."""
        result = runner.invoke(app, ["analyze", "--help"])
        assert result.exit_code == 0
        assert "Analyze one entity" in result.output

    def test_compare_help(self) -> None:
        """Test compare subcommand shows help."""
        result = runner.invoke(app, ["compare", "--help"])
        assert result.exit_code == 0
        assert "Compare entities" in result.output

    def test_trends_help(self) -> None:
        """Test trends subcommand shows help."""
        result = runner.invoke(app, ["trends", "--help"])
        assert result.exit_code == 0
        assert "Track market trends" in result.output


class TestCommands:
    """Test command behavior with a stubbed service."""

    def test_serve_requires_api_key(self, monkeypatch) -> None:
        """Test serve refuses to start without credentials."""
        monkeypatch.setattr(cli.settings, "rootdata_api_key", "")
        result = runner.invoke(app, ["serve"])
        assert result.exit_code == 1
        assert "ROOTDATA_API_KEY" in result.output

    def test_analyze_prints_summary(self, monkeypatch) -> None:
        """Test a successful analysis prints its summary."""
        captured: dict = {}

        class StubService:
            async def analyze_entity(self, arguments):
                captured.update(arguments)
                return ToolResult(content='{"summary": "Project: Uniswap"}')

        monkeypatch.setattr(cli, "AnalysisService", StubService)
        result = runner.invoke(app, ["analyze", "uniswap", "--type", "profile", "--related"])

        assert result.exit_code == 0
        assert "Project: Uniswap" in result.output
        assert captured == {
            "query": "uniswap",
            "analysis_type": "profile",
            "depth": "detailed",
            "include_related": True,
        }

    def test_error_exits_non_zero(self, monkeypatch) -> None:
        """Test error results exit with code 1."""

        class StubService:
            async def compare_entities(self, arguments):
                return ToolResult(is_error=True, error_message="Error: boom")

        monkeypatch.setattr(cli, "AnalysisService", StubService)
        result = runner.invoke(app, ["compare", "a", "b"])

        assert result.exit_code == 1
        assert "Error: boom" in result.output
