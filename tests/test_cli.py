"""Tests for CLI commands."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pagekit.cli import cli


@pytest.fixture
def config_file(tmp_path: Path, store_file: Path) -> Path:
    """Write a config file next to the sample store."""
    path = tmp_path / "pagekit.toml"
    path.write_text(f'[site]\nstore_path = "{store_file.name}"\n')
    return path


class TestChildrenCommand:
    """Tests for the children command."""

    def test__lists_visible_published_children(self, config_file: Path) -> None:
        """List children with ids, names and friendly URLs."""
        runner = CliRunner()
        result = runner.invoke(cli, ["children", "2", "-c", str(config_file)])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "3\tAbout\t/about/",
            "6\tNews\t/news/",
            "7\tGo to team\t/go-to-team/",
            "3 pages",
        ]

    def test__all_with_type__includes_hidden(self, config_file: Path) -> None:
        """--all keeps hidden pages, --type narrows the list."""
        runner = CliRunner()
        result = runner.invoke(cli, ["children", "2", "--all", "--type", "2", "-c", str(config_file)])

        assert result.exit_code == 0
        assert "5\tHidden\t/hidden/" in result.output
        assert "About" not in result.output

    def test__paging__shows_requested_page(self, config_file: Path) -> None:
        """--page and --page-size select one page of results."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["children", "2", "--sort-by", "PageName", "--page", "2", "--page-size", "2", "-c", str(config_file)],
        )

        assert result.exit_code == 0
        assert "7\tGo to team" not in result.output
        assert "6\tNews\t/news/" in result.output
        assert "Page 2, 1 of 3 pages" in result.output

    def test__invalid_page__fails(self, config_file: Path) -> None:
        """Reject non-positive page numbers."""
        runner = CliRunner()
        result = runner.invoke(cli, ["children", "2", "--page", "0", "-c", str(config_file)])

        assert result.exit_code != 0
        assert "page_number must be larger than zero" in result.output

    def test__unknown_page__fails(self, config_file: Path) -> None:
        """Report pages that do not exist."""
        runner = CliRunner()
        result = runner.invoke(cli, ["children", "99", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Page not found: 99" in result.output

    def test__store_override__uses_given_file(self, config_file: Path, tmp_path: Path) -> None:
        """--store replaces the configured page store."""
        other = tmp_path / "other.json"
        other.write_text('{"pages": [{"id": 1, "name": "Solo"}, {"id": 2, "name": "Child", "parent": 1}]}')

        runner = CliRunner()
        result = runner.invoke(cli, ["children", "1", "-c", str(config_file), "-s", str(other)])

        assert result.exit_code == 0
        assert "Child" in result.output

    def test__invalid_store__reports_error(self, config_file: Path, tmp_path: Path) -> None:
        """Malformed exports fail with an error message."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        runner = CliRunner()
        result = runner.invoke(cli, ["children", "1", "-c", str(config_file), "-s", str(broken)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestBreadcrumbsCommand:
    """Tests for the breadcrumbs command."""

    def test__shows_path_from_start_page(self, config_file: Path) -> None:
        """Print the chain below the root."""
        runner = CliRunner()
        result = runner.invoke(cli, ["breadcrumbs", "4", "-c", str(config_file)])

        assert result.exit_code == 0
        assert result.output.strip() == "Home > About > Team"

    def test__hidden_page__needs_show_hidden(self, config_file: Path) -> None:
        """Hidden pages appear only with --show-hidden."""
        runner = CliRunner()
        hidden = runner.invoke(cli, ["breadcrumbs", "5", "-c", str(config_file)])
        shown = runner.invoke(cli, ["breadcrumbs", "5", "--show-hidden", "-c", str(config_file)])

        assert hidden.output.strip() == "Home"
        assert shown.output.strip() == "Home > Hidden"


class TestMenuCommand:
    """Tests for the menu command."""

    def test__tree__marks_selected_items(self, config_file: Path) -> None:
        """Print an indented tree with selected items starred."""
        runner = CliRunner()
        result = runner.invoke(cli, ["menu", "2", "--levels", "2", "--current", "4", "-c", str(config_file)])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "* About (/about/)",
            "  * Team (/about/team/)",
            "- News (/news/)",
            "* Go to team (/go-to-team/)",
        ]

    def test__html__renders_nested_lists(self, config_file: Path) -> None:
        """--html renders the menu control."""
        runner = CliRunner()
        result = runner.invoke(cli, ["menu", "2", "--html", "-c", str(config_file)])

        assert result.exit_code == 0
        assert result.output.strip() == (
            '<ul><li><a href="/about/">About</a></li>'
            '<li><a href="/news/">News</a></li>'
            '<li><a href="/go-to-team/">Go to team</a></li></ul>'
        )

    def test__zero_levels__is_rejected(self, config_file: Path) -> None:
        """Levels must be at least one."""
        runner = CliRunner()
        result = runner.invoke(cli, ["menu", "2", "--levels", "0", "-c", str(config_file)])

        assert result.exit_code == 2


class TestServeCommand:
    """Tests for the serve command."""

    def test__starts_server_with_overrides(self, config_file: Path) -> None:
        """Apply host and port overrides before starting."""
        runner = CliRunner()
        with patch("pagekit.server.run_server") as run_server:
            result = runner.invoke(cli, ["serve", "-c", str(config_file), "--port", "9000"])

        assert result.exit_code == 0
        assert "Starting server on 127.0.0.1:9000" in result.output
        assert "Page store:" in result.output
        config, store = run_server.call_args.args
        assert config.server.port == 9000
        assert len(store) == 8

    def test__invalid_config__fails(self, tmp_path: Path) -> None:
        """Invalid configuration stops before starting the server."""
        config_file = tmp_path / "pagekit.toml"
        config_file.write_text("[server]\nport = \"x\"\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["serve", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "server.port must be an integer" in result.output
