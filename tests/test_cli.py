"""Tests for CLI commands."""

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from devdocs.cli import cli


def _config_file(tmp_path: Path, content: str = "site_name: CLI Docs\n") -> Path:
    config_file = tmp_path / "devdocs.yml"
    config_file.write_text(content)
    return config_file


class TestRoutesCommand:
    """Tests for the routes command."""

    def test_lists_slugs(self, sample_docs: Path, tmp_path: Path) -> None:
        """Print one slug per line."""
        runner = CliRunner()
        result = runner.invoke(cli, ["routes", "-c", str(_config_file(tmp_path))])

        assert result.exit_code == 0
        assert set(result.stdout.split()) == {"index", "guides/setup"}

    def test_source_dir_overrides_config(self, tmp_path: Path) -> None:
        """--source-dir replaces the configured content root."""
        other = tmp_path / "other"
        other.mkdir()
        (other / "about.md").write_text("About\n")

        runner = CliRunner()
        result = runner.invoke(
            cli, ["routes", "-c", str(_config_file(tmp_path)), "--source-dir", str(other)]
        )

        assert result.exit_code == 0
        assert result.stdout.split() == ["about"]

    def test_invalid_config_fails(self, tmp_path: Path) -> None:
        """Report invalid configuration and exit with status 1."""
        config_file = _config_file(tmp_path, "server:\n  port: nope\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["routes", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "server.port must be an integer" in result.output


class TestSearchIndexCommand:
    """Tests for the search-index command."""

    def test_prints_corpus_as_json(self, sample_docs: Path, tmp_path: Path) -> None:
        """Write the corpus to stdout."""
        runner = CliRunner()
        result = runner.invoke(cli, ["search-index", "-c", str(_config_file(tmp_path))])

        assert result.exit_code == 0
        entries = json.loads(result.stdout)
        assert {entry["slug"] for entry in entries} == {"index", "guides/setup"}
        assert all(set(entry) == {"slug", "title", "content"} for entry in entries)

    def test_writes_output_file(self, sample_docs: Path, tmp_path: Path) -> None:
        """Write the corpus to --output and report the count."""
        output = tmp_path / "out" / "search.json"

        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["search-index", "-c", str(_config_file(tmp_path)), "-o", str(output)],
        )

        assert result.exit_code == 0
        assert "Wrote 2 entries" in result.output
        assert len(json.loads(output.read_text())) == 2


class TestServeCommand:
    """Tests for the serve command."""

    def test_applies_overrides_and_runs_server(self, sample_docs: Path, tmp_path: Path) -> None:
        """Pass the overridden configuration to the server."""
        runner = CliRunner()
        with patch("devdocs.server.run_server") as run_server:
            result = runner.invoke(
                cli,
                [
                    "serve",
                    "-c",
                    str(_config_file(tmp_path)),
                    "--port",
                    "9001",
                    "--no-live-reload",
                    "--no-cache",
                ],
            )

        assert result.exit_code == 0
        assert "Starting server on 127.0.0.1:9001" in result.output
        assert "Cache: disabled" in result.output
        assert "Live reload: disabled" in result.output
        config = run_server.call_args.args[0]
        assert config.server.port == 9001
        assert config.docs.source_dir == sample_docs
        assert config.site.site_name == "CLI Docs"
        assert run_server.call_args.kwargs == {"verbose": False}
