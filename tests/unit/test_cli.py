"""
Tests for the command-line interface.
"""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner
from clipcore import __version__
from clipcore.cli import cli

from tests.helpers.html import PARAGRAPH_ONE


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def article_file(tmp_path: Path, article_html: str) -> Path:
    path = tmp_path / "article.html"
    path.write_text(article_html, encoding="utf-8")
    return path


@pytest.mark.unit
class TestExtractCommand:
    """The extract command."""

    def test_json_to_stdout(self, runner, article_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(article_file)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["title"] == "How Mountain Rivers Slowly Shape Deep Valleys"
        assert data["byline"] == "By Jane Doe"
        assert data["length"] == len(data["text_content"])

    def test_text_format(self, runner, article_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", "--format", "text", str(article_file)])

        assert result.exit_code == 0, result.output
        assert PARAGRAPH_ONE in result.output
        assert "<p>" not in result.output

    def test_html_from_stdin(self, runner, article_html):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", "--format", "html", "-"], input=article_html)

        assert result.exit_code == 0, result.output
        assert '<div id="readability-page-1" class="page">' in result.output

    def test_keep_classes_and_url(self, runner, article_file):
        result = runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "extract",
                "--format",
                "html",
                "--keep-classes",
                "--url",
                "https://example.com/rivers",
                str(article_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert 'class="post"' in result.output

    def test_output_file_json(self, runner, article_file, tmp_path: Path):
        output = tmp_path / "out" / "article.json"
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", "-o", str(output), str(article_file)])

        assert result.exit_code == 0, result.output
        assert "Article saved" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["site_name"] == "Earth Notes"

    def test_output_file_text(self, runner, article_file, tmp_path: Path):
        output = tmp_path / "article.txt"
        result = runner.invoke(
            cli, ["--log-level", "ERROR", "extract", "--format", "text", "-o", str(output), str(article_file)]
        )

        assert result.exit_code == 0, result.output
        assert PARAGRAPH_ONE in output.read_text(encoding="utf-8")

    def test_char_threshold_override(self, runner, tmp_path: Path, short_html):
        source = tmp_path / "short.html"
        source.write_text(short_html, encoding="utf-8")

        result = runner.invoke(
            cli, ["--log-level", "ERROR", "extract", "--char-threshold", "50", "--format", "text", str(source)]
        )

        assert result.exit_code == 0, result.output
        assert "Short notes about rivers" in result.output

    def test_extraction_failure_exits_nonzero(self, runner, tmp_path: Path):
        source = tmp_path / "empty.html"
        source.write_text("<html><body></body></html>", encoding="utf-8")

        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(source)])

        assert result.exit_code == 1
        assert "Extraction failed" in result.output

    def test_element_limit(self, runner, article_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", "--max-elements", "3", str(article_file)])

        assert result.exit_code == 1
        assert "Aborting parsing" in result.output

    def test_config_file_applied(self, runner, article_file, tmp_path: Path):
        config = tmp_path / "clipcore.yaml"
        config.write_text("extraction:\n  keep_classes: true\nmonitoring:\n  log_level: ERROR\n")

        result = runner.invoke(cli, ["--config", str(config), "extract", "--format", "html", str(article_file)])

        assert result.exit_code == 0, result.output
        assert 'class="post"' in result.output


@pytest.mark.unit
class TestValidateConfig:
    """The validate-config command."""

    def test_defaults_are_valid(self, runner):
        result = runner.invoke(cli, ["validate-config"])

        assert result.exit_code == 0, result.output
        assert "Configuration is valid" in result.output
        assert "extraction.char_threshold" in result.output

    def test_invalid_file(self, runner, tmp_path: Path):
        config = tmp_path / "bad.yaml"
        config.write_text("monitoring:\n  log_level: VERBOSE\n")

        result = runner.invoke(cli, ["--config", str(config), "validate-config"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_malformed_yaml(self, runner, tmp_path: Path):
        config = tmp_path / "broken.yaml"
        config.write_text("extraction: [unclosed\n")

        result = runner.invoke(cli, ["--config", str(config), "validate-config"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output
        assert isinstance(result.exception, SystemExit)


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
