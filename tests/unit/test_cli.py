"""
Tests for the command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from recordscraper.__main__ import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def list_file(tmp_path, sample_html_list):
    path = tmp_path / "list.html"
    path.write_text(sample_html_list, encoding="utf-8")
    return path


class TestCli:
    """Tests for python -m recordscraper."""

    def test_list_mode(self, runner, list_file):
        """Test that list mode prints records as JSON on stdout."""
        fields = json.dumps({"name": {"selector": "h3"}, "link": {"selector": "a", "attribute": "href"}})

        result = runner.invoke(main, [
            "list", str(list_file),
            "--list-selector", "li.item",
            "--fields", fields,
            "--limit", "2",
            "--url", "https://shop.example/catalog/",
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [
            {"name": "Item 1", "link": "https://shop.example/p/1"},
            {"name": "Item 2", "link": "https://shop.example/p/2"},
        ]

    def test_schema_mode_fields_file(self, runner, list_file, tmp_path):
        """Test that --fields accepts @path."""
        fields_file = tmp_path / "fields.json"
        fields_file.write_text(json.dumps({"name": {"selector": "li.item h3"}}), encoding="utf-8")

        result = runner.invoke(main, ["schema", str(list_file), "--fields", f"@{fields_file}"])

        assert result.exit_code == 0, result.output
        records = json.loads(result.stdout)
        assert len(records) == 10
        assert records[0] == {"name": "Item 1"}

    def test_auto_mode(self, runner, list_file):
        """Test auto-list sampling from the command line."""
        result = runner.invoke(main, ["auto", str(list_file), "--list-selector", "ul.results"])

        assert result.exit_code == 0, result.output
        entries = json.loads(result.stdout)
        assert entries[0]["selector"] == "html > body > ul.results > li.item"

    def test_scrape_mode(self, runner, tmp_path, sample_html_cards):
        """Test free-form scraping with heuristic discovery."""
        path = tmp_path / "cards.html"
        path.write_text(sample_html_cards, encoding="utf-8")

        result = runner.invoke(main, ["scrape", str(path)])

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 5

    def test_invalid_fields_json(self, runner, list_file):
        """Test that malformed field JSON is a usage error."""
        result = runner.invoke(main, ["schema", str(list_file), "--fields", "{nope"])

        assert result.exit_code == 2

    def test_invalid_selector(self, runner, list_file):
        """Test that host errors exit non-zero without a traceback."""
        result = runner.invoke(main, ["scrape", str(list_file), "--selector", "li["])

        assert result.exit_code == 1
        assert result.stdout == ""

    def test_log_format_from_settings(self, runner, list_file, monkeypatch):
        """Test that the configured log format reaches logging setup."""
        calls = []
        monkeypatch.setenv("SCRAPER_LOG_FORMAT", "console")
        monkeypatch.delenv("SCRAPER_LOG_LEVEL", raising=False)
        monkeypatch.setattr(
            "recordscraper.__main__.setup_logging",
            lambda level, format_type: calls.append((level, format_type)),
        )

        result = runner.invoke(main, ["auto", str(list_file), "--list-selector", "ul.results"])

        assert result.exit_code == 0, result.output
        assert calls == [("INFO", "console")]
