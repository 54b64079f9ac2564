"""
Tests for DreamLog CLI
"""

import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner
from loguru import logger

from dreamlog.cli.main import cli
from dreamlog.core.models import EnrichmentResult


@pytest.fixture
def runner():
    """CLI test runner; restores the default log sink afterwards."""
    yield CliRunner()
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "data")


@pytest.fixture
def invoke(runner, data_dir):
    """Invoke the CLI against an isolated data directory with the mock provider."""
    def _invoke(*args, input=None):
        return runner.invoke(
            cli,
            ["--data-dir", data_dir, *args],
            input=input,
            env={"DREAMLOG_ENRICHMENT_PROVIDER": "mock", "DREAMLOG_LOG_LEVEL": "ERROR"},
        )
    return _invoke


def add_dream(invoke, description, *extra):
    result = invoke("add", description, "--json", *extra)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestAdd:
    """Tests for the add command."""

    def test_add_basic(self, invoke, data_dir):
        result = invoke("add", "Walking through a glass city", "--title", "Glass City")
        assert result.exit_code == 0
        assert "Saved dream" in result.output

        stored = json.loads((Path(data_dir) / "dreams.json").read_text(encoding="utf-8"))
        assert stored[0]["title"] == "Glass City"

    def test_add_json_with_labels(self, invoke):
        dream = add_dream(invoke, "Exam again", "--date", "2024-03-01", "--tag", "school", "--person", "Ana")
        assert dream["date"] == "2024-03-01"
        assert dream["tags"] == ["school"]
        assert dream["people"] == ["Ana"]
        assert dream["title"] == "Untitled Dream"

    def test_add_empty_description_fails(self, invoke):
        result = invoke("add", "   ")
        assert result.exit_code != 0
        assert "description" in result.output

    def test_add_with_enrichment(self, invoke):
        enrich = AsyncMock(return_value=EnrichmentResult("Blue Door", ("door",), ("Mia",)))
        with patch("dreamlog.llm.DreamEnricher.enrich_text", enrich):
            dream = add_dream(invoke, "A blue door with Mia", "--enrich", "--tag", "color")

        assert dream["title"] == "Blue Door"
        assert dream["tags"] == ["color", "door"]
        assert dream["people"] == ["Mia"]


class TestListShowDelete:
    def test_list_empty(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "No dreams found." in result.output

    def test_list_json_newest_first(self, invoke):
        add_dream(invoke, "older", "--date", "2024-01-01")
        add_dream(invoke, "newer", "--date", "2024-02-01")

        result = invoke("list", "--json")

        assert [d["description"] for d in json.loads(result.stdout)] == ["newer", "older"]

    def test_show(self, invoke):
        dream = add_dream(invoke, "A quiet library", "--title", "Library")
        result = invoke("show", dream["id"])
        assert result.exit_code == 0
        assert "A quiet library" in result.output

    def test_show_unknown(self, invoke):
        result = invoke("show", "missing-id")
        assert result.exit_code != 0
        assert "Dream not found" in result.output

    def test_delete_with_force(self, invoke):
        dream = add_dream(invoke, "to be deleted")
        result = invoke("delete", dream["id"], "--force")
        assert result.exit_code == 0
        assert json.loads(invoke("list", "--json").stdout) == []

    def test_delete_asks_for_confirmation(self, invoke):
        dream = add_dream(invoke, "keep me")
        result = invoke("delete", dream["id"], input="n\n")
        assert result.exit_code != 0
        assert len(json.loads(invoke("list", "--json").stdout)) == 1


class TestEdit:
    def test_edit_replaces_given_fields(self, invoke):
        dream = add_dream(invoke, "Stairs kept moving", "--date", "2024-03-01", "--tag", "school")

        result = invoke(
            "edit", dream["id"], "--title", "Moving Stairs", "--tag", "stairs", "--tag", "school", "--json"
        )

        assert result.exit_code == 0, result.output
        edited = json.loads(result.stdout)
        assert edited["id"] == dream["id"]
        assert edited["title"] == "Moving Stairs"
        assert edited["tags"] == ["stairs", "school"]
        assert edited["description"] == "Stairs kept moving"
        assert edited["date"] == "2024-03-01"

        listed = json.loads(invoke("list", "--json").stdout)
        assert len(listed) == 1
        assert listed[0]["title"] == "Moving Stairs"

    def test_edit_date_reorders(self, invoke):
        first = add_dream(invoke, "first", "--date", "2024-01-01")
        add_dream(invoke, "second", "--date", "2024-02-01")

        invoke("edit", first["id"], "--date", "2024-03-01")

        listed = json.loads(invoke("list", "--json").stdout)
        assert [d["description"] for d in listed] == ["first", "second"]

    def test_edit_clear_people(self, invoke):
        dream = add_dream(invoke, "With Ana", "--person", "Ana")
        edited = json.loads(invoke("edit", dream["id"], "--clear-people", "--json").stdout)
        assert edited["people"] == []

    def test_edit_blank_description_is_rejected(self, invoke):
        dream = add_dream(invoke, "keep this text")

        result = invoke("edit", dream["id"], "--description", "  ")

        assert result.exit_code != 0
        assert "description" in result.output
        assert json.loads(invoke("list", "--json").stdout)[0]["description"] == "keep this text"

    def test_edit_unknown(self, invoke):
        result = invoke("edit", "missing-id", "--title", "x")
        assert result.exit_code != 0
        assert "Dream not found" in result.output


class TestJsonErrors:
    def test_show_unknown_as_json(self, invoke):
        result = invoke("show", "missing-id", "--json")

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["code"] == "DREAM_NOT_FOUND_ERROR"
        assert payload["recoverable"] is False
        assert payload["context"]["resource_id"] == "missing-id"

    def test_add_validation_error_as_json(self, invoke):
        result = invoke("add", "   ", "--json")

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["code"] == "VALIDATION_ERROR"
        assert payload["context"]["field"] == "description"


class TestImport:
    def test_import_files(self, invoke, tmp_path):
        good = tmp_path / "a.html"
        good.write_text("<h1>Imported</h1><p>Date: 2024-03-01</p><p>From an export.</p>", encoding="utf-8")
        other = tmp_path / "notes.txt"
        other.write_text("not a dream", encoding="utf-8")

        result = invoke("import", str(good), str(other), "--json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["imported"] == 1
        assert payload["skipped"] == 1
        assert payload["message"] == "Successfully imported 1 dream(s)!"

        listed = json.loads(invoke("list", "--json").stdout)
        assert listed[0]["title"] == "Imported"
        assert listed[0]["date"] == "2024-03-01"

    def test_import_nothing_usable(self, invoke, tmp_path):
        empty = tmp_path / "empty.html"
        empty.write_text("<h1>Title only</h1>", encoding="utf-8")

        result = invoke("import", str(empty))

        assert result.exit_code == 0
        assert "No valid dreams found in selected files." in result.output


class TestSearchAndTags:
    def test_search(self, invoke):
        add_dream(invoke, "Swimming with dolphins", "--tag", "water")
        add_dream(invoke, "Lost in a mall")

        result = invoke("search", "WATER", "--json")

        assert [d["description"] for d in json.loads(result.stdout)] == ["Swimming with dolphins"]

    def test_hide_and_unhide(self, invoke):
        add_dream(invoke, "Office again", "--tag", "work", "--tag", "stress")

        assert "Hidden: work" in invoke("hide", "work").output
        assert "Already hidden: work" in invoke("hide", "work").output

        tags = json.loads(invoke("tags", "--json").stdout)
        assert tags["tags"] == ["stress"]
        assert tags["hidden"] == ["work"]

        assert "Unhidden: work" in invoke("unhide", "work").output
        assert json.loads(invoke("tags", "--json").stdout)["tags"] == ["stress", "work"]


class TestInsight:
    def test_view_windows(self, invoke):
        add_dream(invoke, "Last night", "--date", "2024-06-14")

        result = invoke("view", "--now", "2024-06-15", "--json")

        assert result.exit_code == 0
        windows = json.loads(result.stdout)
        assert windows["last_night"]["is_unlocked"] is True
        assert windows["past_week"]["is_unlocked"] is False
        assert windows["past_week"]["progress_message"] == (
            "Log dreams on 3 more day(s) this week to unlock."
        )

    def test_view_table(self, invoke):
        result = invoke("view", "--now", "2024-06-15")
        assert result.exit_code == 0
        assert "Past Week" in result.output

    def test_analyze_without_provider(self, invoke):
        add_dream(invoke, "Last night", "--date", "2024-06-14")

        result = invoke("analyze", "--now", "2024-06-15", "--window", "last_night", "--json")

        assert result.exit_code == 0, result.output
        analyses = json.loads(result.stdout)
        assert len(analyses) == 1
        assert analyses[0]["window"]["key"] == "last_night"
        assert analyses[0]["analysis"]["summary"] == ""


class TestGlobalOptions:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "import" in result.output

    def test_invalid_config_is_reported(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("dreamlog:\n  unlock:\n    week_min_days: 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config), "list"])

        assert result.exit_code != 0
        assert "week_min_days" in result.output
