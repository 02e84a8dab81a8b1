"""Tests for the idres command-line interface."""

import json

import pytest
from click.testing import CliRunner

from idres import __version__
from idres.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def records_file(tmp_path, reviewer_candidates):
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps(reviewer_candidates), encoding="utf-8")
    return path


class TestMatchCommands:
    """Tests for pairwise matching commands."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_match_json(self, runner):
        result = runner.invoke(main, ["match", "John Smith", "J. Smith", "Jane Doe", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 1
        assert data[0]["candidate"] == "J. Smith"
        assert data[0]["result"]["confidence"] == 85
        assert data[0]["result"]["tier"] == "last_first_initial"

    def test_match_text(self, runner):
        result = runner.invoke(main, ["match", "Bob Smith", "Robert Smith", "--variants"])

        assert result.exit_code == 0
        assert "90" in result.output
        assert "name_variant" in result.output

    def test_match_no_results(self, runner):
        result = runner.invoke(main, ["match", "John Smith", "Jane Doe"])

        assert result.exit_code == 0
        assert "No matches" in result.output

    def test_institutions(self, runner):
        result = runner.invoke(
            main, ["institutions", "UC Berkeley", "University of California, San Diego"]
        )

        assert result.exit_code == 0
        assert "Match: no" in result.output

    def test_adjust(self, runner):
        result = runner.invoke(
            main, ["adjust", "50", "Stanford University", "Stanford University", "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["confidence"] == 65

    def test_adjust_rejects_out_of_range(self, runner):
        result = runner.invoke(main, ["adjust", "150"])

        assert result.exit_code != 0


class TestResolveCommand:
    """Tests for the resolve command."""

    def test_resolve(self, runner, records_file):
        result = runner.invoke(main, ["--log-level", "ERROR", "resolve", str(records_file)])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert len(report["entities"]) == 2
        assert report["entities"][0]["confidence"] == 85
        assert report["entities"][0]["sources"] == ["pubmed", "arxiv"]

    def test_resolve_with_conflicts(self, runner, records_file):
        result = runner.invoke(
            main,
            ["--log-level", "ERROR", "resolve", str(records_file), "--exclude-name", "John Smith"],
        )

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert [e["display_name"] for e in report["entities"]] == ["Jane Doe"]

    def test_resolve_min_confidence(self, runner, records_file):
        result = runner.invoke(
            main,
            ["--log-level", "ERROR", "resolve", str(records_file), "--min-confidence", "90"],
        )

        assert result.exit_code == 0
        assert len(json.loads(result.output)["entities"]) == 3

    def test_resolve_to_file(self, runner, records_file, tmp_path):
        output = tmp_path / "report.json"

        result = runner.invoke(
            main,
            ["--log-level", "ERROR", "resolve", str(records_file), "-o", str(output), "-k", "quantum"],
        )

        assert result.exit_code == 0
        report = json.loads(output.read_text(encoding="utf-8"))
        assert all(e["relevance"] == 0.0 for e in report["entities"])

    def test_resolve_records_object(self, runner, tmp_path, reviewer_candidates):
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"records": reviewer_candidates}), encoding="utf-8")

        result = runner.invoke(main, ["--log-level", "ERROR", "resolve", str(path)])

        assert result.exit_code == 0
        assert len(json.loads(result.output)["entities"]) == 2

    def test_resolve_bad_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"foo": 1}), encoding="utf-8")

        result = runner.invoke(main, ["--log-level", "ERROR", "resolve", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestScreenCommand:
    """Tests for the screen command."""

    def test_screen_authors(self, runner):
        result = runner.invoke(
            main, ["--log-level", "ERROR", "screen", "John Smith", "-a", "J. Smith", "-a", "Jane Doe"]
        )

        assert result.exit_code == 0
        matches = json.loads(result.output)
        assert [m["matched_name"] for m in matches] == ["J. Smith"]

    def test_screen_records(self, runner, tmp_path):
        path = tmp_path / "retractions.json"
        path.write_text(
            json.dumps([{"record_id": 1, "authors": "J. Smith; Jane Doe", "institution": "MIT"}]),
            encoding="utf-8",
        )

        result = runner.invoke(
            main,
            ["--log-level", "ERROR", "screen", "John Smith", "--institution", "MIT", "--records", str(path)],
        )

        assert result.exit_code == 0
        summary = json.loads(result.output)
        assert summary["matches"][0]["confidence"] == 100
        assert summary["warnings"] == ["common_name"]

    def test_screen_requires_input(self, runner):
        result = runner.invoke(main, ["screen", "John Smith"])

        assert result.exit_code == 1
        assert "Must specify" in result.output
