"""Tests for CLI commands: help, decks, study, random, stats, flag, assign-ids, server, config."""

import json
import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from tango.domain.models import CardStats
from tango.infrastructure.card_data import KeyValueCardDataRepository
from tango.infrastructure.storage import JsonFileStorage
from tango.interface.cli import app
from tango.server import app as server_app

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "carddata.json"


@pytest.fixture
def invoke(mock_home, decks_dir, data_file):
    def run(*args, input=None):
        return runner.invoke(
            app,
            ["--decks-dir", str(decks_dir), "--data-file", str(data_file), *args],
            input=input,
        )

    return run


def stored(data_file):
    return KeyValueCardDataRepository(JsonFileStorage(data_file))


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "adaptive Japanese vocabulary flashcards" in result.stdout
    assert "study" in result.stdout
    assert "random" in result.stdout


# --- Decks ---


def test_decks_lists_counts(invoke):
    result = invoke("decks")
    assert result.exit_code == 0
    assert "n5_nouns.json\tn5 nouns\t2" in result.stdout
    assert "n5_verbs.json\tn5 verbs\t2" in result.stdout


def test_decks_empty_directory(mock_home, tmp_path):
    result = runner.invoke(app, ["--decks-dir", str(tmp_path / "none"), "decks"])
    assert result.exit_code == 0
    assert "No decks found" in result.stdout


# --- Study ---


def test_study_all_known(invoke, data_file):
    result = invoke("study", "n5_verbs.json", input="\ne\nq\n")

    assert result.exit_code == 0, result.output
    assert "Deck complete!" in result.stdout
    repo = stored(data_file)
    assert repo.get_counts("v1") == CardStats(success=1, failure=0)
    assert repo.get_counts("v2") == CardStats(success=1, failure=0)


def test_study_unknown_is_counted_once(invoke, data_file):
    # Unknown on every card that shows up: each id is recorded once
    result = invoke("study", "n5_verbs.json", input="f\nf\nf\nf\nq\n")

    assert result.exit_code == 0, result.output
    records = stored(data_file).get_all_records()
    assert 1 <= sum(r.failure for r in records.values()) <= 2
    assert all(r.failure <= 1 for r in records.values())


def test_study_flip_and_flag(invoke, data_file):
    result = invoke("study", "n5_verbs.json", input="s\nd\nq\n")

    assert result.exit_code == 0, result.output
    assert "to eat" in result.stdout or "to drink" in result.stdout
    assert "Marked difficult." in result.stdout
    assert len(stored(data_file).get_difficult()) == 1


def test_study_reshuffle_keeps_outcomes(invoke, data_file):
    result = invoke("study", "n5_verbs.json", input="e\nx\ne\nq\n")

    assert result.exit_code == 0, result.output
    assert "Reshuffled." in result.stdout
    assert "Deck complete!" in result.stdout
    repo = stored(data_file)
    assert repo.get_counts("v1") == CardStats(success=1, failure=0)
    assert repo.get_counts("v2") == CardStats(success=1, failure=0)


def test_study_invalid_deck(invoke, decks_dir):
    (decks_dir / "broken.json").write_text('[{"id": "x"}, {"id": "x"}]', encoding="utf-8")
    result = invoke("study", "broken.json")
    assert result.exit_code == 1
    assert "duplicate id detected: x" in result.output


def test_study_missing_deck(invoke):
    result = invoke("study", "nope.json")
    assert result.exit_code == 1
    assert "empty or could not be loaded" in result.output


# --- Random ---


def test_random_run(invoke, data_file):
    result = invoke("random", "--count", "2", input="\n\nq\n")

    assert result.exit_code == 0, result.output
    assert "Deck complete!" in result.stdout
    records = stored(data_file).get_all_records()
    assert sum(r.success for r in records.values()) == 2


def test_random_run_without_decks(mock_home, tmp_path):
    result = runner.invoke(
        app,
        ["--decks-dir", str(tmp_path / "none"), "--data-file", str(tmp_path / "d.json"), "random"],
    )
    assert result.exit_code == 1
    assert "No cards available" in result.output


# --- Stats / flag ---


def test_stats_json(invoke, data_file):
    repo = stored(data_file)
    repo.increment_failure("v2")
    repo.increment_success("v1")
    repo.toggle_difficult("n1")

    result = invoke("stats", "--json")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["cards"][0]["id"] == "v2"
    assert payload["summary"]["cards"] == 4
    assert payload["summary"]["difficult"] == 1


def test_stats_table_filtered(invoke, data_file):
    stored(data_file).toggle_difficult("n1")
    result = invoke("stats", "--difficult-only")
    assert result.exit_code == 0
    assert "n1" in result.stdout
    assert "v1" not in result.stdout
    assert "1 cards" in result.stdout


def test_flag_toggles(invoke, data_file):
    result = invoke("flag", "v1")
    assert result.exit_code == 0
    assert "v1: difficult" in result.stdout
    assert stored(data_file).get_difficult() == {"v1"}

    result = invoke("flag", "v1")
    assert "v1: not difficult" in result.stdout


# --- Assign ids ---


def test_assign_ids(invoke, decks_dir):
    (decks_dir / "extra.json").write_text('[{"japanese": "空"}]', encoding="utf-8")

    result = invoke("assign-ids", "--dry-run")
    assert result.exit_code == 0
    assert "Would assign 1 ids." in result.stdout

    result = invoke("assign-ids")
    assert "Assigned 1 ids." in result.stdout
    assert json.loads((decks_dir / "extra.json").read_text(encoding="utf-8"))[0]["id"] == "extra-0001"


# --- Server ---


@patch("uvicorn.run")
def test_server_command(mock_run, invoke, decks_dir, data_file, monkeypatch):
    monkeypatch.setattr(server_app.state, "config", None, raising=False)
    monkeypatch.delenv("TANGO_DECKS_DIR", raising=False)
    monkeypatch.delenv("TANGO_DATA_FILE", raising=False)

    result = invoke("server", "--port", "9000")

    assert result.exit_code == 0, result.output
    mock_run.assert_called_with(server_app, host="127.0.0.1", port=9000)
    config = server_app.state.config
    assert config.decks_dir == decks_dir.resolve()
    assert config.data_file == data_file.resolve()
    assert config.port == 9000
    assert "TANGO_DECKS_DIR" not in os.environ
    assert "TANGO_DATA_FILE" not in os.environ


# --- Config ---


def test_config_show_command(invoke, decks_dir):
    result = invoke("config", "show")

    assert result.exit_code == 0
    output_data = json.loads(result.stdout)
    assert output_data["decks_dir"] == str(decks_dir.resolve())
    assert output_data["random_count"] == 30
