"""Tests for the growthcase CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner
from structlog.testing import capture_logs

from growthcase import cli as cli_module
from growthcase.cli import cli
from growthcase.db import Database
from growthcase.models.analysis import BottleneckType
from growthcase.models.experiment import ExperimentStatus
from growthcase.models.outcome import OutcomeStatus


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)
    return tmp_path / "data"


@pytest.fixture()
def runner(data_dir):
    with capture_logs():
        yield CliRunner()


@pytest.fixture()
def library(data_dir, make_run, make_experiment):
    """A stored target run plus one similar run with a proposed experiment."""
    data_dir.mkdir(parents=True, exist_ok=True)
    db = Database(data_dir / "growthcase.db")
    db.init_schema()
    older = make_run(minutes=0, brand="Older Brand", secondary=[BottleneckType.CONVERSION])
    exp = make_experiment(older, name="UGC hooks")
    db.create_run(older, [exp])
    target = make_run(minutes=10, brand="Target Brand", secondary=[BottleneckType.CONVERSION])
    db.create_run(target)
    yield db, target, older, exp
    db.close()


class TestBasics:
    def test_scenarios(self, runner):
        result = runner.invoke(cli, ["scenarios"])
        assert result.exit_code == 0
        assert "creative-fatigue" in result.output
        assert "landing-page-drop" in result.output

    def test_init_db(self, runner, data_dir):
        result = runner.invoke(cli, ["init-db"])
        assert result.exit_code == 0
        assert (data_dir / "growthcase.db").exists()


class TestAnalyze:
    def test_simulated_report(self, runner):
        result = runner.invoke(cli, ["analyze", "--scenario", "creative-fatigue", "--simulate"])
        assert result.exit_code == 0, result.output
        assert "GROWTH ANALYSIS REPORT" in result.output
        assert "Lumière Beauty | Beauty | 14 days" in result.output
        assert "Estimated CAC: $32.38" in result.output
        assert "(simulated, not stored)" in result.output

    def test_simulated_json(self, runner):
        result = runner.invoke(
            cli, ["analyze", "--scenario", "scaling-too-fast", "--simulate", "--json"]
        )
        assert result.exit_code == 0
        assert '"primary_bottleneck": "Creative"' in result.stdout

    def test_live_without_key_fails(self, runner):
        result = runner.invoke(cli, ["analyze", "--scenario", "creative-fatigue"])
        assert result.exit_code == 1
        assert "No LLM API key" in result.output

    def test_unknown_scenario(self, runner):
        result = runner.invoke(cli, ["analyze", "--scenario", "nope"])
        assert result.exit_code == 1
        assert "Unknown scenario" in result.output


class TestHistory:
    def test_empty(self, runner):
        result = runner.invoke(cli, ["history"])
        assert result.exit_code == 0
        assert "No runs found." in result.output

    def test_lists_runs_and_experiments(self, runner, library):
        _db, target, older, exp = library
        result = runner.invoke(cli, ["history", "--limit", "5"])
        assert result.exit_code == 0
        assert result.output.index(target.id) < result.output.index(older.id)
        assert exp.name in result.output


class TestSimilar:
    def test_text_output(self, runner, library):
        _db, target, older, _exp = library
        result = runner.invoke(cli, ["similar", target.id])
        assert result.exit_code == 0
        assert older.id in result.output
        assert " 90 " in result.output

    def test_json_output_with_winner(self, runner, library):
        db, target, older, exp = library
        runner.invoke(cli, ["record-outcome", exp.id, "Win"])

        result = runner.invoke(cli, ["similar", target.id, "--json"])

        assert result.exit_code == 0
        cases = json.loads(result.stdout)
        assert cases[0]["run"]["id"] == older.id
        assert cases[0]["similarity_score"] == 90
        assert cases[0]["winning_experiments"][0]["experiment"]["id"] == exp.id

    def test_unknown_run(self, runner, library):
        result = runner.invoke(cli, ["similar", "missing"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestExperimentCommands:
    def test_set_status(self, runner, library):
        db, _target, _older, exp = library
        result = runner.invoke(cli, ["set-status", exp.id, "running"])
        assert result.exit_code == 0
        assert "Running" in result.output
        assert db.get_experiment(exp.id).status == ExperimentStatus.RUNNING

    def test_invalid_transition(self, runner, library):
        _db, _target, _older, exp = library
        result = runner.invoke(cli, ["set-status", exp.id, "Completed"])
        assert result.exit_code == 1
        assert "Cannot move" in result.output

    def test_record_outcome(self, runner, library):
        db, _target, older, exp = library
        result = runner.invoke(
            cli,
            [
                "record-outcome",
                exp.id,
                "win",
                "--notes",
                "CTR back to 1.9%",
                "--learning",
                "UGC beats studio",
                "--learning",
                "Hooks matter",
                "--ctr",
                "0.8",
            ],
        )
        assert result.exit_code == 0, result.output

        record = db.list_experiments_for_run(older.id)[0]
        assert record.experiment.status == ExperimentStatus.COMPLETED
        outcome = record.outcomes[0]
        assert outcome.outcome_status == OutcomeStatus.WIN
        assert outcome.learnings == ["UGC beats studio", "Hooks matter"]
        assert outcome.metrics_delta.ctr == 0.8
        assert outcome.metrics_delta.roas is None

    def test_record_outcome_unknown_experiment(self, runner, library):
        result = runner.invoke(cli, ["record-outcome", "missing", "Loss"])
        assert result.exit_code == 1


class TestInspect:
    def test_inspect_with_log(self, runner, library):
        _db, _target, older, _exp = library
        result = runner.invoke(cli, ["inspect", older.id, "--log"])
        assert result.exit_code == 0
        assert "run_created" in result.output

    def test_inspect_lists_experiments(self, runner, library):
        _db, _target, older, exp = library
        result = runner.invoke(cli, ["inspect", older.id])
        assert result.exit_code == 0
        assert exp.id in result.output

    def test_inspect_missing(self, runner, library):
        result = runner.invoke(cli, ["inspect", "missing"])
        assert result.exit_code == 1
