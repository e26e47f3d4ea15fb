"""Tests for experiment status and outcome endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from growthcase.models.experiment import ExperimentStatus

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from growthcase.db import Database


@pytest.fixture()
def exp_id(populated_db: Database) -> str:
    return populated_db.list_experiments_for_run("run-0")[0].experiment.id


class TestStatus:
    def test_start_experiment(self, populated_client: TestClient, populated_db, exp_id):
        resp = populated_client.post(
            f"/api/v1/experiments/{exp_id}/status", json={"status": "Running"}
        )
        assert resp.status_code == 200
        assert resp.json() == {"id": exp_id, "status": "Running"}
        assert populated_db.get_experiment(exp_id).status == ExperimentStatus.RUNNING

    def test_invalid_transition(self, populated_client: TestClient, exp_id):
        resp = populated_client.post(
            f"/api/v1/experiments/{exp_id}/status", json={"status": "Completed"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_request"

    def test_unknown_status_value(self, populated_client: TestClient, exp_id):
        resp = populated_client.post(
            f"/api/v1/experiments/{exp_id}/status", json={"status": "Paused"}
        )
        assert resp.status_code == 422

    def test_unknown_experiment(self, populated_client: TestClient):
        resp = populated_client.post(
            "/api/v1/experiments/nope/status", json={"status": "Running"}
        )
        assert resp.status_code == 404


class TestOutcome:
    def test_record_outcome(self, populated_client: TestClient, populated_db, exp_id):
        resp = populated_client.post(
            f"/api/v1/experiments/{exp_id}/outcome",
            json={
                "outcome_status": "Loss",
                "notes": "No lift",
                "metrics_delta": {"roas": -0.2},
                "learnings": ["Price anchoring did not help"],
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["experiment_id"] == exp_id
        assert data["status"] == "Completed"

        record = populated_db.list_experiments_for_run("run-0")[0]
        assert record.outcomes[0].id == data["outcome_id"]
        assert record.outcomes[0].metrics_delta.roas == -0.2
        assert record.experiment.status == ExperimentStatus.COMPLETED

    def test_unknown_experiment(self, populated_client: TestClient):
        resp = populated_client.post(
            "/api/v1/experiments/nope/outcome", json={"outcome_status": "Win"}
        )
        assert resp.status_code == 404
