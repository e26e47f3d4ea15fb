"""Tests for the analysis endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from growthcase.scenarios import get_scenario

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


def _payload(**overrides) -> dict:
    snapshot = get_scenario("creative-fatigue").snapshot.model_dump(mode="json")
    return {"snapshot": {**snapshot, **overrides}}


class TestAnalyze:
    def test_live_analysis_stored(self, client: TestClient, db, stub_llm):
        resp = client.post("/api/v1/analyze", json=_payload())
        assert resp.status_code == 200
        data = resp.json()

        assert stub_llm.calls == 1
        assert data["channel_mix_warning"] is None
        assert data["result"]["primary_bottleneck"] == "Creative"
        assert db.get_run(data["run_id"]) is not None
        assert [e["name"] for e in data["experiment_ids"]] == [
            "UGC Hook Rotation vs Branded Control",
            "Message-to-Landing-Page Alignment",
        ]

        history = client.get("/api/v1/runs").json()
        assert history["runs"][0]["run"]["id"] == data["run_id"]

    def test_simulation_mode(self, client: TestClient, db, stub_llm):
        body = {**_payload(), "simulation_mode": True}
        resp = client.post("/api/v1/analyze", json=body)
        assert resp.status_code == 200
        assert resp.json()["run_id"].startswith("sim-")
        assert stub_llm.calls == 0
        assert db.list_runs() == []

    def test_channel_mix_warning(self, client: TestClient):
        resp = client.post(
            "/api/v1/analyze",
            json=_payload(channel_mix={"meta": 50, "google": 20, "tiktok": 10}),
        )
        assert resp.status_code == 200
        assert resp.json()["channel_mix_warning"] == "Channel mix sums to 80% (should be 100%)"

    def test_missing_brand_rejected(self, client: TestClient):
        resp = client.post("/api/v1/analyze", json=_payload(brand_name=""))
        assert resp.status_code == 422

    def test_no_api_key_is_502(self, client: TestClient, settings):
        client.app.state.llm = None
        client.app.state.settings = settings.model_copy(update={"anthropic_api_key": ""})

        resp = client.post("/api/v1/analyze", json=_payload())

        assert resp.status_code == 502
        assert resp.json()["error"] == "analysis_failed"
