"""FastAPI test client fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from growthcase.analysis import mock_analysis
from growthcase.api.app import include_routes
from growthcase.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from growthcase.models.analysis import BottleneckType
from growthcase.scenarios import get_scenario

if TYPE_CHECKING:
    from growthcase.config import Settings
    from growthcase.db import Database
    from growthcase.models.run import CampaignSnapshot


class StubLLM:
    """Returns the built-in mock analysis for whatever snapshot is sent."""

    def __init__(self, snapshot: CampaignSnapshot | None = None):
        self.snapshot = snapshot
        self.calls = 0

    @property
    def is_available(self) -> bool:
        return True

    def generate(self, prompt, response_model, system="", temperature=None, max_tokens=None):
        self.calls += 1
        return mock_analysis(self.snapshot or get_scenario("creative-fatigue").snapshot)


def _create_test_app(db: Database, settings: Settings, llm=None) -> FastAPI:
    """Create a FastAPI app with injected test db/settings (no lifespan)."""
    app = FastAPI(title="growthcase test")

    app.state.db = db
    app.state.settings = settings
    app.state.llm = llm

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)
    include_routes(app)

    return app


@pytest.fixture()
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture()
def client(db: Database, settings: Settings, stub_llm: StubLLM) -> TestClient:
    return TestClient(_create_test_app(db, settings, stub_llm))


@pytest.fixture()
def populated_db(db: Database, make_run, make_experiment) -> Database:
    """Three Beauty runs (one with experiments) and one Fashion run."""
    for i in range(3):
        run = make_run(
            minutes=i,
            brand=f"Brand {i}",
            secondary=[BottleneckType.CONVERSION],
            run_id=f"run-{i}",
        )
        experiments = [make_experiment(run, name=f"Exp {i}")] if i == 0 else []
        db.create_run(run, experiments)
    db.create_run(make_run(minutes=5, industry="Fashion", run_id="run-fashion"))
    return db


@pytest.fixture()
def populated_client(populated_db: Database, settings: Settings) -> TestClient:
    return TestClient(_create_test_app(populated_db, settings))
