"""Shared test fixtures."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from pydantic_ai import models

from growthcase.config import Settings
from growthcase.db import Database
from growthcase.models.analysis import BottleneckType
from growthcase.models.experiment import Experiment, ExperimentStatus
from growthcase.models.run import Industry, Run, TrendSignals

if TYPE_CHECKING:
    from collections.abc import Callable

# Safety net: block all real LLM API calls during tests.
# TestModel and FunctionModel are exempt from this check.
models.ALLOW_MODEL_REQUESTS = False

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def build_run(
    *,
    minutes: int = 0,
    industry: Industry = Industry.BEAUTY,
    primary: BottleneckType = BottleneckType.CREATIVE,
    secondary: list[BottleneckType] | None = None,
    confidence: float = 0.8,
    risk_score: int = 50,
    roas: float | None = -10.0,
    ctr: float | None = -10.0,
    cvr: float | None = -5.0,
    brand: str = "Test Brand",
    run_id: str | None = None,
) -> Run:
    """A run created *minutes* after a fixed base time."""
    fields = {
        "created_at": BASE_TIME + timedelta(minutes=minutes),
        "industry": industry,
        "primary_bottleneck": primary,
        "secondary_bottlenecks": secondary or [],
        "confidence": confidence,
        "risk_score": risk_score,
        "trends": TrendSignals(roas_delta=roas, ctr_delta=ctr, cvr_delta=cvr),
        "brand": brand,
    }
    if run_id is not None:
        fields["id"] = run_id
    return Run(**fields)


def build_experiment(
    run: Run,
    name: str = "Hook rotation",
    status: ExperimentStatus = ExperimentStatus.PROPOSED,
    category: BottleneckType = BottleneckType.CREATIVE,
) -> Experiment:
    return Experiment(
        linked_run_id=run.id,
        brand=run.brand,
        industry=run.industry,
        category=category,
        name=name,
        hypothesis="Fresh hooks recover CTR",
        setup="50/50 split for 7 days",
        success_metrics=["CTR >= 1.5%"],
        guardrails=["Pause if CPA > 2x"],
        status=status,
    )


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        anthropic_api_key="test-key",
        data_dir=tmp_path / "data",
        log_level="DEBUG",
        log_format="console",
        llm_max_retries=1,
        _env_file=None,
    )


@pytest.fixture()
def db(tmp_path) -> Database:
    db = Database(tmp_path / "test.db")
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def make_run() -> Callable[..., Run]:
    return build_run


@pytest.fixture()
def stored_run(db: Database) -> Run:
    """A stored Beauty run with one proposed experiment."""
    run = build_run(minutes=0, secondary=[BottleneckType.CONVERSION])
    db.create_run(run, [build_experiment(run)])
    return run


@pytest.fixture()
def make_experiment() -> Callable[..., Experiment]:
    return build_experiment
