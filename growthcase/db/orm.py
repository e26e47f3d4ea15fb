"""SQLAlchemy ORM models mapping to the growthcase tables."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow_str() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class Base(DeclarativeBase):
    pass


class RunRow(Base):
    __tablename__ = "runs"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    brand: Mapped[str] = mapped_column(Text, nullable=False, default="")
    industry: Mapped[str] = mapped_column(Text, nullable=False)
    time_window: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    # Denormalized from the analysis payload for filtering and scoring
    primary_bottleneck: Mapped[str] = mapped_column(Text, nullable=False)
    secondary_bottlenecks_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)

    # JSON payloads
    trends_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    channel_mix_json: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    metrics_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    analysis_json: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint(
            "industry IN ('Beauty', 'Wellness', 'Fashion')",
            name="ck_runs_industry",
        ),
        CheckConstraint(
            "primary_bottleneck IN ('Creative', 'Conversion', 'Scaling', 'Efficiency')",
            name="ck_runs_primary_bottleneck",
        ),
        CheckConstraint("confidence >= 0 AND confidence <= 1", name="ck_runs_confidence"),
        CheckConstraint("risk_score >= 0 AND risk_score <= 100", name="ck_runs_risk_score"),
        Index("idx_runs_industry_created", "industry", "created_at"),
    )


class ExperimentRow(Base):
    __tablename__ = "experiments"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    linked_run_id: Mapped[str] = mapped_column(Text, ForeignKey("runs.id"), nullable=False)
    brand: Mapped[str] = mapped_column(Text, nullable=False, default="")
    industry: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    hypothesis: Mapped[str] = mapped_column(Text, nullable=False, default="")
    setup: Mapped[str] = mapped_column(Text, nullable=False, default="")
    success_metrics_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    guardrails_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    status: Mapped[str] = mapped_column(Text, nullable=False, default="Proposed")

    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Proposed', 'Running', 'Completed', 'Archived')",
            name="ck_experiments_status",
        ),
        CheckConstraint(
            "category IN ('Creative', 'Conversion', 'Scaling', 'Efficiency')",
            name="ck_experiments_category",
        ),
        Index("idx_experiments_run", "linked_run_id"),
    )


class OutcomeRow(Base):
    __tablename__ = "outcomes"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    experiment_id: Mapped[str] = mapped_column(
        Text, ForeignKey("experiments.id"), nullable=False
    )
    outcome_status: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metrics_delta_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    learnings_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    recommended_next_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        CheckConstraint(
            "outcome_status IN ('Win', 'Loss', 'Neutral', 'Inconclusive')",
            name="ck_outcomes_status",
        ),
        Index("idx_outcomes_experiment", "experiment_id"),
    )


class ActivityLogRow(Base):
    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_id: Mapped[str | None] = mapped_column(Text, ForeignKey("runs.id"), nullable=True)
    experiment_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("experiments.id"), nullable=True
    )
    event: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        Index("idx_activity_log_run", "run_id"),
        Index("idx_activity_log_experiment", "experiment_id"),
    )
