"""case library schema

Revision ID: 4b1e9c2a7f10
Revises:
Create Date: 2026-10-16 09:12:41.208311

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1e9c2a7f10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_BOTTLENECKS = "('Creative', 'Conversion', 'Scaling', 'Efficiency')"


def upgrade() -> None:
    """Create runs, experiments, outcomes and activity_log."""
    op.create_table(
        "runs",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("brand", sa.Text, nullable=False, server_default=""),
        sa.Column("industry", sa.Text, nullable=False),
        sa.Column("time_window", sa.Text, nullable=True),
        sa.Column("primary_bottleneck", sa.Text, nullable=False),
        sa.Column("secondary_bottlenecks_json", sa.Text, nullable=False, server_default="[]"),
        sa.Column("confidence", sa.Float, nullable=False),
        sa.Column("risk_score", sa.Integer, nullable=False),
        sa.Column("trends_json", sa.Text, nullable=False, server_default="{}"),
        sa.Column("channel_mix_json", sa.Text, nullable=True),
        sa.Column("metrics_json", sa.Text, nullable=False, server_default="{}"),
        sa.Column("analysis_json", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.CheckConstraint(
            "industry IN ('Beauty', 'Wellness', 'Fashion')",
            name="ck_runs_industry",
        ),
        sa.CheckConstraint(
            f"primary_bottleneck IN {_BOTTLENECKS}",
            name="ck_runs_primary_bottleneck",
        ),
        sa.CheckConstraint("confidence >= 0 AND confidence <= 1", name="ck_runs_confidence"),
        sa.CheckConstraint("risk_score >= 0 AND risk_score <= 100", name="ck_runs_risk_score"),
    )
    op.create_index("idx_runs_industry_created", "runs", ["industry", "created_at"])

    op.create_table(
        "experiments",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("linked_run_id", sa.Text, sa.ForeignKey("runs.id"), nullable=False),
        sa.Column("brand", sa.Text, nullable=False, server_default=""),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("category", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("hypothesis", sa.Text, nullable=False, server_default=""),
        sa.Column("setup", sa.Text, nullable=False, server_default=""),
        sa.Column("success_metrics_json", sa.Text, nullable=False, server_default="[]"),
        sa.Column("guardrails_json", sa.Text, nullable=False, server_default="[]"),
        sa.Column("status", sa.Text, nullable=False, server_default="Proposed"),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text, nullable=False),
        sa.CheckConstraint(
            "status IN ('Proposed', 'Running', 'Completed', 'Archived')",
            name="ck_experiments_status",
        ),
        sa.CheckConstraint(f"category IN {_BOTTLENECKS}", name="ck_experiments_category"),
    )
    op.create_index("idx_experiments_run", "experiments", ["linked_run_id"])

    op.create_table(
        "outcomes",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("experiment_id", sa.Text, sa.ForeignKey("experiments.id"), nullable=False),
        sa.Column("outcome_status", sa.Text, nullable=False),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("metrics_delta_json", sa.Text, nullable=False, server_default="{}"),
        sa.Column("learnings_json", sa.Text, nullable=False, server_default="[]"),
        sa.Column("recommended_next_json", sa.Text, nullable=False, server_default="[]"),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.CheckConstraint(
            "outcome_status IN ('Win', 'Loss', 'Neutral', 'Inconclusive')",
            name="ck_outcomes_status",
        ),
    )
    op.create_index("idx_outcomes_experiment", "outcomes", ["experiment_id"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("run_id", sa.Text, sa.ForeignKey("runs.id"), nullable=True),
        sa.Column("experiment_id", sa.Text, sa.ForeignKey("experiments.id"), nullable=True),
        sa.Column("event", sa.Text, nullable=False),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.Text, nullable=False),
    )
    op.create_index("idx_activity_log_run", "activity_log", ["run_id"])
    op.create_index("idx_activity_log_experiment", "activity_log", ["experiment_id"])


def downgrade() -> None:
    """Drop all growthcase tables."""
    op.drop_index("idx_activity_log_experiment", table_name="activity_log")
    op.drop_index("idx_activity_log_run", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("idx_outcomes_experiment", table_name="outcomes")
    op.drop_table("outcomes")
    op.drop_index("idx_experiments_run", table_name="experiments")
    op.drop_table("experiments")
    op.drop_index("idx_runs_industry_created", table_name="runs")
    op.drop_table("runs")
