"""SQLAlchemy-backed case library: runs, experiments, outcomes and activity log."""

from __future__ import annotations

import json
from collections import defaultdict
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TypedDict

import structlog
from sqlalchemy import literal_column, select, text
from sqlalchemy.exc import SQLAlchemyError

from growthcase.db.engine import create_db_engine, create_session_factory
from growthcase.db.orm import ActivityLogRow, Base, ExperimentRow, OutcomeRow, RunRow
from growthcase.errors import InvalidInputError, NotFoundError, UnavailableError
from growthcase.metrics import experiment_transitions_total, outcomes_total
from growthcase.models.analysis import AnalysisResult, BottleneckType
from growthcase.models.case import ExperimentRecord, RunHistoryEntry
from growthcase.models.experiment import Experiment, ExperimentStatus, can_transition
from growthcase.models.outcome import MetricsDelta, Outcome, OutcomeStatus
from growthcase.models.run import ChannelMix, Industry, Run, TimeWindow, TrendSignals

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session, sessionmaker

logger = structlog.get_logger()


class LogEntryDict(TypedDict):
    id: int
    run_id: str | None
    experiment_id: str | None
    event: str
    message: str
    created_at: str


class Database:
    """SQLAlchemy-backed wrapper exposing the case library operations.

    Every SQLAlchemy failure surfaces as UnavailableError.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        self._engine: Engine = create_db_engine(self.db_path)
        self._session_factory: sessionmaker[Session] = create_session_factory(self._engine)

    @property
    def engine(self) -> Engine:
        """Expose the SQLAlchemy engine for inspection and advanced use."""
        return self._engine

    def init_schema(self) -> None:
        """Create all tables via ORM metadata."""
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise UnavailableError(f"Could not initialize schema: {exc}") from exc

    def close(self) -> None:
        self._engine.dispose()

    def check_connection(self) -> bool:
        """Verify the database is reachable. Returns True or raises."""
        with self._session() as session:
            session.execute(text("SELECT 1"))
        return True

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Database operation failed", db_path=self.db_path, error=str(exc))
            raise UnavailableError(f"Database unavailable: {exc}") from exc

    # --- Runs ---

    def create_run(self, run: Run, experiments: Iterable[Experiment] = ()) -> Run:
        """Persist a run and its proposed experiments in one transaction."""
        experiments = list(experiments)
        for exp in experiments:
            if exp.linked_run_id != run.id:
                raise InvalidInputError(
                    f"Experiment {exp.id} is linked to {exp.linked_run_id}, not run {run.id}"
                )

        with self._session() as session:
            session.add(self._run_to_row(run))
            # Parent row must exist before the experiments reference it
            session.flush()
            for exp in experiments:
                session.add(self._experiment_to_row(exp))
            session.add(
                ActivityLogRow(
                    run_id=run.id,
                    event="run_created",
                    message=f"{run.brand} / {run.industry.value}: {len(experiments)} experiments",
                )
            )
            session.commit()

        logger.info(
            "Run stored",
            run_id=run.id,
            industry=run.industry.value,
            primary_bottleneck=run.primary_bottleneck.value,
            experiments=len(experiments),
        )
        return run

    def get_run(self, run_id: str) -> Run | None:
        with self._session() as session:
            row = session.get(RunRow, run_id)
            if row is None:
                return None
            return self._row_to_run(row)

    def list_runs(
        self,
        *,
        industry: Industry | None = None,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[Run]:
        """Runs newest first; runs sharing a timestamp come out in reverse insertion order."""
        with self._session() as session:
            stmt = select(RunRow).order_by(
                RunRow.created_at.desc(), literal_column("runs.rowid").desc()
            )
            if industry is not None:
                stmt = stmt.where(RunRow.industry == industry.value)
            if exclude_id is not None:
                stmt = stmt.where(RunRow.id != exclude_id)
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = session.scalars(stmt).all()
            return [self._row_to_run(r) for r in rows]

    def list_recent_runs(self, limit: int = 10) -> list[RunHistoryEntry]:
        """Most recent runs, each with all of its experiments and outcomes."""
        runs = self.list_runs(limit=limit)
        with self._session() as session:
            records = self._load_records(session, [r.id for r in runs])
        return [RunHistoryEntry(run=r, experiments=records.get(r.id, [])) for r in runs]

    # --- Experiments ---

    def get_experiment(self, experiment_id: str) -> Experiment | None:
        with self._session() as session:
            row = session.get(ExperimentRow, experiment_id)
            if row is None:
                return None
            return self._row_to_experiment(row)

    def list_experiments_for_run(
        self,
        run_id: str,
        status: ExperimentStatus | None = None,
    ) -> list[ExperimentRecord]:
        with self._session() as session:
            return self._load_records(session, [run_id], status).get(run_id, [])

    def update_experiment_status(
        self,
        experiment_id: str,
        status: ExperimentStatus,
    ) -> Experiment:
        """Apply an explicit status change, enforcing the experiment state machine."""
        with self._session() as session:
            row = session.get(ExperimentRow, experiment_id)
            if row is None:
                raise NotFoundError(f"Experiment {experiment_id} not found")
            current = ExperimentStatus(row.status)
            if not can_transition(current, status):
                raise InvalidInputError(
                    f"Cannot move experiment {experiment_id} from {current.value} to {status.value}"
                )
            if current != status:
                row.status = status.value
                row.updated_at = _utcnow_str()
                session.add(
                    ActivityLogRow(
                        run_id=row.linked_run_id,
                        experiment_id=experiment_id,
                        event="experiment_status_changed",
                        message=f"{current.value} -> {status.value}",
                    )
                )
                session.commit()
                experiment_transitions_total.labels(status=status.value).inc()
                logger.info(
                    "Experiment status changed",
                    experiment_id=experiment_id,
                    from_status=current.value,
                    to_status=status.value,
                )
            return self._row_to_experiment(row)

    # --- Outcomes ---

    def record_outcome(self, outcome: Outcome) -> Outcome:
        """Append an outcome and force its experiment to Completed."""
        with self._session() as session:
            exp_row = session.get(ExperimentRow, outcome.experiment_id)
            if exp_row is None:
                raise NotFoundError(f"Experiment {outcome.experiment_id} not found")
            session.add(
                OutcomeRow(
                    id=outcome.id,
                    experiment_id=outcome.experiment_id,
                    outcome_status=outcome.outcome_status.value,
                    notes=outcome.notes,
                    metrics_delta_json=outcome.metrics_delta.model_dump_json(),
                    learnings_json=json.dumps(outcome.learnings),
                    recommended_next_json=json.dumps(outcome.recommended_next),
                    created_at=_dt_to_str(outcome.created_at),
                )
            )
            previous = exp_row.status
            exp_row.status = ExperimentStatus.COMPLETED.value
            exp_row.updated_at = _utcnow_str()
            session.add(
                ActivityLogRow(
                    run_id=exp_row.linked_run_id,
                    experiment_id=exp_row.id,
                    event="outcome_recorded",
                    message=f"{outcome.outcome_status.value} ({previous} -> Completed)",
                )
            )
            session.commit()

        outcomes_total.labels(outcome_status=outcome.outcome_status.value).inc()
        if previous != ExperimentStatus.COMPLETED.value:
            experiment_transitions_total.labels(status=ExperimentStatus.COMPLETED.value).inc()
        logger.info(
            "Outcome recorded",
            experiment_id=outcome.experiment_id,
            outcome_id=outcome.id,
            outcome_status=outcome.outcome_status.value,
        )
        return outcome

    # --- Activity log ---

    def log_event(
        self,
        event: str,
        message: str = "",
        run_id: str | None = None,
        experiment_id: str | None = None,
    ) -> None:
        with self._session() as session:
            session.add(
                ActivityLogRow(
                    run_id=run_id,
                    experiment_id=experiment_id,
                    event=event,
                    message=message,
                )
            )
            session.commit()

    def get_log(
        self,
        run_id: str | None = None,
        experiment_id: str | None = None,
    ) -> list[LogEntryDict]:
        with self._session() as session:
            stmt = select(ActivityLogRow).order_by(ActivityLogRow.id)
            if run_id is not None:
                stmt = stmt.where(ActivityLogRow.run_id == run_id)
            if experiment_id is not None:
                stmt = stmt.where(ActivityLogRow.experiment_id == experiment_id)
            rows = session.scalars(stmt).all()
            return [
                {
                    "id": r.id,
                    "run_id": r.run_id,
                    "experiment_id": r.experiment_id,
                    "event": r.event,
                    "message": r.message,
                    "created_at": r.created_at,
                }
                for r in rows
            ]

    # --- Helpers ---

    def _load_records(
        self,
        session: Session,
        run_ids: list[str],
        status: ExperimentStatus | None = None,
    ) -> dict[str, list[ExperimentRecord]]:
        """Experiments per run in creation order, outcomes newest first."""
        if not run_ids:
            return {}
        stmt = (
            select(ExperimentRow)
            .where(ExperimentRow.linked_run_id.in_(run_ids))
            .order_by(ExperimentRow.created_at, literal_column("experiments.rowid"))
        )
        if status is not None:
            stmt = stmt.where(ExperimentRow.status == status.value)
        exp_rows = session.scalars(stmt).all()
        if not exp_rows:
            return {}

        outcome_stmt = (
            select(OutcomeRow)
            .where(OutcomeRow.experiment_id.in_([e.id for e in exp_rows]))
            .order_by(OutcomeRow.created_at.desc(), literal_column("outcomes.rowid").desc())
        )
        outcomes: dict[str, list[Outcome]] = defaultdict(list)
        for o in session.scalars(outcome_stmt).all():
            outcomes[o.experiment_id].append(self._row_to_outcome(o))

        records: dict[str, list[ExperimentRecord]] = defaultdict(list)
        for e in exp_rows:
            records[e.linked_run_id].append(
                ExperimentRecord(
                    experiment=self._row_to_experiment(e),
                    outcomes=outcomes.get(e.id, []),
                )
            )
        return dict(records)

    @staticmethod
    def _parse_dt(value: str) -> datetime:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    @staticmethod
    def _run_to_row(run: Run) -> RunRow:
        return RunRow(
            id=run.id,
            created_at=_dt_to_str(run.created_at),
            brand=run.brand,
            industry=run.industry.value,
            time_window=run.time_window.value if run.time_window else None,
            primary_bottleneck=run.primary_bottleneck.value,
            secondary_bottlenecks_json=json.dumps([b.value for b in run.secondary_bottlenecks]),
            confidence=run.confidence,
            risk_score=run.risk_score,
            trends_json=run.trends.model_dump_json(),
            channel_mix_json=run.channel_mix.model_dump_json() if run.channel_mix else None,
            metrics_json=json.dumps(run.metrics),
            analysis_json=run.analysis.model_dump_json() if run.analysis else None,
            notes=run.notes,
        )

    @staticmethod
    def _row_to_run(row: RunRow) -> Run:
        return Run(
            id=row.id,
            created_at=Database._parse_dt(row.created_at),
            brand=row.brand,
            industry=Industry(row.industry),
            time_window=TimeWindow(row.time_window) if row.time_window else None,
            primary_bottleneck=BottleneckType(row.primary_bottleneck),
            secondary_bottlenecks=[
                BottleneckType(b) for b in json.loads(row.secondary_bottlenecks_json)
            ],
            confidence=row.confidence,
            risk_score=row.risk_score,
            trends=TrendSignals.model_validate_json(row.trends_json),
            channel_mix=(
                ChannelMix.model_validate_json(row.channel_mix_json)
                if row.channel_mix_json
                else None
            ),
            metrics=json.loads(row.metrics_json),
            notes=row.notes,
            analysis=(
                AnalysisResult.model_validate_json(row.analysis_json)
                if row.analysis_json
                else None
            ),
        )

    @staticmethod
    def _experiment_to_row(exp: Experiment) -> ExperimentRow:
        return ExperimentRow(
            id=exp.id,
            linked_run_id=exp.linked_run_id,
            brand=exp.brand,
            industry=exp.industry.value if exp.industry else None,
            category=exp.category.value,
            name=exp.name,
            hypothesis=exp.hypothesis,
            setup=exp.setup,
            success_metrics_json=json.dumps(exp.success_metrics),
            guardrails_json=json.dumps(exp.guardrails),
            status=exp.status.value,
            created_at=_dt_to_str(exp.created_at),
            updated_at=_dt_to_str(exp.updated_at),
        )

    @staticmethod
    def _row_to_experiment(row: ExperimentRow) -> Experiment:
        return Experiment(
            id=row.id,
            linked_run_id=row.linked_run_id,
            brand=row.brand,
            industry=Industry(row.industry) if row.industry else None,
            category=BottleneckType(row.category),
            name=row.name,
            hypothesis=row.hypothesis,
            setup=row.setup,
            success_metrics=json.loads(row.success_metrics_json),
            guardrails=json.loads(row.guardrails_json),
            status=ExperimentStatus(row.status),
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_outcome(row: OutcomeRow) -> Outcome:
        return Outcome(
            id=row.id,
            experiment_id=row.experiment_id,
            outcome_status=OutcomeStatus(row.outcome_status),
            notes=row.notes,
            metrics_delta=MetricsDelta.model_validate_json(row.metrics_delta_json),
            learnings=json.loads(row.learnings_json),
            recommended_next=json.loads(row.recommended_next_json),
            created_at=Database._parse_dt(row.created_at),
        )


def _dt_to_str(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _utcnow_str() -> str:
    return _dt_to_str(datetime.now(UTC))
