"""Click CLI entry point for growthcase."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING

import click

from growthcase.config import Settings
from growthcase.db import Database
from growthcase.errors import CaseLibraryError
from growthcase.logging import configure_logging
from growthcase.models.experiment import ExperimentStatus
from growthcase.models.outcome import OutcomeStatus

if TYPE_CHECKING:
    from growthcase.models.analysis import AnalysisResult
    from growthcase.models.run import CampaignSnapshot, ComputedFields

_DOUBLE_LINE = "═" * 56
_SINGLE_LINE = "─" * 40


def _get_db(settings: Settings) -> Database:
    settings.ensure_data_dir()
    db = Database(settings.db_path)
    db.init_schema()
    return db


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """growthcase: campaign bottleneck analysis with a case library."""
    ctx.ensure_object(dict)
    settings = Settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    db.close()
    click.echo(f"Database ready at {settings.db_path}")


@cli.command("scenarios")
def list_scenarios() -> None:
    """List preset campaign scenarios."""
    from growthcase.scenarios import SCENARIOS

    for name, scenario in SCENARIOS.items():
        click.echo(f"  {name:20s} {scenario.label} ({scenario.snapshot.industry.value})")
        click.echo(f"  {'':20s} {scenario.description}")


@cli.command()
@click.option("--scenario", "scenario_name", required=True, help="Preset scenario name")
@click.option("--simulate", is_flag=True, help="Use the built-in mock analysis (not stored)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw analysis as JSON")
@click.pass_context
def analyze(ctx: click.Context, scenario_name: str, simulate: bool, as_json: bool) -> None:
    """Analyze a preset campaign snapshot."""
    from growthcase.analysis import AnalysisService
    from growthcase.models.run import compute_fields
    from growthcase.scenarios import get_scenario

    try:
        scenario = get_scenario(scenario_name)
    except ValueError as exc:
        _fail(str(exc))
        return

    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        computed = compute_fields(scenario.snapshot)
        outcome = AnalysisService(db, settings).analyze(
            scenario.snapshot, computed, simulation=simulate
        )
    except CaseLibraryError as exc:
        _fail(str(exc))
        return
    finally:
        db.close()

    if as_json:
        click.echo(outcome.result.model_dump_json(indent=2))
    else:
        click.echo(format_result_as_text(scenario.snapshot, computed, outcome.result))
    click.echo(f"\nRun: {outcome.run_id}" + ("" if outcome.persisted else " (simulated, not stored)"))
    for name, exp_id in outcome.experiment_ids:
        click.echo(f"  experiment {exp_id}  {name}")


@cli.command()
@click.option("--limit", default=None, type=int, help="Number of runs to show")
@click.pass_context
def history(ctx: click.Context, limit: int | None) -> None:
    """Show the most recent analysis runs."""
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        entries = db.list_recent_runs(limit or settings.history_limit)
    finally:
        db.close()

    if not entries:
        click.echo("No runs found.")
        return
    for entry in entries:
        run = entry.run
        click.echo(
            f"  [{run.id}] {run.created_at:%Y-%m-%d %H:%M} {run.brand} "
            f"({run.industry.value}) {run.primary_bottleneck.value} "
            f"conf={run.confidence:.2f} risk={run.risk_score}"
        )
        for record in entry.experiments:
            exp = record.experiment
            results = ", ".join(o.outcome_status.value for o in record.outcomes) or "-"
            click.echo(f"      {exp.id}  {exp.status.value:10s} {exp.name}  [{results}]")


@cli.command()
@click.argument("run_id")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def similar(ctx: click.Context, run_id: str, as_json: bool) -> None:
    """Show the most similar historical runs and what won for them."""
    from growthcase.similarity import CaseRanker, RankingPolicy

    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        cases = CaseRanker(db, RankingPolicy.from_settings(settings)).rank(run_id)
    except CaseLibraryError as exc:
        _fail(str(exc))
        return
    finally:
        db.close()

    if as_json:
        click.echo(json.dumps([c.model_dump(mode="json") for c in cases], indent=2))
        return
    if not cases:
        click.echo("No similar cases found.")
        return
    for case in cases:
        run = case.run
        click.echo(
            f"  {case.similarity_score:3d}  [{run.id}] {run.brand} "
            f"{run.primary_bottleneck.value} ({run.created_at:%Y-%m-%d})"
        )
        for record in case.winning_experiments:
            click.echo(f"         ✔ {record.experiment.name}")


@cli.command("set-status")
@click.argument("experiment_id")
@click.argument(
    "status",
    type=click.Choice([s.value for s in ExperimentStatus], case_sensitive=False),
)
@click.pass_context
def set_status(ctx: click.Context, experiment_id: str, status: str) -> None:
    """Move an experiment to a new status."""
    target = next(s for s in ExperimentStatus if s.value.lower() == status.lower())
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        updated = db.update_experiment_status(experiment_id, target)
    except CaseLibraryError as exc:
        _fail(str(exc))
        return
    finally:
        db.close()
    click.echo(f"Experiment {updated.id}: {updated.status.value}")


@cli.command("record-outcome")
@click.argument("experiment_id")
@click.argument(
    "outcome_status",
    type=click.Choice([s.value for s in OutcomeStatus], case_sensitive=False),
)
@click.option("--notes", default="", help="Free-text notes")
@click.option("--learning", "learnings", multiple=True, help="A learning (repeatable)")
@click.option("--next", "recommended_next", multiple=True, help="Recommended next step (repeatable)")
@click.option("--roas", type=float, default=None, help="ROAS change")
@click.option("--cac", type=float, default=None, help="CAC change")
@click.option("--ctr", type=float, default=None, help="CTR change")
@click.option("--cvr", type=float, default=None, help="CVR change")
@click.pass_context
def record_outcome(
    ctx: click.Context,
    experiment_id: str,
    outcome_status: str,
    notes: str,
    learnings: tuple[str, ...],
    recommended_next: tuple[str, ...],
    roas: float | None,
    cac: float | None,
    ctr: float | None,
    cvr: float | None,
) -> None:
    """Record an experiment outcome (marks the experiment Completed)."""
    from growthcase.models.outcome import MetricsDelta, Outcome

    status = next(s for s in OutcomeStatus if s.value.lower() == outcome_status.lower())
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        outcome = db.record_outcome(
            Outcome(
                experiment_id=experiment_id,
                outcome_status=status,
                notes=notes,
                metrics_delta=MetricsDelta(roas=roas, cac=cac, ctr=ctr, cvr=cvr),
                learnings=list(learnings),
                recommended_next=list(recommended_next),
            )
        )
    except CaseLibraryError as exc:
        _fail(str(exc))
        return
    finally:
        db.close()
    click.echo(f"Outcome {outcome.id} recorded ({status.value}); experiment Completed")


@cli.command()
@click.argument("run_id")
@click.option("--log", "show_log", is_flag=True, help="Show the activity log")
@click.pass_context
def inspect(ctx: click.Context, run_id: str, show_log: bool) -> None:
    """Inspect a stored run."""
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        run = db.get_run(run_id)
        if run is None:
            _fail(f"Run {run_id} not found.")
            return
        click.echo(f"Run {run.id}: {run.brand} ({run.industry.value})")
        click.echo(f"  Created: {run.created_at.isoformat()}")
        click.echo(f"  Primary: {run.primary_bottleneck.value}")
        secondary = ", ".join(b.value for b in run.secondary_bottlenecks) or "-"
        click.echo(f"  Secondary: {secondary}")
        click.echo(f"  Confidence: {run.confidence:.2f}  Risk: {run.risk_score}")

        if show_log:
            click.echo("\nActivity Log:")
            for entry in db.get_log(run_id=run_id):
                click.echo(f"  [{entry['created_at']}] {entry['event']}: {entry['message']}")
        else:
            for record in db.list_experiments_for_run(run_id):
                exp = record.experiment
                click.echo(f"  {exp.id}  {exp.status.value:10s} {exp.category.value:11s} {exp.name}")
    finally:
        db.close()


def format_result_as_text(
    snapshot: CampaignSnapshot,
    computed: ComputedFields,
    result: AnalysisResult,
) -> str:
    """Plain-text analysis report."""
    lines: list[str] = [
        _DOUBLE_LINE,
        "GROWTH ANALYSIS REPORT",
        f"{snapshot.brand_name} | {snapshot.industry.value} | {snapshot.time_window.value}",
        _DOUBLE_LINE,
        "",
        "SUMMARY",
        _SINGLE_LINE,
        result.summary.one_liner,
        f"Primary Bottleneck: {result.primary_bottleneck.value}",
        f"Confidence: {round(result.confidence * 100)}%",
        f"Risk Score: {result.risk.risk_score}",
        "",
        "DIAGNOSIS",
        _SINGLE_LINE,
    ]
    for b in result.bottlenecks:
        lines.append(f"• {b.type.value} (Signal: {round(b.signal_strength * 100)}%)")
        lines.extend(f"  - {r}" for r in b.reasoning)

    lines += ["", "CHECKS TO CONFIRM", _SINGLE_LINE]
    lines.extend(f"• {c}" for c in result.checks_to_confirm)

    lines += ["", "ACTION PLAN", _SINGLE_LINE]
    for a in result.action_plan:
        lines.append(f"{a.priority}. {a.title}")
        lines.append(f"   Impact: {a.expected_impact}")
        lines.append(f"   Risk: {a.risk}")

    lines += ["", "EXPERIMENTS", _SINGLE_LINE]
    for e in result.experiments:
        lines.append(f"• {e.name} [{e.category.value}]")
        lines.append(f"  Hypothesis: {e.hypothesis}")
        lines.append(f"  Setup: {e.setup}")
        lines.append(f"  Success Metrics: {', '.join(e.success_metrics)}")
        lines.append(f"  Guardrails: {', '.join(e.guardrails)}")

    cd = result.creative_directions
    lines += ["", "CREATIVE DIRECTIONS", _SINGLE_LINE, "Angles:"]
    lines.extend(f"  • {a}" for a in cd.angles)
    lines.append("Hooks:")
    lines.extend(f"  • {h}" for h in cd.hooks)
    lines.append("CTAs:")
    lines.extend(f"  • {c}" for c in cd.ctas)

    lines += [
        "",
        "COMPUTED METRICS",
        _SINGLE_LINE,
        f"ROAS: {computed.roas:.2f}x",
        f"CPC: ${computed.cpc:.2f}",
        f"Estimated CAC: ${computed.estimated_cac:.2f}",
        _DOUBLE_LINE,
    ]
    return "\n".join(lines)


if __name__ == "__main__":
    cli()
