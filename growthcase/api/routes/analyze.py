"""Campaign analysis endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from growthcase.api.deps import AnalysisServiceDep
from growthcase.api.schemas import AnalyzeRequest, AnalyzeResponse, ExperimentRef
from growthcase.models.run import channel_mix_warning

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    body: AnalyzeRequest,
    service: AnalysisServiceDep,
) -> AnalyzeResponse:
    outcome = service.analyze(
        body.snapshot,
        body.computed,
        simulation=body.simulation_mode,
    )
    return AnalyzeResponse(
        result=outcome.result,
        run_id=outcome.run_id,
        experiment_ids=[
            ExperimentRef(name=name, id=exp_id) for name, exp_id in outcome.experiment_ids
        ],
        channel_mix_warning=channel_mix_warning(body.snapshot.channel_mix),
    )
