"""API endpoints for chained multi-step translation runs."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status

from ...core.settings import Settings, get_settings
from ...models.common import ErrorCode, ResponseEnvelope
from ...models.translation import MultiTranslationRequest, RunSnapshot
from ...services.orchestration import (
    InvalidInputError,
    MultiStepOrchestrator,
    OrchestrationError,
    get_orchestrator,
)

router = APIRouter(prefix="/api/multi-translate", tags=["orchestration"])


@router.post(
    "",
    response_model=ResponseEnvelope[RunSnapshot],
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a multi-step translation run",
)
async def start_run(
    request: MultiTranslationRequest,
    background_tasks: BackgroundTasks,
    orchestrator: MultiStepOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> ResponseEnvelope[RunSnapshot]:
    """Build the run's steps and execute them in the background.

    Starting a run while another is executing replaces it; the earlier run's
    late results are discarded.
    """

    count = request.repeat_count if request.repeat_count is not None else settings.default_repeat_count
    try:
        context = orchestrator.prepare(request.text, count)
    except InvalidInputError as exc:
        return ResponseEnvelope.error_payload(
            ErrorCode.INVALID_INPUT,
            str(exc),
            {
                "min_repeat_count": settings.min_repeat_count,
                "max_repeat_count": settings.max_repeat_count,
            },
        )
    except OrchestrationError as exc:
        return ResponseEnvelope.from_error(ErrorCode.ORCHESTRATION_ERROR, exc)

    background_tasks.add_task(orchestrator.execute_in_background, context)
    return ResponseEnvelope.success_payload(orchestrator.snapshot())


@router.get(
    "",
    response_model=ResponseEnvelope[RunSnapshot],
    summary="Retrieve the active run",
)
async def get_run(
    orchestrator: MultiStepOrchestrator = Depends(get_orchestrator),
) -> ResponseEnvelope[RunSnapshot]:
    """Return the steps, progress and outcome of the active run."""

    return ResponseEnvelope.success_payload(orchestrator.snapshot())


@router.post(
    "/reset",
    response_model=ResponseEnvelope[RunSnapshot],
    summary="Discard the active run",
)
async def reset_run(
    orchestrator: MultiStepOrchestrator = Depends(get_orchestrator),
) -> ResponseEnvelope[RunSnapshot]:
    """Clear the run back to an empty idle state, even while it is executing."""

    return ResponseEnvelope.success_payload(orchestrator.reset())
