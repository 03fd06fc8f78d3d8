"""Status and dispatch endpoints for the Orchestrator."""

from fastapi import APIRouter, BackgroundTasks

from trackplan.api.dependencies import OrchestratorDep
from trackplan.api.models import (
    APIResponse,
    DispatchResponse,
    StatusResponse,
    status_to_response,
)
from trackplan.planner import Action

router = APIRouter(tags=["status"])


@router.get("/status", response_model=APIResponse[StatusResponse])
def get_status(orchestrator: OrchestratorDep) -> APIResponse[StatusResponse]:
    """Get the current action, progress and last committed plan."""
    return APIResponse(data=status_to_response(orchestrator))


@router.post("/dispatch", response_model=APIResponse[DispatchResponse])
def dispatch(
    orchestrator: OrchestratorDep, background_tasks: BackgroundTasks
) -> APIResponse[DispatchResponse]:
    """Run the current action in the background.

    Returns the action offered when the request arrived. The background run
    evaluates the action again when it starts, so it does nothing if another
    request started a run in between. STOP and NOTHING schedule no run. Progress and failures are reported via the
    status endpoint, alerts and the event stream.
    """
    action = orchestrator.action
    if action not in (Action.STOP, Action.NOTHING):
        background_tasks.add_task(orchestrator.dispatch)
    return APIResponse(data=DispatchResponse(action=action.value))
