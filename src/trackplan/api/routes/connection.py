"""Endpoints for completing the YouTrack OAuth handshake."""

from fastapi import APIRouter

from trackplan.api.dependencies import OrchestratorDep, TrackerDep
from trackplan.api.models import (
    APIResponse,
    StatusResponse,
    TokenRequest,
    status_to_response,
)

router = APIRouter(prefix="/connection", tags=["connection"])


@router.post("/token", response_model=APIResponse[StatusResponse])
async def store_token(
    body: TokenRequest, orchestrator: OrchestratorDep, tracker: TrackerDep
) -> APIResponse[StatusResponse]:
    """Store the access token from the OAuth redirect and load YouTrack metadata.

    Failures to load metadata are reported as alerts; the returned status
    then still offers to connect.
    """
    await tracker.set_token(body.access_token)
    await orchestrator.load_metadata()
    return APIResponse(data=status_to_response(orchestrator))
