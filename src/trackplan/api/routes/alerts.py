"""Alert endpoints."""

from fastapi import APIRouter

from trackplan.api.dependencies import EventManagerDep
from trackplan.api.models import AlertResponse, APIResponse

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("", response_model=APIResponse[list[AlertResponse]])
def list_alerts(event_manager: EventManagerDep) -> APIResponse[list[AlertResponse]]:
    """List recently reported alerts, oldest first."""
    return APIResponse(
        data=[AlertResponse.model_validate(alert) for alert in event_manager.recent_alerts]
    )
