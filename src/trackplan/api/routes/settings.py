"""Settings endpoints."""

from fastapi import APIRouter

from trackplan.api.dependencies import OrchestratorDep
from trackplan.api.models import APIResponse, SettingsModel, settings_to_response

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=APIResponse[SettingsModel])
def get_settings(orchestrator: OrchestratorDep) -> APIResponse[SettingsModel]:
    """Get the current settings."""
    return APIResponse(data=settings_to_response(orchestrator.settings))


@router.put("", response_model=APIResponse[SettingsModel])
def replace_settings(
    body: SettingsModel, orchestrator: OrchestratorDep
) -> APIResponse[SettingsModel]:
    """Replace the current settings."""
    orchestrator.update_settings(body.to_settings())
    return APIResponse(data=settings_to_response(orchestrator.settings))
