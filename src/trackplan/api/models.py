"""Pydantic models for REST API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trackplan.api.events import committed_summary
from trackplan.settings import Settings

if TYPE_CHECKING:
    from trackplan.orchestrator import Orchestrator

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Settings models


class ContributorModel(BaseModel):
    """A contributor entry as sent by clients."""

    type: Literal["internal", "external"] = "internal"
    id: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    num_members: int = Field(default=1, ge=1, le=999)
    hours_per_week: float = Field(..., gt=0, le=168)

    @model_validator(mode="after")
    def check_identity(self) -> ContributorModel:
        if self.type == "internal" and self.id is None:
            raise ValueError("internal contributors require an id")
        if self.type == "external" and self.name is None:
            raise ValueError("external contributors require a name")
        return self


class SettingsModel(BaseModel):
    """Request and response model for settings."""

    name: str = ""
    base_url: str = ""
    service_id: str = ""
    state_field_id: str = ""
    inactive_state_ids: list[str] = Field(default_factory=list)
    remaining_effort_field_id: str = ""
    remaining_wait_field_id: str = ""
    assignee_field_id: str = ""
    type_field_id: str = ""
    splittable_type_ids: list[str] = Field(default_factory=list)
    depends_link_type_id: str = ""
    does_inward_depend_on_outward: bool = False
    saved_query_id: str = ""
    overlay_saved_query_id: str = ""
    contributors: list[ContributorModel] = Field(default_factory=list)

    def to_settings(self) -> Settings:
        """Convert to domain settings."""
        return Settings.from_dict(self.model_dump(exclude_none=True))


def settings_to_response(settings: Settings) -> SettingsModel:
    """Convert domain settings to SettingsModel."""
    return SettingsModel.model_validate(settings.to_dict())


# Status models


class CommittedSummaryResponse(BaseModel):
    """Summary of the last committed plan."""

    tracker_timestamp_ms: int
    external_contributors: dict[str, str]
    num_contributors: int


class StatusResponse(BaseModel):
    """Response model for orchestrator status."""

    action: str
    progress: float | None
    connected: bool
    connection_pending: bool
    committed: CommittedSummaryResponse | None


def status_to_response(orchestrator: Orchestrator) -> StatusResponse:
    """Build a StatusResponse from the orchestrator's current state."""
    state = orchestrator.state
    summary: dict[str, Any] | None = committed_summary(state.committed)
    return StatusResponse(
        action=orchestrator.action.value,
        progress=state.progress,
        connected=state.metadata is not None,
        connection_pending=orchestrator.connection_pending,
        committed=CommittedSummaryResponse(**summary) if summary is not None else None,
    )


class DispatchResponse(BaseModel):
    """Response model for a dispatched action."""

    action: str


# Connection models


class TokenRequest(BaseModel):
    """OAuth access token obtained from the YouTrack Hub redirect."""

    access_token: str = Field(..., min_length=1)


# Alert models


class AlertResponse(BaseModel):
    """Response model for an alert."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    message: str
    timestamp: str
