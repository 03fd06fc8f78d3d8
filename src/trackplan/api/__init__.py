"""REST API for trackplan."""

from trackplan.api.app import create_app
from trackplan.api.events import Alert, Event, EventManager, EventType
from trackplan.api.models import APIResponse, SettingsModel, StatusResponse

__all__ = [
    "APIResponse",
    "Alert",
    "Event",
    "EventManager",
    "EventType",
    "SettingsModel",
    "StatusResponse",
    "create_app",
]
