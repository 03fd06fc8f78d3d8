"""Tracker - Connects to YouTrack and retrieves instance metadata."""

from trackplan.tracker.client import YouTrackClient
from trackplan.tracker.exceptions import (
    TrackerAuthError,
    TrackerError,
    TrackerNotConnectedError,
)
from trackplan.tracker.models import TrackerMetadata

__all__ = [
    "TrackerAuthError",
    "TrackerError",
    "TrackerMetadata",
    "TrackerNotConnectedError",
    "YouTrackClient",
]
