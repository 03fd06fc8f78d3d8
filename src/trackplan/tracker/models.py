"""Data models for the YouTrack client."""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrackerMetadata:
    """Metadata of a YouTrack instance.

    Attributes:
        base_url: Base URL of the YouTrack instance.
        minutes_per_work_week: Length of a work week as configured in YouTrack.
        users: YouTrack user ID to full name.
    """

    base_url: str
    minutes_per_work_week: int
    users: Mapping[str, str] = field(default_factory=dict)
