"""Data models for the Contributors module."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContributorRecord:
    """A contributor as seen by the scheduler.

    Attributes:
        id: YouTrack user ID, or a synthetic ID for external contributors.
        minutes_per_week: Capacity per person in minutes per week.
        num_members: Number of people sharing this record.
    """

    id: str
    minutes_per_week: float
    num_members: int = 1
