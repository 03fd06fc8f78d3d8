"""Interfaces of the external collaborators used by the planner.

Reconstruction, scheduling and merging are black boxes to trackplan. Any
object with matching methods can be plugged in, which keeps the orchestrator
testable with deterministic fakes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from trackplan.planner.models import MergeFailure, ReconstructionConfig, SchedulingOptions
    from trackplan.tracker import TrackerMetadata

ProgressCallback = Callable[[float], None]


class TrackerConnector(Protocol):
    """Interface for connecting to YouTrack."""

    async def connect(self, base_url: str, service_id: str) -> None:
        """Start the OAuth handshake."""
        ...

    async def fetch_metadata(self, base_url: str) -> TrackerMetadata:
        """Retrieve instance metadata, such as the length of a work week."""
        ...


class PlanReconstructor(Protocol):
    """Interface for reconstructing a project plan from YouTrack."""

    async def reconstruct(
        self,
        base_url: str,
        config: ReconstructionConfig,
        on_progress: ProgressCallback,
    ) -> Any:
        """Reconstruct the plan, reporting progress as a fraction in [0, 1]."""
        ...


class IssueScheduler(Protocol):
    """Interface for the scheduling engine."""

    async def schedule(self, issues: Sequence[Any], options: SchedulingOptions) -> Any:
        """Compute a schedule for the given issues."""
        ...


class ScheduleMerger(Protocol):
    """Interface for merging a schedule into a reconstructed plan."""

    def merge(
        self, plan: Any, schedule: Any, start_time_ms: int
    ) -> Any | MergeFailure | Awaitable[Any | MergeFailure]:
        """Return the final plan, or a MergeFailure."""
        ...


class AlertReporter(Protocol):
    """Interface for reporting failed operations to the user."""

    def alert(self, title: str, error: BaseException) -> None:
        """Report an error under the given title."""
        ...
