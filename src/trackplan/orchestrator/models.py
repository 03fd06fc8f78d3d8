"""Data models for the Orchestrator module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackplan.planner import CommittedResult
    from trackplan.tracker import TrackerMetadata


@dataclass(frozen=True)
class OrchestratorState:
    """Observable state of the orchestrator.

    Attributes:
        progress: Progress of the current run in percent, None if idle.
            While set, no other run may be started.
        metadata: YouTrack metadata, None until connected.
        committed: Last successfully computed plan, None until the first
            successful run.
    """

    progress: float | None = None
    metadata: TrackerMetadata | None = None
    committed: CommittedResult | None = None
