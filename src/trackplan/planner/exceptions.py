"""Exceptions for the Planner module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackplan.planner.models import MergeFailure


class PlannerError(Exception):
    """Base exception for planner errors."""

    pass


class ScheduleMergeError(PlannerError):
    """The schedule could not be merged into the reconstructed plan."""

    def __init__(self, failure: MergeFailure) -> None:
        self.failure = failure
        super().__init__(f"Could not merge schedule: {failure.message}")


class PipelineInvariantError(PlannerError):
    """A pipeline phase was invoked without its preconditions.

    This indicates a programming error, never a recoverable condition.
    """

    pass
