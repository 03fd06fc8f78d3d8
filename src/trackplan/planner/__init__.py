"""Planner package - Action state machine and plan pipeline."""

from trackplan.planner.actions import next_action
from trackplan.planner.exceptions import (
    PipelineInvariantError,
    PlannerError,
    ScheduleMergeError,
)
from trackplan.planner.models import (
    Action,
    CommittedResult,
    MergeFailure,
    RawReconstruction,
    ReconstructionConfig,
    SchedulingOptions,
)
from trackplan.planner.pipeline import PipelineRunner

__all__ = [
    "Action",
    "CommittedResult",
    "MergeFailure",
    "PipelineInvariantError",
    "PipelineRunner",
    "PlannerError",
    "RawReconstruction",
    "ReconstructionConfig",
    "ScheduleMergeError",
    "SchedulingOptions",
    "next_action",
]
