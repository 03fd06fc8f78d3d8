"""Data models for the Planner module."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trackplan.contributors import ContributorRecord
    from trackplan.settings import ConfigurationSnapshot


class Action(str, Enum):
    """The next action the orchestrator may take."""

    CONNECT = "connect"
    BUILD_PLAN = "build"
    UPDATE_PREDICTION = "update"
    STOP = "stop"
    NOTHING = "nothing"


@dataclass(frozen=True)
class ReconstructionConfig:
    """Request for reconstructing a project plan from YouTrack.

    Attributes:
        state_field_id: Custom field holding the issue state.
        inactive_state_ids: States in which no work happens on an issue.
        remaining_effort_field_id: Custom field holding the remaining effort.
        remaining_wait_field_id: Custom field holding the remaining wait time.
        assignee_field_id: Custom field holding the assignee.
        other_custom_field_ids: Additional custom fields to retrieve.
        depends_link_type_id: Issue link type that expresses dependencies.
        does_inward_depend_on_outward: Direction of the dependency link.
        saved_query_id: Saved query selecting the issues to plan.
        overlay_saved_query_id: Saved query whose issues override the main query.
        min_state_change_duration_ms: State changes shorter than this are ignored.
        default_remaining_effort_ms: Remaining effort used if none is recorded.
        default_wait_time_ms: Wait time used if none is recorded.
        is_splittable: Predicate telling whether an issue may be split among
            contributors.
    """

    state_field_id: str
    inactive_state_ids: tuple[str, ...]
    remaining_effort_field_id: str
    remaining_wait_field_id: str
    assignee_field_id: str
    other_custom_field_ids: tuple[str, ...]
    depends_link_type_id: str
    does_inward_depend_on_outward: bool
    saved_query_id: str
    overlay_saved_query_id: str
    min_state_change_duration_ms: int
    default_remaining_effort_ms: int
    default_wait_time_ms: int
    is_splittable: Callable[[Any], bool]


@dataclass(frozen=True)
class SchedulingOptions:
    """Parameters for the scheduling engine.

    Attributes:
        contributors: Contributor records to assign work to.
        minutes_per_week: Minutes in a YouTrack work week.
        resolution_ms: Length of one scheduling time unit.
        min_activity_duration: Issues shorter than this many time units are
            neither split nor preempted.
        prediction_start_time_ms: Epoch time at which the prediction starts.
    """

    contributors: tuple[ContributorRecord, ...]
    minutes_per_week: int
    resolution_ms: int
    min_activity_duration: int
    prediction_start_time_ms: int


@dataclass(frozen=True)
class MergeFailure:
    """Structured failure value returned when a schedule cannot be merged."""

    message: str


@dataclass(frozen=True)
class RawReconstruction:
    """Project plan as reconstructed from YouTrack, before scheduling.

    Attributes:
        plan: The reconstructed plan. Must expose an ``issues`` attribute.
        completed_at_ms: Epoch time at which the activity log was processed.
        snapshot: Settings the reconstruction was produced from.
    """

    plan: Any
    completed_at_ms: int
    snapshot: ConfigurationSnapshot


@dataclass(frozen=True)
class CommittedResult:
    """The last successfully computed plan together with its inputs.

    Instances are only ever replaced as a whole, never modified.

    Attributes:
        plan: The final plan (reconstruction merged with schedule).
        snapshot: Normalized settings that produced the plan.
        tracker_timestamp_ms: Epoch time at which YouTrack data was complete.
        external_contributor_names: Synthetic contributor ID to display name.
            IDs not in this mapping are YouTrack user IDs.
    """

    plan: Any
    snapshot: ConfigurationSnapshot
    tracker_timestamp_ms: int
    external_contributor_names: Mapping[str, str]
