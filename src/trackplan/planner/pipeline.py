"""Pipeline Runner - Reconstructs the plan from YouTrack and schedules it."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable, Collection
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from trackplan.contributors import map_contributors
from trackplan.planner.exceptions import PipelineInvariantError, ScheduleMergeError
from trackplan.planner.models import (
    CommittedResult,
    MergeFailure,
    RawReconstruction,
    ReconstructionConfig,
    SchedulingOptions,
)

if TYPE_CHECKING:
    from trackplan.planner.interfaces import (
        IssueScheduler,
        PlanReconstructor,
        ProgressCallback,
        ScheduleMerger,
    )
    from trackplan.settings import ConfigurationSnapshot
    from trackplan.tracker import TrackerMetadata

logger = logging.getLogger(__name__)

MIN_STATE_CHANGE_DURATION_MS = 60 * 60 * 1000
DEFAULT_REMAINING_EFFORT_MS = 0
DEFAULT_WAIT_TIME_MS = 0

# Resolution is 1 hour.
SCHEDULING_RESOLUTION_MS = 60 * 60 * 1000

# Issues shorter than 4 hours ideal time are neither split nor preempted.
MIN_ACTIVITY_DURATION = 4


def _now_ms() -> int:
    return int(time.time() * 1000)


def splittable_predicate(
    type_field_id: str, splittable_type_ids: Collection[str]
) -> Callable[[Any], bool]:
    """Build a predicate telling whether an issue may be split.

    An issue is splittable if the value of its type custom field is one of the
    splittable type IDs. Issues must expose a ``custom_fields`` mapping.
    """
    splittable = frozenset(splittable_type_ids)

    def is_splittable(issue: Any) -> bool:
        return issue.custom_fields.get(type_field_id) in splittable

    return is_splittable


def reconstruction_config(snapshot: ConfigurationSnapshot) -> ReconstructionConfig:
    """Translate a settings snapshot into a reconstruction request."""
    return ReconstructionConfig(
        state_field_id=snapshot.state_field_id,
        inactive_state_ids=snapshot.inactive_state_ids,
        remaining_effort_field_id=snapshot.remaining_effort_field_id,
        remaining_wait_field_id=snapshot.remaining_wait_field_id,
        assignee_field_id=snapshot.assignee_field_id,
        other_custom_field_ids=(snapshot.type_field_id,),
        depends_link_type_id=snapshot.depends_link_type_id,
        does_inward_depend_on_outward=snapshot.does_inward_depend_on_outward,
        saved_query_id=snapshot.saved_query_id,
        overlay_saved_query_id=snapshot.overlay_saved_query_id,
        min_state_change_duration_ms=MIN_STATE_CHANGE_DURATION_MS,
        default_remaining_effort_ms=DEFAULT_REMAINING_EFFORT_MS,
        default_wait_time_ms=DEFAULT_WAIT_TIME_MS,
        is_splittable=splittable_predicate(snapshot.type_field_id, snapshot.splittable_type_ids),
    )


class PipelineRunner:
    """Runs the two phases that turn YouTrack data into a project plan.

    Phase A (reconstruct) derives the issue graph from YouTrack. Phase B
    (predict) schedules the issues and merges the schedule into the plan.
    The result of Phase A is kept so that Phase B can be repeated cheaply
    when only the contributors change.

    Neither phase catches errors from the external collaborators. A failed
    phase leaves the previously stored reconstruction untouched.
    """

    def __init__(
        self,
        reconstructor: PlanReconstructor,
        scheduler: IssueScheduler,
        merger: ScheduleMerger,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the Pipeline Runner.

        Args:
            reconstructor: Reconstructs the plan from YouTrack.
            scheduler: Computes a schedule for the reconstructed issues.
            merger: Merges the schedule into the reconstructed plan.
            clock: Returns the current epoch time in milliseconds.
        """
        self.reconstructor = reconstructor
        self.scheduler = scheduler
        self.merger = merger
        self.clock = clock
        self._reconstruction: RawReconstruction | None = None

    @property
    def reconstruction(self) -> RawReconstruction | None:
        """The result of the last successful Phase A, if any."""
        return self._reconstruction

    def has_reconstruction_for(self, snapshot: ConfigurationSnapshot) -> bool:
        """Whether the stored reconstruction matches the snapshot's YouTrack settings."""
        return (
            self._reconstruction is not None
            and self._reconstruction.snapshot.without_contributors()
            == snapshot.without_contributors()
        )

    async def run_build(
        self,
        snapshot: ConfigurationSnapshot,
        metadata: TrackerMetadata | None,
        on_progress: ProgressCallback,
    ) -> CommittedResult:
        """Reconstruct the plan, then predict the schedule.

        Args:
            snapshot: Settings that trigger this pass.
            metadata: Current YouTrack metadata.
            on_progress: Receives reconstruction progress as a fraction in [0, 1].

        Returns:
            The new committed result.
        """
        await self.reconstruct(snapshot, on_progress)
        return await self.predict(snapshot, metadata)

    async def run_update_prediction(
        self,
        snapshot: ConfigurationSnapshot,
        metadata: TrackerMetadata | None,
    ) -> CommittedResult:
        """Predict the schedule again, reusing the last reconstruction."""
        return await self.predict(snapshot, metadata)

    async def reconstruct(
        self, snapshot: ConfigurationSnapshot, on_progress: ProgressCallback
    ) -> RawReconstruction:
        """Phase A: reconstruct the project plan from YouTrack."""
        logger.info("Reconstructing project plan from %s", snapshot.base_url)
        config = reconstruction_config(snapshot)
        plan = await self.reconstructor.reconstruct(snapshot.base_url, config, on_progress)
        reconstruction = RawReconstruction(
            plan=plan,
            completed_at_ms=self.clock(),
            snapshot=snapshot,
        )
        self._reconstruction = reconstruction
        logger.info(
            "Reconstructed project plan with %d issue(s)",
            len(plan.issues),
        )
        return reconstruction

    async def predict(
        self, snapshot: ConfigurationSnapshot, metadata: TrackerMetadata | None
    ) -> CommittedResult:
        """Phase B: schedule the reconstructed issues and merge the schedule.

        Raises:
            PipelineInvariantError: If no reconstruction or metadata exists.
            ScheduleMergeError: If the merge step returns a MergeFailure.
        """
        reconstruction = self._reconstruction
        if reconstruction is None:
            raise PipelineInvariantError("Prediction requested before the plan was reconstructed")
        if metadata is None:
            raise PipelineInvariantError("Prediction requested without YouTrack metadata")

        contributors, id_to_external_name = map_contributors(snapshot.contributors)
        options = SchedulingOptions(
            contributors=tuple(contributors),
            minutes_per_week=metadata.minutes_per_work_week,
            resolution_ms=SCHEDULING_RESOLUTION_MS,
            min_activity_duration=MIN_ACTIVITY_DURATION,
            prediction_start_time_ms=reconstruction.completed_at_ms,
        )
        logger.info("Scheduling with %d contributor(s)", len(contributors))
        schedule = await self.scheduler.schedule(reconstruction.plan.issues, options)

        final_plan = self.merger.merge(
            reconstruction.plan, schedule, options.prediction_start_time_ms
        )
        if inspect.isawaitable(final_plan):
            final_plan = await final_plan
        if isinstance(final_plan, MergeFailure):
            raise ScheduleMergeError(final_plan)

        return CommittedResult(
            plan=final_plan,
            snapshot=snapshot,
            tracker_timestamp_ms=reconstruction.completed_at_ms,
            external_contributor_names=MappingProxyType(id_to_external_name),
        )
