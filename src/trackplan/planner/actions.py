"""Action State Machine - Decides what the orchestrator may do next."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trackplan.planner.models import Action

if TYPE_CHECKING:
    from trackplan.planner.models import CommittedResult
    from trackplan.settings import ConfigurationSnapshot
    from trackplan.tracker import TrackerMetadata


def next_action(
    progress: float | None,
    connection_pending: bool,
    metadata: TrackerMetadata | None,
    committed: CommittedResult | None,
    snapshot: ConfigurationSnapshot,
) -> Action:
    """Return the next action given the current state.

    The first matching rule wins:

    1. A pipeline run or connection attempt is in progress: STOP.
    2. No YouTrack metadata yet: CONNECT.
    3. No plan computed yet: BUILD_PLAN.
    4. Settings other than the contributors changed: BUILD_PLAN.
    5. Only the contributors changed: UPDATE_PREDICTION.
    6. Otherwise: NOTHING.

    Args:
        progress: Progress of the current run in percent, None if idle.
        connection_pending: Whether YouTrack metadata is being loaded.
        metadata: YouTrack metadata, None if not connected.
        committed: The last committed result, if any.
        snapshot: The current normalized settings.

    Returns:
        The action to offer.
    """
    if progress is not None or connection_pending:
        return Action.STOP
    if metadata is None:
        return Action.CONNECT
    if committed is None:
        return Action.BUILD_PLAN

    if snapshot.without_contributors() != committed.snapshot.without_contributors():
        return Action.BUILD_PLAN
    if snapshot.contributors != committed.snapshot.contributors:
        return Action.UPDATE_PREDICTION
    return Action.NOTHING
