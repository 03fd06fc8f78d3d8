"""Orchestrator - Builds and refreshes the project plan."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from trackplan.orchestrator.models import OrchestratorState
from trackplan.planner import Action, PipelineInvariantError, next_action

if TYPE_CHECKING:
    from trackplan.planner import CommittedResult, PipelineRunner
    from trackplan.planner.interfaces import AlertReporter, TrackerConnector
    from trackplan.settings import ConfigurationSnapshot, Settings
    from trackplan.tracker import TrackerMetadata

logger = logging.getLogger(__name__)

StateListener = Callable[[OrchestratorState, Action], None]

CONNECT_FAILED = "Failed to connect to YouTrack"
METADATA_FAILED = "Failed to load YouTrack metadata"
BUILD_FAILED = "Failed to build project plan"
UPDATE_FAILED = "Failed to update prediction"


class Orchestrator:
    """Decides what to do next and runs the plan pipeline.

    The Orchestrator:
    - Holds the current settings, YouTrack metadata, progress and last result
    - Derives the next action from that state (see next_action)
    - Runs the action on dispatch()
    - Reports failed operations to the alert reporter
    - Notifies listeners after every state change

    State is only ever replaced as a whole, so listeners never observe a plan
    paired with settings that did not produce it.
    """

    def __init__(
        self,
        settings: Settings,
        runner: PipelineRunner,
        connector: TrackerConnector,
        alerts: AlertReporter,
    ) -> None:
        """Initialize the Orchestrator.

        Args:
            settings: Current user settings.
            runner: PipelineRunner that reconstructs and schedules the plan.
            connector: Connects to YouTrack and loads its metadata.
            alerts: Receives failed operations for display to the user.
        """
        self.runner = runner
        self.connector = connector
        self.alerts = alerts
        self._settings = settings
        self._state = OrchestratorState()
        self._connection_pending = False
        self._listeners: list[StateListener] = []

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def snapshot(self) -> ConfigurationSnapshot:
        """Normalized snapshot of the current settings."""
        return self._settings.snapshot()

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def progress(self) -> float | None:
        return self._state.progress

    @property
    def committed(self) -> CommittedResult | None:
        return self._state.committed

    @property
    def metadata(self) -> TrackerMetadata | None:
        return self._state.metadata

    @property
    def connection_pending(self) -> bool:
        return self._connection_pending

    @property
    def action(self) -> Action:
        """The action dispatch() would run now."""
        return next_action(
            self._state.progress,
            self._connection_pending,
            self._state.metadata,
            self._state.committed,
            self.snapshot,
        )

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with (state, action) after every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update_settings(self, settings: Settings) -> None:
        """Replace the current settings.

        Metadata belongs to one YouTrack instance, so it is dropped when the
        base URL changes.
        """
        previous_base_url = self.snapshot.base_url
        self._settings = settings
        if self._state.metadata is not None and self.snapshot.base_url != previous_base_url:
            logger.info("YouTrack base URL changed, dropping metadata")
            self._replace_state(metadata=None)
        else:
            self._notify()

    async def dispatch(self) -> Action:
        """Run the current action.

        STOP and NOTHING do nothing. Failures are reported to the alert
        reporter rather than raised, except for broken pipeline invariants.

        Returns:
            The action that was dispatched.
        """
        action = self.action
        snapshot = self.snapshot
        logger.info("Dispatching action %s", action.value)

        match action:
            case Action.CONNECT:
                await self._run_reported(
                    CONNECT_FAILED,
                    self.connector.connect(snapshot.base_url, snapshot.service_id),
                )
            case Action.BUILD_PLAN:
                await self._run_pipeline(BUILD_FAILED, self._build_plan(snapshot))
            case Action.UPDATE_PREDICTION:
                await self._run_pipeline(UPDATE_FAILED, self._update_prediction(snapshot))
            case Action.STOP | Action.NOTHING:
                pass

        return action

    async def load_metadata(self) -> None:
        """Load YouTrack metadata for the current base URL.

        Called once the OAuth handshake has produced an access token. While
        loading, the action is STOP. A pipeline run in progress is not affected.
        """
        self._connection_pending = True
        self._notify()
        try:
            await self._run_reported(METADATA_FAILED, self._load_metadata(self.snapshot.base_url))
        finally:
            self._notify()

    async def _load_metadata(self, base_url: str) -> None:
        try:
            metadata = await self.connector.fetch_metadata(base_url)
        finally:
            self._connection_pending = False
        if base_url != self.snapshot.base_url:
            logger.info("Discarding metadata for %s, base URL changed meanwhile", base_url)
            return
        self._replace_state(metadata=metadata)

    async def _build_plan(self, snapshot: ConfigurationSnapshot) -> None:
        result = await self.runner.run_build(snapshot, self._state.metadata, self._on_progress)
        self._commit(result)

    async def _update_prediction(self, snapshot: ConfigurationSnapshot) -> None:
        if not self.runner.has_reconstruction_for(snapshot):
            # The last reconstruction came from a rebuild whose prediction failed.
            logger.info("Stored reconstruction is for other settings, rebuilding")
            await self._build_plan(snapshot)
            return
        result = await self.runner.run_update_prediction(snapshot, self._state.metadata)
        self._commit(result)

    def _on_progress(self, fraction: float) -> None:
        self._replace_state(progress=100.0 * min(max(fraction, 0.0), 1.0))

    def _commit(self, result: CommittedResult) -> None:
        self._replace_state(committed=result)
        logger.info(
            "Committed project plan (YouTrack timestamp %d)",
            result.tracker_timestamp_ms,
        )

    async def _run_pipeline(self, title: str, operation: Awaitable[None]) -> None:
        """Run a pipeline pass while holding the progress flag.

        Progress is the only mutual-exclusion flag. It is set before the first
        await and cleared in all cases, so the next action can be offered.
        """
        self._replace_state(progress=0.0)
        try:
            await self._run_reported(title, operation)
        finally:
            self._replace_state(progress=None)

    async def _run_reported(self, title: str, operation: Awaitable[None]) -> None:
        """Await an operation, reporting any failure under the given title."""
        try:
            await operation
        except PipelineInvariantError as e:
            logger.critical("%s: %s", title, e)
            self.alerts.alert(title, e)
            raise
        except Exception as e:
            logger.exception("%s: %s", title, e)
            self.alerts.alert(title, e)

    def _replace_state(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        self._notify()

    def _notify(self) -> None:
        action = self.action
        for listener in list(self._listeners):
            listener(self._state, action)
