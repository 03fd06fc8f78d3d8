"""Unit tests for EventManager and events."""

import asyncio
import json

import pytest

from trackplan.api.events import MAX_RECENT_ALERTS, Event, EventManager, EventType
from trackplan.orchestrator import OrchestratorState
from trackplan.planner import Action, CommittedResult
from trackplan.settings import Settings
from trackplan.tracker import TrackerMetadata


@pytest.fixture
def event_manager():
    """Create an EventManager instance."""
    return EventManager()


@pytest.mark.unit
class TestEventManagerSubscribe:
    """Tests for EventManager.subscribe and unsubscribe."""

    def test_event_manager_subscribe(self, event_manager: EventManager) -> None:
        """Client can subscribe."""
        subscriber = event_manager.subscribe()

        assert subscriber.id is not None
        assert subscriber.queue is not None
        assert event_manager.subscriber_count == 1

    def test_event_manager_unsubscribe(self, event_manager: EventManager) -> None:
        """Client can unsubscribe."""
        subscriber = event_manager.subscribe()

        event_manager.unsubscribe(subscriber.id)

        assert event_manager.subscriber_count == 0

    def test_event_manager_unsubscribe_nonexistent(self, event_manager: EventManager) -> None:
        """Unsubscribing nonexistent client doesn't fail."""
        event_manager.unsubscribe("nonexistent-id")

        assert event_manager.subscriber_count == 0


@pytest.mark.unit
class TestEventManagerEmit:
    """Tests for EventManager.emit_sync."""

    @pytest.mark.asyncio
    async def test_event_manager_emit_to_all(self, event_manager: EventManager) -> None:
        """Event reaches all subscribers."""
        sub1 = event_manager.subscribe()
        sub2 = event_manager.subscribe()

        event_manager.emit_sync(Event(event_type=EventType.HEARTBEAT, data={"timestamp": "t"}))

        event1 = await asyncio.wait_for(sub1.queue.get(), timeout=1.0)
        event2 = await asyncio.wait_for(sub2.queue.get(), timeout=1.0)
        assert event1.event_type == EventType.HEARTBEAT
        assert event2.event_type == EventType.HEARTBEAT

    def test_event_manager_no_subscribers(self, event_manager: EventManager) -> None:
        """Emit doesn't fail with no subscribers."""
        event_manager.emit_sync(Event(event_type=EventType.HEARTBEAT, data={}))

    def test_event_to_sse(self) -> None:
        """Events are rendered in SSE format."""
        sse = Event(event_type=EventType.ALERT, data={"title": "x"}).to_sse()

        assert sse.startswith("event: alert\n")
        assert sse.endswith("\n\n")
        assert json.loads(sse.split("data: ")[1].strip()) == {"title": "x"}


@pytest.mark.unit
class TestAlerts:
    """Tests for EventManager.alert."""

    def test_alert_is_recorded_and_emitted(self, event_manager: EventManager) -> None:
        """Alerts are kept and sent to subscribers."""
        sub = event_manager.subscribe()

        event_manager.alert("Failed to build project plan", RuntimeError("YouTrack down"))

        [alert] = event_manager.recent_alerts
        assert alert.title == "Failed to build project plan"
        assert alert.message == "YouTrack down"
        event = sub.queue.get_nowait()
        assert event.event_type == EventType.ALERT
        assert event.data["title"] == "Failed to build project plan"
        assert event.data["message"] == "YouTrack down"

    def test_alert_without_message_uses_type_name(self, event_manager: EventManager) -> None:
        """Errors without a message are described by their type."""
        event_manager.alert("Failed to update prediction", TimeoutError())

        assert event_manager.recent_alerts[0].message == "TimeoutError"

    def test_recent_alerts_are_bounded(self, event_manager: EventManager) -> None:
        """Only the most recent alerts are kept."""
        for i in range(MAX_RECENT_ALERTS + 5):
            event_manager.alert("Failed", ValueError(str(i)))

        alerts = event_manager.recent_alerts
        assert len(alerts) == MAX_RECENT_ALERTS
        assert alerts[0].message == "5"
        assert alerts[-1].message == str(MAX_RECENT_ALERTS + 4)


@pytest.mark.unit
class TestStateChanged:
    """Tests for EventManager.on_state_changed."""

    def test_idle_state(self, event_manager: EventManager) -> None:
        """An idle, unconnected state is published."""
        sub = event_manager.subscribe()

        event_manager.on_state_changed(OrchestratorState(), Action.CONNECT)

        event = sub.queue.get_nowait()
        assert event.event_type == EventType.STATE_CHANGED
        assert event.data == {
            "action": "connect",
            "progress": None,
            "connected": False,
            "committed": None,
        }

    def test_committed_state(
        self, event_manager: EventManager, settings: Settings, metadata: TrackerMetadata
    ) -> None:
        """A committed result is summarized."""
        sub = event_manager.subscribe()
        committed = CommittedResult(
            plan=object(),
            snapshot=settings.snapshot(),
            tracker_timestamp_ms=123,
            external_contributor_names={"trackplan/external/0": "Contractors"},
        )

        event_manager.on_state_changed(
            OrchestratorState(progress=None, metadata=metadata, committed=committed),
            Action.NOTHING,
        )

        data = sub.queue.get_nowait().data
        assert data["action"] == "nothing"
        assert data["connected"] is True
        assert data["committed"] == {
            "tracker_timestamp_ms": 123,
            "external_contributors": {"trackplan/external/0": "Contractors"},
            "num_contributors": 2,
        }
        json.dumps(data)

    def test_heartbeat(self, event_manager: EventManager) -> None:
        """Heartbeat events carry a timestamp."""
        event = event_manager.create_heartbeat_event()

        assert event.event_type == EventType.HEARTBEAT
        assert "timestamp" in event.data
