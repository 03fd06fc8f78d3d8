"""Event manager for Server-Sent Events (SSE) and user-facing alerts."""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from trackplan.orchestrator import OrchestratorState
    from trackplan.planner import Action, CommittedResult

logger = logging.getLogger(__name__)

MAX_RECENT_ALERTS = 20


class EventType(str, Enum):
    """Types of events that can be emitted."""

    STATE_CHANGED = "state_changed"
    ALERT = "alert"
    HEARTBEAT = "heartbeat"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class Event:
    """An event to be sent via SSE."""

    event_type: EventType
    data: dict[str, Any]

    def to_sse(self) -> str:
        """Convert to SSE format."""
        return f"event: {self.event_type.value}\ndata: {json.dumps(self.data)}\n\n"


@dataclass(frozen=True)
class Alert:
    """A failed operation, as shown to the user."""

    title: str
    message: str
    timestamp: str


@dataclass
class Subscriber:
    """A subscriber to the event stream."""

    id: str
    queue: asyncio.Queue[Event]

    @classmethod
    def create(cls) -> Subscriber:
        """Create a new subscriber."""
        return cls(id=str(uuid4()), queue=asyncio.Queue())


def committed_summary(committed: CommittedResult | None) -> dict[str, Any] | None:
    """Summarize a committed result for clients."""
    if committed is None:
        return None
    return {
        "tracker_timestamp_ms": committed.tracker_timestamp_ms,
        "external_contributors": dict(committed.external_contributor_names),
        "num_contributors": len(committed.snapshot.contributors),
    }


@dataclass
class EventManager:
    """Manager for SSE events and alerts."""

    _subscribers: dict[str, Subscriber] = field(default_factory=dict)
    _alerts: deque[Alert] = field(default_factory=lambda: deque(maxlen=MAX_RECENT_ALERTS))
    _heartbeat_interval: int = 30  # seconds

    def subscribe(self) -> Subscriber:
        """Subscribe a client to events.

        Returns:
            Subscriber instance for receiving events.
        """
        subscriber = Subscriber.create()
        self._subscribers[subscriber.id] = subscriber
        return subscriber

    def unsubscribe(self, subscriber_id: str) -> None:
        """Unsubscribe a client from events.

        Args:
            subscriber_id: ID of the subscriber to remove.
        """
        self._subscribers.pop(subscriber_id, None)

    def emit_sync(self, event: Event) -> None:
        """Emit an event to all subscribers without awaiting.

        Orchestrator listeners are synchronous, so all events go through here.

        Args:
            event: Event to emit.
        """
        for subscriber in self._subscribers.values():
            subscriber.queue.put_nowait(event)

    @property
    def subscriber_count(self) -> int:
        """Get the number of active subscribers."""
        return len(self._subscribers)

    @property
    def recent_alerts(self) -> list[Alert]:
        """Alerts reported so far, oldest first."""
        return list(self._alerts)

    def alert(self, title: str, error: BaseException) -> None:
        """Record an alert and emit an alert event."""
        alert = Alert(
            title=title,
            message=str(error) or type(error).__name__,
            timestamp=_timestamp(),
        )
        self._alerts.append(alert)
        logger.warning("Alert: %s: %s", alert.title, alert.message)
        self.emit_sync(
            Event(
                event_type=EventType.ALERT,
                data={
                    "title": alert.title,
                    "message": alert.message,
                    "timestamp": alert.timestamp,
                },
            )
        )

    def on_state_changed(self, state: OrchestratorState, action: Action) -> None:
        """Emit a state_changed event. Registered as orchestrator listener."""
        self.emit_sync(
            Event(
                event_type=EventType.STATE_CHANGED,
                data={
                    "action": action.value,
                    "progress": state.progress,
                    "connected": state.metadata is not None,
                    "committed": committed_summary(state.committed),
                },
            )
        )

    def create_heartbeat_event(self) -> Event:
        """Create a heartbeat event."""
        return Event(
            event_type=EventType.HEARTBEAT,
            data={"timestamp": _timestamp()},
        )
