"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from trackplan.api.events import EventManager
from trackplan.orchestrator import Orchestrator
from trackplan.tracker import YouTrackClient

# Global Orchestrator instance (initialized on app startup)
_orchestrator: Orchestrator | None = None


def init_orchestrator(orchestrator: Orchestrator) -> None:
    """Initialize the global Orchestrator instance."""
    global _orchestrator  # noqa: PLW0603
    _orchestrator = orchestrator


def close_orchestrator() -> None:
    """Close the global Orchestrator instance."""
    global _orchestrator  # noqa: PLW0603
    _orchestrator = None


def get_orchestrator() -> Generator[Orchestrator, None, None]:
    """Dependency that provides the Orchestrator instance."""
    if _orchestrator is None:
        raise RuntimeError("Orchestrator not initialized. Call init_orchestrator() first.")
    yield _orchestrator


# Type alias for dependency injection
OrchestratorDep = Annotated[Orchestrator, Depends(get_orchestrator)]

# Global EventManager instance
_event_manager: EventManager | None = None


def init_event_manager(event_manager: EventManager) -> None:
    """Initialize the global EventManager instance."""
    global _event_manager  # noqa: PLW0603
    _event_manager = event_manager


def close_event_manager() -> None:
    """Close the global EventManager instance."""
    global _event_manager  # noqa: PLW0603
    _event_manager = None


def get_event_manager() -> Generator[EventManager, None, None]:
    """Dependency that provides the EventManager instance."""
    if _event_manager is None:
        raise RuntimeError("EventManager not initialized. Call init_event_manager() first.")
    yield _event_manager


# Type alias for dependency injection
EventManagerDep = Annotated[EventManager, Depends(get_event_manager)]

# Global YouTrackClient instance
_tracker: YouTrackClient | None = None


def init_tracker(tracker: YouTrackClient) -> None:
    """Initialize the global YouTrackClient instance."""
    global _tracker  # noqa: PLW0603
    _tracker = tracker


def close_tracker() -> None:
    """Close the global YouTrackClient instance."""
    global _tracker  # noqa: PLW0603
    _tracker = None


def get_tracker() -> Generator[YouTrackClient, None, None]:
    """Dependency that provides the YouTrackClient instance."""
    if _tracker is None:
        raise RuntimeError("YouTrackClient not initialized. Call init_tracker() first.")
    yield _tracker


# Type alias for dependency injection
TrackerDep = Annotated[YouTrackClient, Depends(get_tracker)]
