"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from trackplan.planner import MergeFailure, PipelineRunner
from trackplan.settings import ExternalContributor, InternalContributor, Settings
from trackplan.tracker import TrackerMetadata

BASE_URL = "https://youtrack.example.com/"
RECONSTRUCTED_AT_MS = 1_700_000_000_000


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@dataclass
class FakeIssue:
    """Issue as handed to the splittable predicate."""

    id: str
    custom_fields: dict[str, str] = field(default_factory=dict)


@dataclass
class FakePlan:
    """Minimal project plan: issues plus an optional merged schedule."""

    issues: list[Any] = field(default_factory=list)
    schedule: Any = None


class FakeReconstructor:
    """Deterministic stand-in for the plan reconstruction."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.progress_steps: tuple[float, ...] = (0.25, 1.0)
        self.error: Exception | None = None
        self.plan = FakePlan(issues=[FakeIssue("1-1"), FakeIssue("1-2")])

    async def reconstruct(self, base_url: str, config: Any, on_progress: Any) -> FakePlan:
        self.calls.append((base_url, config))
        for fraction in self.progress_steps:
            on_progress(fraction)
        if self.error is not None:
            raise self.error
        return self.plan


class FakeScheduler:
    """Deterministic stand-in for the scheduling engine."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[Any], Any]] = []
        self.error: Exception | None = None

    async def schedule(self, issues: Any, options: Any) -> dict[str, Any]:
        self.calls.append((list(issues), options))
        if self.error is not None:
            raise self.error
        return {"contributors": [c.id for c in options.contributors]}


class FakeMerger:
    """Deterministic stand-in for merging a schedule into a plan."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any, int]] = []
        self.failure: MergeFailure | None = None

    def merge(self, plan: FakePlan, schedule: Any, start_time_ms: int) -> Any:
        self.calls.append((plan, schedule, start_time_ms))
        if self.failure is not None:
            return self.failure
        return FakePlan(issues=plan.issues, schedule=schedule)


@pytest.fixture
def reconstructor() -> FakeReconstructor:
    return FakeReconstructor()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def merger() -> FakeMerger:
    return FakeMerger()


@pytest.fixture
def runner(
    reconstructor: FakeReconstructor, scheduler: FakeScheduler, merger: FakeMerger
) -> PipelineRunner:
    """Create a PipelineRunner with fake collaborators and a fixed clock."""
    return PipelineRunner(
        reconstructor=reconstructor,
        scheduler=scheduler,
        merger=merger,
        clock=lambda: RECONSTRUCTED_AT_MS,
    )


@pytest.fixture
def metadata() -> TrackerMetadata:
    """YouTrack metadata with a 5 x 8 hour work week."""
    return TrackerMetadata(
        base_url=BASE_URL,
        minutes_per_work_week=2400,
        users={"1-1": "Alice", "1-2": "Bob"},
    )


@pytest.fixture
def connector(metadata: TrackerMetadata) -> MagicMock:
    """Create a mock TrackerConnector."""
    connector = MagicMock()
    connector.connect = AsyncMock(return_value=None)
    connector.fetch_metadata = AsyncMock(return_value=metadata)
    return connector


@pytest.fixture
def alerts() -> MagicMock:
    """Create a mock AlertReporter."""
    return MagicMock()


@pytest.fixture
def settings() -> Settings:
    """Create sample settings with one internal and one external contributor."""
    return Settings(
        name="Roadmap",
        base_url=BASE_URL,
        service_id="0-0-0-0-0",
        state_field_id="92-1",
        inactive_state_ids=["95-1", "95-0"],
        remaining_effort_field_id="92-3",
        remaining_wait_field_id="92-4",
        assignee_field_id="92-2",
        type_field_id="92-5",
        splittable_type_ids=["96-1"],
        depends_link_type_id="102-1",
        does_inward_depend_on_outward=False,
        saved_query_id="108-1",
        overlay_saved_query_id="",
        contributors=[
            InternalContributor(id="1-1", hours_per_week=10),
            ExternalContributor(name="Contractors", num_members=3, hours_per_week=20),
        ],
    )
