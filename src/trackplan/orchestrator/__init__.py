"""Orchestrator package - Wires the action state machine to the pipeline."""

from trackplan.orchestrator.models import OrchestratorState
from trackplan.orchestrator.orchestrator import Orchestrator, StateListener

__all__ = [
    "Orchestrator",
    "OrchestratorState",
    "StateListener",
]
