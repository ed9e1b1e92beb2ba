"""Services coordinating multi-step translation runs."""

from .exceptions import (
    GatewayFailureError,
    InvalidInputError,
    InvalidStateError,
    OrchestrationError,
    StaleGenerationError,
)
from .orchestration import MultiStepOrchestrator, RunContext, get_orchestrator
from .steps import StepStateStore

__all__ = (
    "GatewayFailureError",
    "InvalidInputError",
    "InvalidStateError",
    "MultiStepOrchestrator",
    "OrchestrationError",
    "RunContext",
    "StaleGenerationError",
    "StepStateStore",
    "get_orchestrator",
)
