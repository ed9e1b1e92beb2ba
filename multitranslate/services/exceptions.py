"""Exceptions raised by the multi-step translation services."""

from __future__ import annotations


class OrchestrationError(Exception):
    """Base exception for orchestration failures."""


class InvalidInputError(OrchestrationError):
    """Raised for blank text or a repeat count outside the configured bounds."""


class InvalidStateError(OrchestrationError):
    """Raised when a step transition would violate the run's ordering."""


class StaleGenerationError(OrchestrationError):
    """Raised when a mutation targets a run that has since been replaced.

    Only the orchestrator sees this; it discards the mutation.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Run generation {expected} superseded by {actual}")
        self.expected = expected
        self.actual = actual


class GatewayFailureError(OrchestrationError):
    """Raised when a step's gateway call fails; terminal for the run."""

    def __init__(self, step_id: int, reason: str) -> None:
        super().__init__(f"Translation step {step_id} failed: {reason}")
        self.step_id = step_id
        self.reason = reason


__all__ = (
    "GatewayFailureError",
    "InvalidInputError",
    "InvalidStateError",
    "OrchestrationError",
    "StaleGenerationError",
)
