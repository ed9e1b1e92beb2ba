"""State store for the steps of the active multi-step translation run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock

from ..core.settings import Settings, get_settings
from ..models.translation import (
    RunSnapshot,
    RunStatus,
    StepStatus,
    TranslationStepStatus,
)
from .exceptions import InvalidInputError, InvalidStateError, StaleGenerationError

__all__ = ["StepStateStore"]

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _StepTracker:
    id: int
    input_text: str
    intermediate_text: str = ""
    intermediate_language: str = ""
    final_text: str = ""
    status: StepStatus = StepStatus.PENDING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None

    def as_model(self) -> TranslationStepStatus:
        return TranslationStepStatus(
            id=self.id,
            input_text=self.input_text,
            intermediate_text=self.intermediate_text,
            intermediate_language=self.intermediate_language,
            final_text=self.final_text,
            status=self.status,
            started_at=self.started_at,
            completed_at=self.completed_at,
            error=self.error,
        )


@dataclass
class _RunTracker:
    generation: int
    original_text: str | None = None
    steps: list[_StepTracker] = field(default_factory=list)
    status: RunStatus = RunStatus.IDLE
    current_index: int | None = None
    final_text: str | None = None
    error: str | None = None
    failed_index: int | None = None
    updated_at: datetime = field(default_factory=_now)

    def touch(self) -> None:
        self.updated_at = _now()

    def completed_count(self) -> int:
        return sum(1 for step in self.steps if step.status is StepStatus.COMPLETED)

    def progress(self) -> float:
        if not self.steps:
            return 0.0
        return self.completed_count() / len(self.steps)

    def as_model(self) -> RunSnapshot:
        return RunSnapshot(
            generation=self.generation,
            status=self.status,
            steps=[step.as_model() for step in self.steps],
            current_index=self.current_index,
            current_step=self.current_index + 1 if self.current_index is not None else None,
            repeat_count=len(self.steps),
            original_text=self.original_text,
            final_text=self.final_text if self.status is RunStatus.COMPLETED else None,
            progress=self.progress(),
            error=self.error,
            failed_step=self.failed_index + 1 if self.failed_index is not None else None,
            updated_at=self.updated_at,
        )


class StepStateStore:
    """Holds the active run and guards every transition of its steps.

    Mutations that belong to a run are tagged with that run's generation.
    ``initialize`` and ``reset`` bump the generation, so a late mutation from a
    replaced run raises :class:`StaleGenerationError` instead of being applied.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._lock = RLock()
        self._generation = 0
        self._run = _RunTracker(generation=0)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def status(self) -> RunStatus:
        with self._lock:
            return self._run.status

    def validate(self, text: str, count: int) -> None:
        """Raise :class:`InvalidInputError` unless a run could start with these arguments."""

        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Input text must not be blank")
        low, high = self._settings.min_repeat_count, self._settings.max_repeat_count
        if isinstance(count, bool) or not isinstance(count, int) or not low <= count <= high:
            raise InvalidInputError(f"Repeat count must be between {low} and {high}, got {count!r}")

    def initialize(self, text: str, count: int) -> int:
        """Replace the active run with *count* pending steps and return its generation."""

        self.validate(text, count)
        with self._lock:
            self._generation += 1
            self._run = _RunTracker(
                generation=self._generation,
                original_text=text,
                steps=[_StepTracker(id=index + 1, input_text=text) for index in range(count)],
            )
            logger.debug("Initialized run %s with %s step(s)", self._generation, count)
            return self._generation

    def reset(self) -> int:
        """Discard the active run, including one still in flight."""

        with self._lock:
            self._generation += 1
            self._run = _RunTracker(generation=self._generation)
            logger.debug("Reset run state to generation %s", self._generation)
            return self._generation

    def begin_step(self, index: int, generation: int) -> str:
        """Mark ``steps[index]`` as in progress and return the text it translates."""

        with self._lock:
            self._ensure_generation(generation)
            run = self._run
            if run.status not in {RunStatus.IDLE, RunStatus.RUNNING}:
                raise InvalidStateError(f"Cannot begin a step while the run is {run.status.value}")
            step = self._step(index)
            expected = run.completed_count()
            if index != expected or step.status is not StepStatus.PENDING:
                raise InvalidStateError(
                    f"Step {index + 1} cannot begin; next runnable step is {expected + 1}"
                )
            if index > 0:
                step.input_text = run.steps[index - 1].final_text
            step.status = StepStatus.IN_PROGRESS
            step.started_at = _now()
            run.status = RunStatus.RUNNING
            run.current_index = index
            run.touch()
            return step.input_text

    def complete_step(
        self,
        index: int,
        intermediate_text: str,
        intermediate_language: str,
        final_text: str,
        generation: int,
    ) -> None:
        with self._lock:
            self._ensure_generation(generation)
            step = self._in_progress_step(index)
            step.intermediate_text = intermediate_text
            step.intermediate_language = intermediate_language
            step.final_text = final_text
            step.status = StepStatus.COMPLETED
            step.completed_at = _now()
            if index + 1 < len(self._run.steps):
                self._run.steps[index + 1].input_text = final_text
            self._run.touch()

    def fail_step(self, index: int, reason: str, generation: int) -> None:
        with self._lock:
            self._ensure_generation(generation)
            step = self._in_progress_step(index)
            step.status = StepStatus.FAILED
            step.completed_at = _now()
            step.error = reason
            run = self._run
            run.status = RunStatus.FAILED
            run.error = reason
            run.failed_index = index
            run.current_index = None
            run.touch()

    def finish(self, generation: int) -> str:
        """Mark the run completed and return its final text."""

        with self._lock:
            self._ensure_generation(generation)
            run = self._run
            if run.status is not RunStatus.RUNNING or run.completed_count() != len(run.steps):
                raise InvalidStateError("Run cannot complete before every step has completed")
            run.status = RunStatus.COMPLETED
            run.final_text = run.steps[-1].final_text
            run.current_index = None
            run.touch()
            return run.final_text

    def step_input(self, index: int) -> str:
        with self._lock:
            return self._step(index).input_text

    def progress(self) -> float:
        with self._lock:
            return self._run.progress()

    def snapshot(self) -> RunSnapshot:
        with self._lock:
            return self._run.as_model()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_generation(self, generation: int) -> None:
        if generation != self._generation:
            raise StaleGenerationError(generation, self._generation)

    def _step(self, index: int) -> _StepTracker:
        if not 0 <= index < len(self._run.steps):
            raise InvalidStateError(f"Step index {index} is out of range")
        return self._run.steps[index]

    def _in_progress_step(self, index: int) -> _StepTracker:
        step = self._step(index)
        if step.status is not StepStatus.IN_PROGRESS:
            raise InvalidStateError(f"Step {index + 1} is {step.status.value}, not in progress")
        return step
