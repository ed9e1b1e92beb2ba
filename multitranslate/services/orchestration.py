"""Orchestration service chaining round-trip translations into a multi-step run."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache

from ..core.gateway import TranslationGateway, build_translation_gateway
from ..core.settings import Settings, get_settings
from ..core.tracing import OperationHandle, OperationTracer, get_tracer
from ..models.translation import RunSnapshot
from .exceptions import (
    GatewayFailureError,
    InvalidInputError,
    InvalidStateError,
    OrchestrationError,
    StaleGenerationError,
)
from .steps import StepStateStore

__all__ = [
    "GatewayFailureError",
    "InvalidInputError",
    "InvalidStateError",
    "MultiStepOrchestrator",
    "OrchestrationError",
    "RunContext",
    "get_orchestrator",
]

logger = logging.getLogger(__name__)

RUN_OPERATION = "multi_translation_process"
STEP_OPERATION = "multi_translation_step"


@dataclass
class RunContext:
    """Everything :meth:`MultiStepOrchestrator.execute` needs to drive one run."""

    generation: int
    text: str
    count: int
    handle: OperationHandle


class _RunAbandoned(Exception):
    """The run's generation changed while it was suspended."""


class MultiStepOrchestrator:
    """Drives a run of chained translations to completion or first failure."""

    def __init__(
        self,
        gateway: TranslationGateway,
        store: StepStateStore | None = None,
        tracer: OperationTracer | None = None,
        *,
        settings: Settings | None = None,
        step_delay: float | None = None,
    ) -> None:
        self._settings = settings or (store.settings if store is not None else get_settings())
        self._gateway = gateway
        self._store = store or StepStateStore(self._settings)
        self._tracer = tracer or get_tracer()
        self._step_delay = self._settings.step_delay_seconds if step_delay is None else step_delay
        self._running_generation: int | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def store(self) -> StepStateStore:
        return self._store

    @property
    def gateway(self) -> TranslationGateway:
        return self._gateway

    @property
    def is_running(self) -> bool:
        return (
            self._running_generation is not None
            and self._running_generation == self._store.generation
        )

    def progress(self) -> float:
        return self._store.progress()

    def snapshot(self) -> RunSnapshot:
        return self._store.snapshot()

    def reset(self) -> RunSnapshot:
        generation = self._store.reset()
        logger.info("Multi-step run reset", extra={"generation": generation})
        return self._store.snapshot()

    def prepare(self, text: str, count: int) -> RunContext:
        """Validate the request, open the run's trace span and build its steps.

        Invalid input is rejected before any trace or state change happens.
        """

        self._store.validate(text, count)
        handle = self._tracer.start_operation(
            RUN_OPERATION,
            {"original_text": text, "text_length": len(text), "repeat_count": count},
        )
        generation = self._store.initialize(text, count)
        return RunContext(generation=generation, text=text, count=count, handle=handle)

    async def run(self, text: str, count: int) -> str | None:
        """Run *count* chained round trips over *text* and return the final text.

        Returns ``None`` when the run is reset or replaced before finishing.
        """

        return await self.execute(self.prepare(text, count))

    async def execute(self, context: RunContext) -> str | None:
        self._running_generation = context.generation
        try:
            return await self._drive(context)
        finally:
            if self._running_generation == context.generation:
                self._running_generation = None

    async def execute_in_background(self, context: RunContext) -> None:
        """Execute *context*, leaving a failure recorded in the store rather than raised."""

        try:
            await self.execute(context)
        except GatewayFailureError as exc:
            logger.warning(
                "Multi-step run %s failed at step %s: %s",
                context.generation,
                exc.step_id,
                exc.reason,
            )

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------
    async def _drive(self, context: RunContext) -> str | None:
        handle = context.handle
        current_text = context.text
        try:
            for index in range(context.count):
                current_text = await self._run_step(context, index)
                if index + 1 < context.count:
                    if self._step_delay > 0:
                        await asyncio.sleep(self._step_delay)
                    self._ensure_active(context)
            final_text = self._store.finish(context.generation)
        except (_RunAbandoned, StaleGenerationError):
            self._tracer.complete_operation(
                handle,
                {"abandoned": True, "last_text": current_text},
            )
            logger.info("Discarded superseded multi-step run %s", context.generation)
            return None
        except GatewayFailureError as exc:
            self._tracer.error_operation(handle, exc, "multi-step translation was aborted")
            raise
        except BaseException as exc:
            self._tracer.error_operation(handle, exc, "multi-step translation was interrupted")
            raise

        self._tracer.complete_operation(
            handle,
            {
                "total_steps": context.count,
                "final_text": final_text,
                "final_text_length": len(final_text),
            },
        )
        return final_text

    async def _run_step(self, context: RunContext, index: int) -> str:
        self._ensure_active(context)
        try:
            input_text = self._store.begin_step(index, context.generation)
        except StaleGenerationError as exc:
            raise _RunAbandoned() from exc

        step_id = index + 1
        step_handle = self._tracer.start_operation(
            STEP_OPERATION,
            {"step_id": step_id, "original_text": input_text, "text_length": len(input_text)},
        )

        try:
            result = await self._gateway.translate(input_text)
            if not result.final_text or not result.final_text.strip():
                raise GatewayFailureError(step_id, "translation gateway returned an empty result")
        except asyncio.CancelledError as exc:
            try:
                self._store.fail_step(index, "cancelled", context.generation)
            except StaleGenerationError:
                logger.debug("Cancelled step %s belongs to a superseded run", step_id)
            self._tracer.error_operation(step_handle, exc, "step was cancelled")
            raise
        except Exception as exc:  # noqa: BLE001
            if isinstance(exc, GatewayFailureError):
                failure = exc
            else:
                failure = GatewayFailureError(step_id, str(exc) or type(exc).__name__)
            try:
                self._store.fail_step(index, failure.reason, context.generation)
            except StaleGenerationError:
                self._tracer.error_operation(step_handle, exc, "run was superseded; failure discarded")
                raise _RunAbandoned() from exc
            self._tracer.error_operation(step_handle, exc, "step marked as failed")
            if failure is exc:
                raise
            raise failure from exc

        try:
            self._store.complete_step(
                index,
                result.intermediate_text,
                result.intermediate_language,
                result.final_text,
                context.generation,
            )
        except StaleGenerationError as exc:
            self._tracer.complete_operation(step_handle, {"step_id": step_id, "discarded": True})
            raise _RunAbandoned() from exc

        self._tracer.complete_operation(
            step_handle,
            {
                "step_id": step_id,
                "intermediate_language": result.intermediate_language,
                "intermediate_text_length": len(result.intermediate_text),
                "final_text_length": len(result.final_text),
            },
        )
        return result.final_text

    def _ensure_active(self, context: RunContext) -> None:
        if self._store.generation != context.generation:
            raise _RunAbandoned()


@lru_cache()
def get_orchestrator() -> MultiStepOrchestrator:
    """Return a cached orchestrator wired from application settings."""

    settings = get_settings()
    return MultiStepOrchestrator(
        build_translation_gateway(settings),
        StepStateStore(settings),
        get_tracer(),
        settings=settings,
    )
