"""Structured start/complete/error telemetry for named operations."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Mapping

__all__ = ("OperationHandle", "OperationTracer", "get_tracer")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OperationHandle:
    """Opaque token returned by :meth:`OperationTracer.start_operation`."""

    operation: str
    operation_id: str
    started_at: float
    input: Mapping[str, Any] = field(default_factory=dict)
    closed: bool = False

    def elapsed(self) -> float:
        return time.perf_counter() - self.started_at


class OperationTracer:
    """Records the lifecycle of an operation as structured log events.

    Every handle must be closed exactly once, either through
    :meth:`complete_operation` or :meth:`error_operation`. Closing a handle a
    second time is ignored and reported as a warning.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def start_operation(self, name: str, payload: Mapping[str, Any] | None = None) -> OperationHandle:
        handle = OperationHandle(
            operation=name,
            operation_id=uuid.uuid4().hex[:9],
            started_at=time.perf_counter(),
            input=dict(payload or {}),
        )
        self._logger.info(
            "operation.start",
            extra={
                "operation": handle.operation,
                "operation_id": handle.operation_id,
                "input_payload": handle.input,
            },
        )
        return handle

    def complete_operation(
        self, handle: OperationHandle, payload: Mapping[str, Any] | None = None
    ) -> None:
        if not self._close(handle, "complete"):
            return
        self._logger.info(
            "operation.complete",
            extra={
                "operation": handle.operation,
                "operation_id": handle.operation_id,
                "duration": handle.elapsed(),
                "input_payload": handle.input,
                "output_payload": dict(payload or {}),
            },
        )

    def error_operation(
        self, handle: OperationHandle, error: BaseException, resolution: str | None = None
    ) -> None:
        if not self._close(handle, "error"):
            return
        self._logger.error(
            "operation.error",
            extra={
                "operation": handle.operation,
                "operation_id": handle.operation_id,
                "duration": handle.elapsed(),
                "error": str(error),
                "error_type": type(error).__name__,
                "resolution": resolution,
                "input_payload": handle.input,
            },
        )

    def _close(self, handle: OperationHandle, action: str) -> bool:
        if handle.closed:
            self._logger.warning(
                "operation.already_closed",
                extra={
                    "operation": handle.operation,
                    "operation_id": handle.operation_id,
                    "attempted": action,
                },
            )
            return False
        handle.closed = True
        return True


@lru_cache()
def get_tracer() -> OperationTracer:
    """Return a cached instance of :class:`OperationTracer`."""

    return OperationTracer()
