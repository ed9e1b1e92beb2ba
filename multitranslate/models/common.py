"""Response envelope and error codes shared by every route."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Machine readable failure categories reported to API clients."""

    INVALID_INPUT = "invalid_input"
    TRANSLATION_ERROR = "translation_error"
    ORCHESTRATION_ERROR = "orchestration_error"


class ErrorDetail(BaseModel):
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = Field(
        default=None, description="Bounds or step context for the failure"
    )


class ResponseEnvelope(BaseModel, Generic[T]):
    """Every endpoint answers with ``success`` plus either ``data`` or ``error``."""

    success: bool = True
    data: T | None = None
    error: ErrorDetail | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success_payload(cls, data: T | None = None) -> "ResponseEnvelope[T]":
        return cls(success=True, data=data)

    @classmethod
    def error_payload(
        cls,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "ResponseEnvelope[Any]":
        return cls(success=False, error=ErrorDetail(code=code, message=message, details=details))

    @classmethod
    def from_error(
        cls,
        code: ErrorCode,
        error: BaseException,
        *,
        prefix: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "ResponseEnvelope[Any]":
        """Build an error envelope whose message is taken from *error*."""

        message = str(error) or type(error).__name__
        if prefix:
            message = f"{prefix}: {message}"
        return cls.error_payload(code, message, details)


__all__ = ["ErrorCode", "ErrorDetail", "ResponseEnvelope"]
