"""Shared Pydantic models used across the application."""

from .common import ErrorCode, ErrorDetail, ResponseEnvelope
from .translation import (
    LanguageInfo,
    MultiTranslationRequest,
    RunSnapshot,
    RunStatus,
    StepStatus,
    TranslationRequest,
    TranslationResponse,
    TranslationStepStatus,
)

__all__ = (
    "ErrorCode",
    "ErrorDetail",
    "ResponseEnvelope",
    "LanguageInfo",
    "MultiTranslationRequest",
    "RunSnapshot",
    "RunStatus",
    "StepStatus",
    "TranslationRequest",
    "TranslationResponse",
    "TranslationStepStatus",
)
