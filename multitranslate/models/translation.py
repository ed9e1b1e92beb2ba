"""Models describing translations, multi-step runs and their progress."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
    """Lifecycle of a single translation step."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Overall state of a multi-step run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class LanguageInfo(BaseModel):
    """Candidate intermediate language loaded from the language catalog."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="BCP-47 style language code")
    name: str = Field(default="", description="English language name")
    native_name: str = Field(
        default="", alias="nativeName", description="Language name in the language itself"
    )
    countries: List[str] = Field(default_factory=list)
    is_official: bool = Field(default=False, alias="isOfficial")


class TranslationRequest(BaseModel):
    """Request payload for a single round-trip translation."""

    text: str = Field(..., description="Text to translate")


class TranslationResponse(BaseModel):
    """Result of a single round-trip translation."""

    original_text: str
    intermediate_text: str
    intermediate_language: str
    final_text: str


class MultiTranslationRequest(BaseModel):
    """Request payload for starting a chained multi-step run."""

    text: str = Field(..., description="Text fed into the first step")
    repeat_count: int | None = Field(
        default=None,
        description="Number of chained round trips; the configured default is used when omitted",
    )


class TranslationStepStatus(BaseModel):
    """Presentation view of a single step within a run."""

    id: int = Field(..., ge=1, description="1-based position of the step in the run")
    input_text: str
    intermediate_text: str = ""
    intermediate_language: str = ""
    final_text: str = ""
    status: StepStatus = StepStatus.PENDING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None


class RunSnapshot(BaseModel):
    """Point-in-time copy of the active run."""

    generation: int = Field(..., description="Run sequence number, bumped on every initialize/reset")
    status: RunStatus
    steps: List[TranslationStepStatus] = Field(default_factory=list)
    current_index: int | None = Field(
        default=None, description="0-based index of the executing step"
    )
    current_step: int | None = Field(
        default=None, description="1-based id of the executing step"
    )
    repeat_count: int = 0
    original_text: str | None = None
    final_text: str | None = Field(
        default=None, description="Output of the last step, set only once the run completed"
    )
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    error: str | None = None
    failed_step: int | None = Field(
        default=None, description="1-based id of the step that failed"
    )
    updated_at: datetime


__all__ = (
    "LanguageInfo",
    "MultiTranslationRequest",
    "RunSnapshot",
    "RunStatus",
    "StepStatus",
    "TranslationRequest",
    "TranslationResponse",
    "TranslationStepStatus",
)
