"""Common types for translation gateways."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class RoundTripResult:
    """Outcome of a single round trip through an intermediate language."""

    original_text: str
    intermediate_text: str
    intermediate_language: str
    final_text: str


@runtime_checkable
class TranslationGateway(Protocol):
    """Anything able to perform a full round-trip translation."""

    async def translate(self, text: str) -> RoundTripResult:
        ...


@runtime_checkable
class TranslationProvider(Protocol):
    """A backend that translates text into a single target language."""

    async def translate(self, text: str, target_language: str) -> str:
        ...

    async def aclose(self) -> None:
        ...


__all__ = (
    "RoundTripResult",
    "TranslationGateway",
    "TranslationProvider",
)
