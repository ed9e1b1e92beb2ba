"""Deterministic offline provider used in development and tests."""

from __future__ import annotations

_FIXED_PHRASES = {
    "en": "Hello world",
    "es": "Hola mundo",
    "fr": "Bonjour le monde",
    "de": "Hallo Welt",
    "ja": "こんにちは世界",
}


class MockTranslationClient:
    """Returns canned phrases instead of calling a remote service."""

    name = "mock"

    async def translate(self, text: str, target_language: str) -> str:
        phrase = _FIXED_PHRASES.get(target_language)
        if phrase is not None:
            return phrase
        return f"Translated to {target_language}: {text}"

    async def aclose(self) -> None:
        return None


__all__ = ("MockTranslationClient",)
