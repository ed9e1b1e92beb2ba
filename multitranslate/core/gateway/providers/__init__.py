"""Provider specific translation adapters."""

from .google import GoogleTranslateClient
from .mock import MockTranslationClient

__all__ = ("GoogleTranslateClient", "MockTranslationClient")
