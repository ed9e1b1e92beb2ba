"""Google Cloud Translation (v2 REST) provider adapter."""

from __future__ import annotations

import html

import httpx

from ..exceptions import ProviderConfigurationError, TranslationProviderError
from .base import BaseHTTPTranslationClient


class GoogleTranslateClient(BaseHTTPTranslationClient):
    """Adapter for the Cloud Translation basic edition API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://translation.googleapis.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ProviderConfigurationError("Google Translate API key is not configured")
        self._api_key = api_key
        super().__init__(
            "google",
            base_url=base_url,
            timeout=timeout,
            default_headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def translate(self, text: str, target_language: str) -> str:
        if not target_language or not target_language.strip():
            raise TranslationProviderError("Target language code is required")

        data = await self._post_json(
            "/language/translate/v2",
            {"q": [text], "target": target_language.strip(), "format": "text"},
            params={"key": self._api_key},
        )
        translations = (data.get("data") or {}).get("translations") or []
        if not translations:
            raise TranslationProviderError("google returned an empty translation result")
        translated = translations[0].get("translatedText")
        if not isinstance(translated, str):
            raise TranslationProviderError("google response missing translatedText")
        return html.unescape(translated)


__all__ = ("GoogleTranslateClient",)
