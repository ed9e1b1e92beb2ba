"""Base implementation for HTTP backed translation clients."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..exceptions import TranslationProviderError

logger = logging.getLogger(__name__)


class BaseHTTPTranslationClient:
    """Shared HTTP transport and response handling for translation backends."""

    def __init__(
        self,
        name: str,
        *,
        base_url: str,
        timeout: float,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._name = name
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=default_headers or {},
            transport=transport,
        )

    @property
    def name(self) -> str:
        return self._name

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post_json(
        self,
        endpoint: str,
        payload: Mapping[str, Any],
        **request_kwargs: Any,
    ) -> Mapping[str, Any]:
        try:
            response = await self._client.post(endpoint, json=payload, **request_kwargs)
        except httpx.TimeoutException as exc:
            raise TranslationProviderError(f"{self._name} request timed out") from exc
        except httpx.RequestError as exc:
            raise TranslationProviderError(f"{self._name} request transport error") from exc

        if response.status_code >= 400:
            logger.debug(
                "Translation backend %s responded with error %s: %s",
                self._name,
                response.status_code,
                response.text,
            )
            raise TranslationProviderError(
                f"{self._name} request failed with status {response.status_code}"
            )

        try:
            parsed = response.json()
        except ValueError as exc:
            raise TranslationProviderError(f"{self._name} returned invalid JSON") from exc
        if not isinstance(parsed, dict):
            raise TranslationProviderError(f"{self._name} returned an unexpected payload")
        return parsed


__all__ = ("BaseHTTPTranslationClient",)
