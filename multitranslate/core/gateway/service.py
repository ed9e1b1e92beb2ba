"""Round-trip translation gateways."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import httpx

from ..settings import GatewayMode, Settings
from ..tracing import OperationTracer, get_tracer
from .exceptions import GatewayError, TranslationProviderError
from .languages import LanguageCatalog
from .providers.base import BaseHTTPTranslationClient
from .providers.google import GoogleTranslateClient
from .providers.mock import MockTranslationClient
from .types import RoundTripResult, TranslationGateway, TranslationProvider

logger = logging.getLogger(__name__)


class RoundTripTranslator:
    """Translate into a random intermediate language and back again."""

    def __init__(
        self,
        provider: TranslationProvider,
        catalog: LanguageCatalog,
        *,
        target_language: str = "ja",
        tracer: OperationTracer | None = None,
    ) -> None:
        self._provider = provider
        self._catalog = catalog
        self._target_language = target_language
        self._tracer = tracer or get_tracer()

    @property
    def catalog(self) -> LanguageCatalog:
        return self._catalog

    async def aclose(self) -> None:
        await self._provider.aclose()

    async def translate(self, text: str) -> RoundTripResult:
        handle = self._tracer.start_operation(
            "translation_request",
            {"original_text": text, "text_length": len(text)},
        )
        intermediate_language = self._catalog.choose()
        logger.debug("Selected intermediate language %s", intermediate_language)

        stage = "translation into the intermediate language failed"
        try:
            intermediate_text = await self._provider.translate(text, intermediate_language)
            stage = "translation back into the target language failed"
            final_text = await self._provider.translate(intermediate_text, self._target_language)
        except asyncio.CancelledError as exc:
            self._tracer.error_operation(handle, exc, "translation was cancelled")
            raise
        except GatewayError as exc:
            self._tracer.error_operation(handle, exc, stage)
            raise
        except Exception as exc:  # noqa: BLE001
            self._tracer.error_operation(handle, exc, stage)
            raise TranslationProviderError(f"{stage}: {exc}") from exc

        result = RoundTripResult(
            original_text=text,
            intermediate_text=intermediate_text,
            intermediate_language=intermediate_language,
            final_text=final_text,
        )
        self._tracer.complete_operation(
            handle,
            {
                "original_text": result.original_text,
                "intermediate_language": result.intermediate_language,
                "final_text": result.final_text,
            },
        )
        return result


class RemoteTranslationGateway(BaseHTTPTranslationClient):
    """Delegates round trips to another service's ``/api/translate`` endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            "remote",
            base_url=base_url,
            timeout=timeout,
            default_headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def translate(self, text: str) -> RoundTripResult:
        data = await self._post_json("/api/translate", {"text": text})
        return self._parse_response(data, text)

    @staticmethod
    def _parse_response(data: Mapping[str, Any], text: str) -> RoundTripResult:
        if "success" in data:
            if not data.get("success"):
                error = data.get("error") or {}
                message = error.get("message") if isinstance(error, dict) else None
                raise TranslationProviderError(message or "remote translation failed")
            data = data.get("data")
        if not isinstance(data, dict):
            raise TranslationProviderError("remote response carried no translation object")

        fields: dict[str, str] = {}
        for name in ("intermediate_text", "intermediate_language", "final_text"):
            value = data.get(name)
            if not isinstance(value, str):
                raise TranslationProviderError(f"remote response field {name!r} is missing or not text")
            fields[name] = value
        original_text = data.get("original_text")
        return RoundTripResult(
            original_text=original_text if isinstance(original_text, str) else text,
            **fields,
        )


def build_translation_gateway(
    settings: Settings,
    *,
    tracer: OperationTracer | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TranslationGateway:
    """Create the gateway selected by *settings*."""

    if settings.gateway_mode is GatewayMode.REMOTE:
        logger.info("Using remote translation gateway at %s", settings.remote_base_url)
        return RemoteTranslationGateway(
            settings.remote_base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    provider: TranslationProvider
    if settings.uses_mock_provider:
        logger.info("Using mock translation provider")
        provider = MockTranslationClient()
    else:
        logger.info("Using Google Translate provider")
        provider = GoogleTranslateClient(
            settings.google_api_key,
            base_url=settings.google_base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    return RoundTripTranslator(
        provider,
        LanguageCatalog.from_file(settings.languages_file),
        target_language=settings.target_language,
        tracer=tracer,
    )


__all__ = (
    "RemoteTranslationGateway",
    "RoundTripTranslator",
    "build_translation_gateway",
)
