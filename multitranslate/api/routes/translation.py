"""API endpoints for single round-trip translations and the language catalog."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ...core.gateway import GatewayError, LanguageCatalog, RoundTripTranslator
from ...core.settings import Settings, get_settings
from ...models.common import ErrorCode, ResponseEnvelope
from ...models.translation import LanguageInfo, TranslationRequest, TranslationResponse
from ...services.orchestration import MultiStepOrchestrator, get_orchestrator

router = APIRouter(prefix="/api", tags=["translation"])

logger = logging.getLogger(__name__)


@router.post(
    "/translate",
    response_model=ResponseEnvelope[TranslationResponse],
    summary="Round-trip a text through a random intermediate language",
)
async def translate(
    request: TranslationRequest,
    orchestrator: MultiStepOrchestrator = Depends(get_orchestrator),
) -> ResponseEnvelope[TranslationResponse]:
    """Translate into a random language and back into the target language."""

    if not request.text.strip():
        return ResponseEnvelope.error_payload(ErrorCode.INVALID_INPUT, "Input text must not be blank")

    try:
        result = await orchestrator.gateway.translate(request.text)
    except GatewayError as exc:
        logger.warning("Single translation failed: %s", exc)
        return ResponseEnvelope.from_error(ErrorCode.TRANSLATION_ERROR, exc, prefix="Translation failed")

    payload = TranslationResponse(
        original_text=result.original_text,
        intermediate_text=result.intermediate_text,
        intermediate_language=result.intermediate_language,
        final_text=result.final_text,
    )
    return ResponseEnvelope.success_payload(payload)


@router.get(
    "/languages",
    response_model=ResponseEnvelope[list[LanguageInfo]],
    summary="List candidate intermediate languages",
)
async def list_languages(
    orchestrator: MultiStepOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> ResponseEnvelope[list[LanguageInfo]]:
    """Return the languages a round trip may pass through.

    A local gateway answers from the catalog it draws from. A remote gateway
    owns its own catalog, so the configured languages file is reported instead.
    """

    gateway = orchestrator.gateway
    if isinstance(gateway, RoundTripTranslator):
        catalog = gateway.catalog
    else:
        catalog = LanguageCatalog.from_file(settings.languages_file)
    return ResponseEnvelope.success_payload(catalog.languages)
