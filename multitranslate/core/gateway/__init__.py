"""Translation gateway adapters and exports."""

from __future__ import annotations

from .exceptions import GatewayError, ProviderConfigurationError, TranslationProviderError
from .languages import LanguageCatalog
from .service import RemoteTranslationGateway, RoundTripTranslator, build_translation_gateway
from .types import RoundTripResult, TranslationGateway, TranslationProvider

__all__ = (
    "GatewayError",
    "LanguageCatalog",
    "ProviderConfigurationError",
    "RemoteTranslationGateway",
    "RoundTripResult",
    "RoundTripTranslator",
    "TranslationGateway",
    "TranslationProvider",
    "TranslationProviderError",
    "build_translation_gateway",
)
