"""Custom exceptions for translation gateways and providers."""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base exception for translation gateway failures."""


class ProviderConfigurationError(GatewayError):
    """Raised when a provider is not correctly configured for use."""


class TranslationProviderError(GatewayError):
    """Raised when a provider encounters a request/response issue."""


__all__ = (
    "GatewayError",
    "ProviderConfigurationError",
    "TranslationProviderError",
)
