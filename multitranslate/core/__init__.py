"""Core application services and configuration."""

from .settings import GatewayMode, Settings, get_settings
from .tracing import OperationHandle, OperationTracer, get_tracer

__all__ = (
    "GatewayMode",
    "Settings",
    "get_settings",
    "OperationHandle",
    "OperationTracer",
    "get_tracer",
)
