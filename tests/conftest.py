from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

import multitranslate.core.settings as settings_module
import multitranslate.services.orchestration as orchestration_module
from multitranslate.core.gateway import RoundTripResult, TranslationProviderError
from multitranslate.core.settings import Settings
from multitranslate.core.tracing import OperationHandle, OperationTracer
from multitranslate.services.orchestration import MultiStepOrchestrator
from multitranslate.services.steps import StepStateStore


class RecordingTracer(OperationTracer):
    """Tracer that keeps every lifecycle call for later assertions."""

    def __init__(self) -> None:
        super().__init__(logging.getLogger("tests.tracer"))
        self.events: list[tuple[str, str, str, dict[str, Any]]] = []

    def start_operation(self, name, payload=None) -> OperationHandle:
        handle = super().start_operation(name, payload)
        self.events.append(("start", handle.operation, handle.operation_id, dict(handle.input)))
        return handle

    def complete_operation(self, handle, payload=None) -> None:
        self.events.append(("complete", handle.operation, handle.operation_id, dict(payload or {})))
        super().complete_operation(handle, payload)

    def error_operation(self, handle, error, resolution=None) -> None:
        self.events.append(
            ("error", handle.operation, handle.operation_id, {"error": str(error), "resolution": resolution})
        )
        super().error_operation(handle, error, resolution)

    def closures_by_id(self) -> dict[str, list[str]]:
        closures: dict[str, list[str]] = {}
        for kind, _, operation_id, _ in self.events:
            if kind == "start":
                closures.setdefault(operation_id, [])
            else:
                closures.setdefault(operation_id, []).append(kind)
        return closures

    def named(self, operation: str) -> list[tuple[str, str, str, dict[str, Any]]]:
        return [event for event in self.events if event[1] == operation]


class ScriptedGateway:
    """Gateway returning a fixed round trip, optionally failing on one call."""

    def __init__(
        self,
        intermediate_text: str = "Bonjour",
        intermediate_language: str = "fr",
        final_text: str | Callable[[str, int], str] = "こんにちは",
        *,
        fail_on_call: int | None = None,
    ) -> None:
        self.intermediate_text = intermediate_text
        self.intermediate_language = intermediate_language
        self.final_text = final_text
        self.fail_on_call = fail_on_call
        self.calls: list[str] = []

    async def translate(self, text: str) -> RoundTripResult:
        self.calls.append(text)
        call_number = len(self.calls)
        if self.fail_on_call == call_number:
            raise TranslationProviderError(f"service unavailable on call {call_number}")
        final = self.final_text(text, call_number) if callable(self.final_text) else self.final_text
        return RoundTripResult(
            original_text=text,
            intermediate_text=self.intermediate_text,
            intermediate_language=self.intermediate_language,
            final_text=final,
        )


class GatedGateway(ScriptedGateway):
    """Gateway that blocks every call until the test releases it."""

    def __init__(self, *, fail: bool = False) -> None:
        super().__init__()
        self.fail = fail
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def translate(self, text: str) -> RoundTripResult:
        self.started.set()
        await self.release.wait()
        if self.fail:
            self.calls.append(text)
            raise TranslationProviderError("late failure")
        return await super().translate(text)


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test", step_delay_seconds=0.0)  # type: ignore[call-arg]


@pytest.fixture()
def tracer() -> RecordingTracer:
    return RecordingTracer()


@pytest.fixture()
def store(settings: Settings) -> StepStateStore:
    return StepStateStore(settings)


@pytest.fixture()
def make_orchestrator(store: StepStateStore, tracer: RecordingTracer, settings: Settings):
    def factory(gateway, *, step_delay: float = 0.0) -> MultiStepOrchestrator:
        return MultiStepOrchestrator(
            gateway,
            store,
            tracer,
            settings=settings,
            step_delay=step_delay,
        )

    return factory


@pytest.fixture()
def languages_file(tmp_path: Path) -> Path:
    path = tmp_path / "languages.json"
    path.write_text(
        json.dumps(
            {
                "languages": [
                    {
                        "code": "fr",
                        "name": "French",
                        "nativeName": "Français",
                        "countries": ["FR", "BE"],
                        "isOfficial": True,
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def runtime_environment(monkeypatch: pytest.MonkeyPatch, languages_file: Path) -> None:
    monkeypatch.setenv("APP_ENVIRONMENT", "test")
    monkeypatch.setenv("APP_STEP_DELAY_SECONDS", "0")
    monkeypatch.setenv("APP_LANGUAGES_FILE", str(languages_file))
    monkeypatch.setenv("APP_GATEWAY_MODE", "local")


@pytest.fixture()
def client(runtime_environment: None):
    settings_module.get_settings.cache_clear()
    orchestration_module.get_orchestrator.cache_clear()

    from multitranslate.main import create_application

    application = create_application()

    with TestClient(application) as test_client:
        yield test_client

    application.dependency_overrides.clear()
    settings_module.get_settings.cache_clear()
    orchestration_module.get_orchestrator.cache_clear()


@pytest.fixture()
def scripted_gateway() -> type[ScriptedGateway]:
    return ScriptedGateway


@pytest.fixture()
def gated_gateway() -> type[GatedGateway]:
    return GatedGateway
