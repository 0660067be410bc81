"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Fake OpenRouter clients (no network, scripted per role / per image)
- A fresh AIMonitor per test
- In-memory history storage
- Test client (FastAPI TestClient) with every service overridden
"""

import asyncio
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from explainer.ai.monitoring import AIMonitor
from explainer.ai.pipeline import ExplainPipeline, PreviewService, get_pipeline, get_preview_service
from explainer.ai.prompts import PREVIEW_PROMPT
from explainer.ai.providers import AIResponse, ProviderType, TokenUsage
from explainer.ai.styles import PRESETS, StyleResolver
from explainer.export import CanvasExporter, CapturedCanvas, DownloadStore
from explainer.main import app
from explainer.routers.export import get_download_store, get_exporter
from explainer.services.history import HistoryStore, MemoryLocalStorage, get_history_store


# ---------------------------------------------------------------------------
# SAMPLE DATA
# ---------------------------------------------------------------------------

SAMPLE_PLAN = """# How Volcanoes Work

## Overview
Volcanoes are openings in the crust where magma escapes.

## Image Prompts
**img-1:** A cross-section of a stratovolcano at dusk, glowing magma chamber.
**img-2:** Aerial photo of a lava flow meeting the ocean, steam plumes.
"""

SAMPLE_HTML = """<!DOCTYPE html>
<html><head><style>body { background: #0f172a; }</style></head>
<body>
<h1>How Volcanoes Work</h1>
<svg viewBox="0 0 10 10"><circle r="4" cx="5" cy="5"/></svg>
<img data-image-id="img-1" alt="Cross-section">
<img data-image-id="img-2" alt="Lava flow">
</body></html>"""

IMG_1_URL = "data:image/png;base64,AAAA"
IMG_2_URL = "data:image/png;base64,BBBB"


def ok_response(content: str, model: str = "test-model") -> AIResponse:
    return AIResponse(
        content=content,
        provider=ProviderType.OPENROUTER,
        model=model,
        usage=TokenUsage(prompt_tokens=10, completion_tokens=20),
        latency_ms=5.0,
    )


def error_response(error: str, status_code: Optional[int] = None) -> AIResponse:
    return AIResponse(
        content="",
        provider=ProviderType.OPENROUTER,
        model="test-model",
        success=False,
        error=error,
        status_code=status_code,
    )


# ---------------------------------------------------------------------------
# FAKE CLIENTS
# ---------------------------------------------------------------------------

def role_of(system_prompt: str) -> str:
    """Which pipeline role a system prompt belongs to."""
    if system_prompt == PREVIEW_PROMPT:
        return "preview"
    if system_prompt.startswith("You are an expert researcher"):
        return "plan"
    if "ONE compact" in system_prompt:
        return "short"
    return "render"


class FakeCompletionClient:
    """
    Scripted stand-in for CompletionClient.

    Set ``responses``, ``delays`` (seconds) or ``failures`` per role:
    "plan", "render", "short", "preview".
    """

    def __init__(self):
        self.responses: Dict[str, str] = {
            "plan": SAMPLE_PLAN,
            "render": f"```html\n{SAMPLE_HTML}\n```",
            "short": SAMPLE_HTML,
            "preview": "Volcanoes vent molten rock from deep below the crust.",
        }
        self.delays: Dict[str, float] = {}
        self.failures: Dict[str, AIResponse] = {}
        self.calls: List[Dict[str, Any]] = []

    def calls_for(self, role: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["role"] == role]

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float = 0.6,
        max_tokens: int = 24576,
        reasoning_effort=None,
        model_override: Optional[str] = None,
    ) -> AIResponse:
        role = role_of(system_prompt)
        self.calls.append({
            "role": role,
            "system_prompt": system_prompt,
            "user_message": user_message,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "reasoning_effort": reasoning_effort,
            "model": model_override,
        })
        if role in self.delays:
            await asyncio.sleep(self.delays[role])
        if role in self.failures:
            return self.failures[role]
        return ok_response(self.responses[role], model=model_override or "test-model")


class FakeImageClient:
    """Scripted stand-in for ImageClient, keyed by image id."""

    def __init__(self):
        self.responses: Dict[str, str] = {"img-1": IMG_1_URL, "img-2": IMG_2_URL}
        self.delays: Dict[str, float] = {}
        self.failures: Dict[str, AIResponse] = {}
        self.calls: List[Dict[str, str]] = []
        self.cancelled: List[str] = []

    async def generate(self, prompt: str, image_id: str) -> AIResponse:
        self.calls.append({"prompt": prompt, "image_id": image_id})
        try:
            if image_id in self.delays:
                await asyncio.sleep(self.delays[image_id])
        except asyncio.CancelledError:
            self.cancelled.append(image_id)
            raise
        if image_id in self.failures:
            return self.failures[image_id]
        return AIResponse(
            content=self.responses[image_id],
            provider=ProviderType.OPENROUTER_IMAGE,
            model="image-model",
            metadata={"image_id": image_id},
        )


class FakeCanvasRenderer:
    """Returns a solid bitmap instead of launching Chromium."""

    def __init__(self, width: int = 1200, height: int = 800, scale: int = 2):
        self.size = (width * scale, height * scale)
        self.scale = scale
        self.captured: List[str] = []
        self.error: Optional[Exception] = None

    async def capture(self, html: str) -> CapturedCanvas:
        self.captured.append(html)
        if self.error is not None:
            raise self.error
        return CapturedCanvas(
            image=Image.new("RGB", self.size, (15, 23, 42)),
            background=(15, 23, 42),
            scale=self.scale,
        )


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_completion() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def fake_images() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def monitor() -> AIMonitor:
    return AIMonitor()


@pytest.fixture
def styles() -> StyleResolver:
    """Deterministic resolver: a one-preset catalog."""
    return StyleResolver(catalog=[PRESETS[0]])


@pytest.fixture
def pipeline(fake_completion, fake_images, styles, monitor) -> ExplainPipeline:
    return ExplainPipeline(
        completion=fake_completion,
        images=fake_images,
        styles=styles,
        monitor=monitor,
        plan_model="fast-model",
        render_model="main-model",
        image_timeout_s=1.0,
    )


@pytest.fixture
def history_store() -> HistoryStore:
    return HistoryStore(MemoryLocalStorage(), key="test-history", max_bytes=4_500_000)


@pytest.fixture
def fake_renderer() -> FakeCanvasRenderer:
    return FakeCanvasRenderer()


@pytest.fixture
def downloads() -> DownloadStore:
    return DownloadStore(ttl_seconds=60)


@pytest.fixture
def client(
    pipeline,
    fake_completion,
    monitor,
    history_store,
    fake_renderer,
    downloads,
) -> Generator[TestClient, None, None]:
    """
    Create a test client with every service swapped for a fake.

    Overrides are cleared after each test.
    """
    exporter = CanvasExporter(renderer=fake_renderer, downloads=downloads)
    preview = PreviewService(completion=fake_completion, monitor=monitor, model="fast-model")

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_preview_service] = lambda: preview
    app.dependency_overrides[get_history_store] = lambda: history_store
    app.dependency_overrides[get_exporter] = lambda: exporter
    app.dependency_overrides[get_download_store] = lambda: downloads

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
