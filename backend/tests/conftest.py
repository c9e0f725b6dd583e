"""
Shared fixtures: fresh settings per test, a fake provider, and the app wired to it.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from banana_studio.core.config import get_settings
from banana_studio.main import create_app
from banana_studio.services import provider as provider_module
from banana_studio.services.provider import ImageAttachment, get_image_provider


class FakeProvider:
    """Records every provider_input; returns `output` or raises `error`."""

    def __init__(self, output: Any = None, error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(self, provider_input: dict[str, Any]) -> Any:
        self.calls.append(provider_input)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """No .env leakage, no real credential, no cached provider between tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    get_settings.cache_clear()
    provider_module._provider = None
    yield
    get_settings.cache_clear()
    provider_module._provider = None


@pytest.fixture
def fake_provider():
    return FakeProvider(output="https://x/a.png")


@pytest.fixture
def app(fake_provider):
    application = create_app()
    application.dependency_overrides[get_image_provider] = lambda: fake_provider
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def png_attachment():
    return ImageAttachment(filename="ref.png", content_type="image/png", content=b"\x89PNG fake bytes")
