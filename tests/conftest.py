from __future__ import annotations

import base64
import io
from types import SimpleNamespace

import pytest
from PIL import Image

from rednote_slides.card import CardDeck
from rednote_slides.card import export as export_module
from rednote_slides.models import UserProfile
from rednote_slides.settings import DEFAULT_SETTINGS


@pytest.fixture
def settings():
    return DEFAULT_SETTINGS


@pytest.fixture
def profile():
    return UserProfile(username="Mia", avatar_url=None)


@pytest.fixture
def deck(profile):
    return CardDeck(
        pages=[["Short line.", "今天的阳光很好，适合出门走走。"], ["Second card."]],
        title="Hi",
        profile=profile,
        date_str="2024.03.09",
    )


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (2, 2), (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_url(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture(autouse=True)
def clear_avatar_cache():
    export_module._cached_avatar_bytes.cache_clear()
    yield
    export_module._cached_avatar_bytes.cache_clear()


class FakeModels:
    """Stand-in for ``genai.Client().models`` returning canned text."""

    def __init__(self, text=None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def fake_client_factory():
    def build(text=None, error: Exception | None = None):
        return SimpleNamespace(models=FakeModels(text=text, error=error))

    return build
