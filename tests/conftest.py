"""Shared fixtures: an app wired to a patched Gemini client."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from main import create_app
from tests.helpers import make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def genai_client():
    """The object ``genai.Client(...)`` returns while the test runs."""
    with patch("llm.llm_client.genai.Client") as client_cls:
        instance = client_cls.return_value
        instance.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text="Hello world.")
        )
        yield instance


@pytest.fixture
def app(settings, genai_client):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def unconfigured_client(genai_client):
    return TestClient(create_app(make_settings(gemini_api_key=None)))
