# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from summary_gateway.config.settings import Settings
from summary_gateway.main import create_app
from summary_gateway.models.internal import SearchResult
from summary_gateway.tests.stubs import API_KEY, StubBackend, StubSearchClient


@pytest.fixture
def settings():
    return Settings(_env_file=None, API_KEY=API_KEY, BRAVE_API_KEY="brave-key")


@pytest.fixture
def two_results():
    return [
        SearchResult(title="Weather today", url="https://weather.example/today", description="Clear skies"),
        SearchResult(title="Forecast", url="https://forecast.example", description="<strong>Sunny</strong> all day")
    ]


@pytest.fixture
def search_client(two_results):
    return StubSearchClient(two_results)


@pytest.fixture
def backend():
    return StubBackend()


@pytest.fixture
def app(settings, search_client, backend):
    return create_app(settings, search_client=search_client, backend=backend)


@pytest.fixture
def client(app):
    return TestClient(app)
