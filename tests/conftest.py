"""Pytest configuration and fixtures."""

import json
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from recipe_clipper.api.dependencies import get_scrape_service, get_settings
from recipe_clipper.config import Settings
from recipe_clipper.main import app
from recipe_clipper.middleware.rate_limit import limiter
from recipe_clipper.services.fetcher import PageFetcher
from recipe_clipper.services.gemini_service import GeminiService
from recipe_clipper.services.scrape_service import ScrapeService

RECIPE_URL = "https://example.com/recipes/apple-pie"

RECIPE_HTML = """
<html>
  <head>
    <title>Apple Pie</title>
    <meta property="og:image" content="https://example.com/pie.jpg">
    <style>body { color: red; }</style>
    <script>window.tracking = "<b>not text</b>";</script>
  </head>
  <body>
    <h1>Apple Pie</h1>
    <h2>Ingredients</h2>
    <ul><li>2 cups flour</li><li>6 apples</li></ul>
    <h2>Instructions</h2>
    <ol><li>Mix the dough.</li><li>Bake for 45 minutes.</li></ol>
    <noscript>Enable JavaScript</noscript>
  </body>
</html>
"""

PIE_JSON = {
    "title": "Pie",
    "ingredients": ["flour"],
    "components": [
        {"name": "Crust", "steps": ["Mix", "Bake"]},
        {"name": "Empty", "steps": []},
    ],
}


class FakeModels:
    """Stands in for ``genai.Client.models``; replays canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(text=response)


class FakeGeminiClient:
    def __init__(self, *responses):
        self.models = FakeModels(responses)


def html_transport(body: str = RECIPE_HTML, status_code: int = 200, calls=None) -> httpx.MockTransport:
    """Mock transport answering every request with the same page."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, text=body, headers={"content-type": "text/html"})

    return httpx.MockTransport(handler)


@pytest.fixture
def test_settings():
    """Settings with a Gemini key, independent of the environment."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-gemini-key",
        gemini_model="gemini-test",
        gemini_fallback_model="gemini-test-fallback",
    )


@pytest.fixture
def make_service(test_settings):
    """Build a ScrapeService with a mocked site and a fake Gemini client."""

    def _make(*responses, transport=None, settings=None):
        app_settings = settings or test_settings
        gemini_client = FakeGeminiClient(*responses)
        service = ScrapeService(
            app_settings,
            fetcher=PageFetcher(transport=transport or html_transport()),
            gemini_service=GeminiService(
                api_key=app_settings.gemini_api_key,
                model=app_settings.gemini_model,
                fallback_model=app_settings.gemini_fallback_model,
                client=gemini_client,
            ),
        )
        service.fake_gemini = gemini_client
        return service

    return _make


@pytest.fixture
def client(test_settings):
    """Create test client."""
    limiter.reset()
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_service(client):
    """Route /api/scrape to the given service."""

    def _use(service):
        app.dependency_overrides[get_scrape_service] = lambda: service
        return service

    return _use


def pie_response() -> str:
    return json.dumps(PIE_JSON)


def sequence_transport(replies, calls=None) -> httpx.MockTransport:
    """Mock transport answering successive requests with ``(status, body)`` pairs."""
    pending = list(replies)

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        status_code, body = pending.pop(0)
        return httpx.Response(status_code, text=body, headers={"content-type": "text/html"})

    return httpx.MockTransport(handler)
