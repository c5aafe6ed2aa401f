# tests/services/test_search_engine.py
import pytest
from pytest_httpserver import HTTPServer

from summary_gateway.services.search_engine import BraveSearchClient

SEARCH_PATH = "/res/v1/web/search"

BRAVE_RESPONSE = {
    "type": "search",
    "query": {"original": "weather"},
    "web": {
        "type": "search",
        "results": [
            {"title": "Weather today", "url": "https://weather.example/today", "description": "Clear skies"},
            {"title": "Forecast", "url": "https://forecast.example", "description": "<strong>Sunny</strong> all day"},
        ]
    }
}


@pytest.fixture
async def brave_client(httpserver: HTTPServer):
    client = BraveSearchClient(api_key="brave-key", base_url=httpserver.url_for(SEARCH_PATH))
    yield client
    await client.close()


class TestBraveSearchClient:
    """Test BraveSearchClient against a local HTTP server"""

    async def test_search_returns_ranked_results(self, httpserver: HTTPServer, brave_client):
        """Test hits are parsed in rank order with the subscription token sent"""
        httpserver.expect_request(
            SEARCH_PATH,
            method="GET",
            query_string={"q": "weather"},
            headers={"X-Subscription-Token": "brave-key", "Accept": "application/json"}
        ).respond_with_json(BRAVE_RESPONSE)

        results = await brave_client.search("weather")

        assert [r.title for r in results] == ["Weather today", "Forecast"]
        assert results[0].url == "https://weather.example/today"
        assert results[1].description == "<strong>Sunny</strong> all day"

    async def test_extra_params_are_sent(self, httpserver: HTTPServer, brave_client):
        """Test extra parameters are forwarded without overriding q"""
        httpserver.expect_request(
            SEARCH_PATH,
            query_string={"q": "rust & go", "count": "5", "country": "US"}
        ).respond_with_json(BRAVE_RESPONSE)

        results = await brave_client.search("rust & go", {"count": "5", "country": "US"})

        assert len(results) == 2

    async def test_empty_results(self, httpserver: HTTPServer, brave_client):
        """Test an empty result list is returned as-is"""
        httpserver.expect_request(SEARCH_PATH).respond_with_json({"web": {"results": []}})

        assert await brave_client.search("nothing") == []

    async def test_missing_fields_default_to_empty(self, httpserver: HTTPServer, brave_client):
        """Test hits with missing fields get empty strings"""
        httpserver.expect_request(SEARCH_PATH).respond_with_json({"web": {"results": [{"title": "Only title"}]}})

        results = await brave_client.search("partial")

        assert results[0].title == "Only title"
        assert results[0].url == ""
        assert results[0].description == ""

    async def test_error_status_returns_none(self, httpserver: HTTPServer, brave_client):
        """Test an error status yields None"""
        httpserver.expect_request(SEARCH_PATH).respond_with_json({"error": "rate limited"}, status=429)

        assert await brave_client.search("weather") is None

    async def test_malformed_body_returns_none(self, httpserver: HTTPServer, brave_client):
        """Test a non-JSON body yields None"""
        httpserver.expect_request(SEARCH_PATH).respond_with_data("not json", content_type="text/html")

        assert await brave_client.search("weather") is None

    async def test_envelope_without_web_results_returns_none(self, httpserver: HTTPServer, brave_client):
        """Test a body without web.results yields None"""
        httpserver.expect_request(SEARCH_PATH).respond_with_json({"type": "search", "query": {}})

        assert await brave_client.search("weather") is None

    async def test_unreachable_provider_returns_none(self):
        """Test a refused connection yields None"""
        client = BraveSearchClient(api_key="brave-key", base_url="http://127.0.0.1:1/res/v1/web/search")
        try:
            assert await client.search("weather") is None
        finally:
            await client.close()
