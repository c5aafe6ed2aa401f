# tests/core/test_summary_tool.py
import pytest

from summary_gateway.core.exceptions import LLMAnalysisException
from summary_gateway.core.summary_tool import SummaryTool, build_prompt
from summary_gateway.services.result_formatter import NO_RESULTS_CONTEXT
from summary_gateway.tests.stubs import StubBackend, StubSearchClient


class TestSummarize:
    """Test the buffered pipeline"""

    async def test_summarize_returns_backend_text(self, search_client, backend):
        """Test the backend text is returned for a searched query"""
        tool = SummaryTool(search_client, backend)

        summary = await tool.summarize("weather")

        assert summary == "Sunny today."
        assert search_client.queries == ["weather"]
        assert len(backend.prompts) == 1
        prompt = backend.prompts[0]
        assert '"weather"' in prompt
        assert "1. Weather today" in prompt
        assert "2. Forecast" in prompt
        assert prompt.index("Weather today") < prompt.index("Forecast")

    @pytest.mark.parametrize("results", [None, []])
    async def test_summarize_without_results_still_calls_backend(self, results):
        """Test empty and failed searches still reach the backend with the placeholder"""
        search_client = StubSearchClient(results)
        backend = StubBackend(text="Nothing to report.")
        tool = SummaryTool(search_client, backend)

        summary = await tool.summarize("obscure query")

        assert summary == "Nothing to report."
        assert len(backend.prompts) == 1
        assert NO_RESULTS_CONTEXT in backend.prompts[0]

    async def test_backend_failure_propagates(self, search_client):
        """Test a backend failure is not swallowed"""
        tool = SummaryTool(search_client, StubBackend(fail=True))

        with pytest.raises(LLMAnalysisException):
            await tool.summarize("weather")

    async def test_close_releases_both_clients(self, search_client, backend):
        """Test close shuts down the search client and the backend"""
        tool = SummaryTool(search_client, backend)

        await tool.close()

        assert search_client.closed
        assert backend.closed


class TestSummarizeStream:
    """Test the streaming pipeline"""

    async def test_fragments_arrive_in_order(self, search_client):
        """Test fragments are yielded in generation order"""
        backend = StubBackend(fragments=["Hello", " ", "world"], delay=0.01)
        tool = SummaryTool(search_client, backend)

        fragments = [fragment async for fragment in tool.summarize_stream("greeting")]

        assert fragments == ["Hello", " ", "world"]
        assert "".join(fragments) == "Hello world"
        assert backend.stream_finished

    async def test_each_call_reruns_search(self, search_client):
        """Test every stream call runs a fresh search"""
        tool = SummaryTool(search_client, StubBackend(fragments=["a", "b"]))

        first = [f async for f in tool.summarize_stream("q")]
        second = [f async for f in tool.summarize_stream("q")]

        assert first == second == ["a", "b"]
        assert search_client.queries == ["q", "q"]

    async def test_degrades_when_search_unavailable(self):
        """Test streaming still works when the search fails"""
        backend = StubBackend(fragments=["No", " data"])
        tool = SummaryTool(StubSearchClient(None), backend)

        fragments = [f async for f in tool.summarize_stream("q")]

        assert fragments == ["No", " data"]
        assert NO_RESULTS_CONTEXT in backend.prompts[0]

    async def test_early_close_closes_backend_stream(self, search_client):
        """Test closing the stream early closes the backend stream"""
        backend = StubBackend(fragments=["Hello", " ", "world"], delay=0.01)
        tool = SummaryTool(search_client, backend)

        stream = tool.summarize_stream("greeting")
        assert await stream.__anext__() == "Hello"
        await stream.aclose()

        assert backend.stream_closed
        assert not backend.stream_finished

    async def test_stream_failure_propagates(self, search_client):
        """Test a stream failure is raised to the caller"""
        tool = SummaryTool(search_client, StubBackend(fail=True))

        with pytest.raises(LLMAnalysisException):
            async for _ in tool.summarize_stream("q"):
                pass


def test_build_prompt_includes_query_and_context():
    """Test the prompt carries the query and the formatted results"""
    prompt = build_prompt("rust async", "1. Tokio\nAn async runtime")

    assert '"rust async"' in prompt
    assert "1. Tokio\nAn async runtime" in prompt
    assert prompt.rstrip().endswith("Summary:")
