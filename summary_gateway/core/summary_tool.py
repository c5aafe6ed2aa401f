# summary_gateway/core/summary_tool.py
import time
import logging
from typing import AsyncIterator

from summary_gateway.services.search_engine import BraveSearchClient
from summary_gateway.services.result_formatter import format_results
from summary_gateway.services.llm_backends import SummaryBackend

logger = logging.getLogger(__name__)


def build_prompt(query: str, context: str) -> str:
    """Create prompt for LLM summarization"""
    return f"""Summarize the following web search results for the query: "{query}"

Search Results:
{context}

Write a clear, accurate summary based only on the search results above. If the results don't contain enough information to answer the query, say so.

Summary:"""


class SummaryTool:
    """Search, format, then summarize with the configured backend.

    Search failures degrade to a "no results" context; backend failures
    (``LLMAnalysisException``) propagate to the caller.
    """

    def __init__(self, search_client: BraveSearchClient, backend: SummaryBackend):
        self.search_client = search_client
        self.backend = backend

    async def _prepare_prompt(self, query: str) -> str:
        start_time = time.time()
        results = await self.search_client.search(query)

        if results is None:
            logger.warning(f"Search unavailable for query '{query[:50]}', summarizing without results")
        elif not results:
            logger.info(f"Search returned no results for query '{query[:50]}'")

        context = format_results(results)
        logger.debug(f"Search stage took {time.time() - start_time:.2f}s, context length {len(context)}")
        return build_prompt(query, context)

    async def summarize(self, query: str) -> str:
        prompt = await self._prepare_prompt(query)
        start_time = time.time()
        summary = await self.backend.summarize(prompt)
        logger.info(f"Summary generated in {time.time() - start_time:.2f}s for query '{query[:50]}'")
        return summary

    async def summarize_stream(self, query: str) -> AsyncIterator[str]:
        prompt = await self._prepare_prompt(query)
        stream = self.backend.summarize_stream(prompt)
        fragments = 0
        try:
            async for fragment in stream:
                fragments += 1
                yield fragment
        finally:
            # Release the upstream connection when the consumer stops early
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.info(f"Streamed {fragments} fragments for query '{query[:50]}'")

    async def close(self):
        await self.search_client.close()
        await self.backend.close()
