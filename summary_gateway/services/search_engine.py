# summary_gateway/services/search_engine.py
import asyncio
import aiohttp
import logging
from typing import Dict, List, Mapping, Optional

from summary_gateway.config.settings import BRAVE_SEARCH_URL
from summary_gateway.models.internal import SearchResult
from summary_gateway.core.exceptions import SearchEngineException

logger = logging.getLogger(__name__)

class BraveSearchClient:
    """Thin client for the Brave web search API.

    ``search`` never raises: every failure is logged and reported as ``None``
    so callers can carry on without results.
    """

    def __init__(self, api_key: str, base_url: str = BRAVE_SEARCH_URL):
        self.api_key = api_key
        self.base_url = base_url
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Lazy initialization of HTTP session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": self.api_key
        }

    async def search(
        self,
        query: str,
        extra_params: Optional[Mapping[str, str]] = None
    ) -> Optional[List[SearchResult]]:
        params = dict(extra_params or {})
        params["q"] = query

        try:
            session = await self._get_session()
            async with session.get(self.base_url, headers=self._headers(), params=params) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise SearchEngineException(
                        f"Brave Search API returned status {response.status}: {error_text[:200]}"
                    )

                data = await response.json(content_type=None)
                results = self._parse_results(data)

            logger.info(f"Brave search returned {len(results)} results for: {query[:30]}...")
            return results

        except SearchEngineException as e:
            logger.warning(f"Brave search failed for query '{query[:30]}': {e}")
            return None
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Brave search error for query '{query[:30]}': {type(e).__name__}: {e}")
            return None

    def _parse_results(self, data) -> List[SearchResult]:
        """Extract ranked hits from the ``web.results`` envelope"""
        if not isinstance(data, dict):
            raise SearchEngineException("Unexpected response body from Brave Search API")

        web = data.get("web") or {}
        web_results = web.get("results") if isinstance(web, dict) else None
        if not isinstance(web_results, list):
            raise SearchEngineException("Brave Search response has no web.results list")

        results = []
        for item in web_results:
            if not isinstance(item, dict):
                continue
            results.append(SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                description=item.get("description") or ""
            ))
        return results

    async def close(self):
        """Close HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None
