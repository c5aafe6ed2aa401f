# summary_gateway/services/result_formatter.py
"""Turn search hits into the plain-text context handed to the LLM."""
from bs4 import BeautifulSoup
from typing import Optional, Sequence

from summary_gateway.models.internal import SearchResult

NO_RESULTS_CONTEXT = "No search results found."


def clean_text(text: str) -> str:
    """Drop Brave highlight markup (``<strong>``) and unescape entities"""
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text().strip()


def format_results(results: Optional[Sequence[SearchResult]]) -> str:
    if not results:
        return NO_RESULTS_CONTEXT

    blocks = []
    for rank, result in enumerate(results, start=1):
        lines = [f"{rank}. {clean_text(result.title) or 'Untitled'}"]
        description = clean_text(result.description)
        if description:
            lines.append(description)
        if result.url:
            lines.append(f"Source: {result.url}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)
