# summary_gateway/api/endpoints/search.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
import logging
from typing import AsyncGenerator, AsyncIterator, Optional

from summary_gateway.core.summary_tool import SummaryTool
from summary_gateway.core.exceptions import LLMAnalysisException, ValidationException
from summary_gateway.models.responses import SummaryResponse, ErrorResponse
from summary_gateway.api.dependencies import get_summary_tool

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get(
    "/search",
    response_model=SummaryResponse,
    responses={
        200: {
            "description": "JSON summary, or chunked plain text when stream=true",
            "content": {"text/plain": {"schema": {"type": "string"}}}
        },
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        502: {"model": ErrorResponse}
    },
    summary="Summarize search results",
    description="Search the web for the query and return an AI-generated summary of the results."
)
async def search(
    q: Optional[str] = Query(None, description="Search query"),
    stream: Optional[str] = Query(None, description='Set to "true" to stream the summary as chunked plain text'),
    summary_tool: SummaryTool = Depends(get_summary_tool)
):
    """
    - **q**: The search query (required)
    - **stream**: `true` streams fragments as they are generated
    """
    if not q:
        raise ValidationException("Missing search query")

    if stream == "true":
        return await _streaming_response(summary_tool, q)

    summary = await summary_tool.summarize(q)
    return SummaryResponse(summary=summary)

async def _streaming_response(summary_tool: SummaryTool, query: str) -> StreamingResponse:
    fragments = summary_tool.summarize_stream(query)

    # Wait for the first fragment so an upstream failure is still a JSON error
    try:
        first = await fragments.__anext__()
    except StopAsyncIteration:
        first = None
    except LLMAnalysisException as e:
        logger.error(f"Summary stream failed to start for query '{query[:50]}': {e}")
        raise

    return StreamingResponse(
        stream_fragments(first, fragments, query),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"}
    )

async def stream_fragments(
    first: Optional[str],
    fragments: AsyncGenerator[str, None],
    query: str = ""
) -> AsyncIterator[str]:
    """Yield fragments unchanged and in order, closing the source when done or disconnected"""
    try:
        if first is not None:
            yield first
        async for fragment in fragments:
            yield fragment
    except LLMAnalysisException as e:
        logger.error(f"Summary stream aborted for query '{query[:50]}': {e}")
        raise
    finally:
        await fragments.aclose()
