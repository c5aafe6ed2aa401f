# summary_gateway/services/llm_backends.py
"""Language-model backends used to summarize search results.

Every backend exposes the same two calls: ``summarize`` returns the whole
completion, ``summarize_stream`` yields text fragments in generation order.
Backends are picked at construction time by ``create_backend``.
"""
import asyncio
import aiohttp
import json
import logging
from typing import AsyncIterator, Callable, Dict, List, Optional, Protocol, runtime_checkable

from summary_gateway.config.settings import Settings
from summary_gateway.core.exceptions import LLMAnalysisException

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that summarizes web search results accurately and concisely."


@runtime_checkable
class SummaryBackend(Protocol):
    async def summarize(self, prompt: str) -> str:
        ...

    def summarize_stream(self, prompt: str) -> AsyncIterator[str]:
        ...

    async def close(self) -> None:
        ...


async def _raise_for_status(response: aiohttp.ClientResponse, backend: str):
    if response.status == 200:
        return
    error_text = await response.text(errors="replace")
    logger.error(f"{backend} API error: HTTP {response.status}")
    logger.error(f"Error response: {error_text[:500]}")
    if response.status == 404:
        raise LLMAnalysisException(f"{backend} model or endpoint not found")
    raise LLMAnalysisException(f"{backend} API error {response.status}: {error_text[:200]}")


def _parse_event(text: str, backend: str) -> Dict:
    """Decode one streamed JSON event; anything but an object is malformed"""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMAnalysisException(f"Invalid {backend} stream event: {text[:100]}") from e
    if not isinstance(data, dict):
        raise LLMAnalysisException(f"Unexpected {backend} stream event: {text[:100]}")
    return data


def _delta_contents(data: Dict, data_text: str) -> List[str]:
    choices = data.get("choices") or []
    if not isinstance(choices, list):
        raise LLMAnalysisException(f"Unexpected chat completions stream event: {data_text[:100]}")

    contents = []
    for choice in choices:
        if not isinstance(choice, dict):
            raise LLMAnalysisException(f"Unexpected chat completions stream event: {data_text[:100]}")
        delta = choice.get("delta") or {}
        if not isinstance(delta, dict):
            raise LLMAnalysisException(f"Unexpected chat completions stream event: {data_text[:100]}")
        content = delta.get("content")
        if content is not None and not isinstance(content, str):
            raise LLMAnalysisException(f"Unexpected chat completions stream event: {data_text[:100]}")
        if content:
            contents.append(content)
    return contents


class OllamaBackend:
    """Ollama ``/api/generate`` backend (NDJSON streaming)"""

    name = "ollama"

    def __init__(self, host: str, model: str, max_tokens: int = 500, temperature: float = 0.1):
        self.host = host.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaBackend":
        return cls(
            host=settings.LLM_BASE_URL,
            model=settings.LLM_MODEL,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers={"Content-Type": "application/json"})
        return self.session

    def _payload(self, prompt: str, stream: bool) -> Dict:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": stream,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens
            }
        }

    async def summarize(self, prompt: str) -> str:
        session = await self._get_session()
        logger.debug(f"Calling Ollama API: {self.host}/api/generate")

        try:
            async with session.post(f"{self.host}/api/generate", json=self._payload(prompt, False)) as response:
                await _raise_for_status(response, "Ollama")
                try:
                    data = await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    raise LLMAnalysisException(f"Invalid JSON response from Ollama: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP client error calling Ollama: {type(e).__name__}: {e}")
            raise LLMAnalysisException(f"Ollama request failed: {type(e).__name__}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise LLMAnalysisException(f"Unexpected Ollama response: {str(data)[:200]}")

        response_text = data["response"]
        logger.debug(f"Ollama response length: {len(response_text)} characters")
        return response_text

    async def summarize_stream(self, prompt: str) -> AsyncIterator[str]:
        session = await self._get_session()

        try:
            async with session.post(f"{self.host}/api/generate", json=self._payload(prompt, True)) as response:
                await _raise_for_status(response, "Ollama")

                async for raw_line in response.content:
                    line = raw_line.decode("utf-8", errors="replace").strip()
                    if not line:
                        continue
                    data = _parse_event(line, "Ollama")

                    if data.get("error"):
                        raise LLMAnalysisException(f"Ollama stream error: {data['error']}")

                    fragment = data.get("response")
                    if fragment is not None and not isinstance(fragment, str):
                        raise LLMAnalysisException(f"Unexpected Ollama stream line: {line[:100]}")
                    if fragment:
                        yield fragment
                    if data.get("done"):
                        break
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP client error streaming from Ollama: {type(e).__name__}: {e}")
            raise LLMAnalysisException(f"Ollama stream failed: {type(e).__name__}: {e}") from e

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None


class OpenAICompatibleBackend:
    """``/chat/completions`` backend for OpenAI and compatible servers (Gaia nodes, vLLM, ...)"""

    name = "openai"

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str,
        max_tokens: int = 500,
        temperature: float = 0.1
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAICompatibleBackend":
        return cls(
            base_url=settings.LLM_BASE_URL,
            model=settings.LLM_MODEL,
            api_key=settings.LLM_API_KEY,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}"
            })
        return self.session

    def _payload(self, prompt: str, stream: bool) -> Dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": stream
        }

    async def summarize(self, prompt: str) -> str:
        session = await self._get_session()

        try:
            async with session.post(f"{self.base_url}/chat/completions", json=self._payload(prompt, False)) as response:
                await _raise_for_status(response, "Chat completions")
                try:
                    data = await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    raise LLMAnalysisException(f"Invalid JSON response from chat completions: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP client error calling chat completions: {type(e).__name__}: {e}")
            raise LLMAnalysisException(f"Chat completions request failed: {type(e).__name__}: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMAnalysisException(f"Unexpected chat completions response: {str(data)[:200]}") from e

        if content is None:
            return ""
        if not isinstance(content, str):
            raise LLMAnalysisException(f"Unexpected chat completions content: {str(content)[:200]}")
        return content

    async def summarize_stream(self, prompt: str) -> AsyncIterator[str]:
        session = await self._get_session()

        try:
            async with session.post(f"{self.base_url}/chat/completions", json=self._payload(prompt, True)) as response:
                await _raise_for_status(response, "Chat completions")

                # Server-sent events: one "data: {...}" line per delta
                async for raw_line in response.content:
                    line = raw_line.decode("utf-8", errors="replace").strip()
                    if not line.startswith("data:"):
                        continue
                    data_text = line[len("data:"):].strip()
                    if data_text == "[DONE]":
                        break
                    data = _parse_event(data_text, "Chat completions")

                    if data.get("error"):
                        raise LLMAnalysisException(f"Chat completions stream error: {data['error']}")

                    for fragment in _delta_contents(data, data_text):
                        yield fragment
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP client error streaming chat completions: {type(e).__name__}: {e}")
            raise LLMAnalysisException(f"Chat completions stream failed: {type(e).__name__}: {e}") from e

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None


BACKENDS: Dict[str, Callable[[Settings], SummaryBackend]] = {
    "ollama": OllamaBackend.from_settings,
    "openai": OpenAICompatibleBackend.from_settings
}


def create_backend(settings: Settings) -> SummaryBackend:
    factory = BACKENDS.get(settings.LLM_PROVIDER)
    if factory is None:
        raise ValueError(f"Unknown LLM provider: {settings.LLM_PROVIDER}")
    backend = factory(settings)
    logger.info(f"Using {settings.LLM_PROVIDER} backend with model {settings.LLM_MODEL}")
    return backend
