"""Ollama formatting engine for cleaning up raw transcripts."""

import asyncio
import logging
import aiohttp
from typing import Any, Dict, Tuple

from .formatter import SYSTEM_PROMPT, build_user_prompt, extract_formatted_text
from ..errors import InvalidResponse, ServiceUnreachable

logger = logging.getLogger(__name__)


class OllamaFormatter:
    """Formats transcripts through an Ollama server's chat endpoint."""

    def __init__(self, timeout: float = 30.0, temperature: float = 0.1, max_tokens: int = 2000):
        """Initialize Ollama formatter.

        Args:
            timeout: Total request deadline in seconds
            temperature: Sampling temperature, kept low for stable formatting
            max_tokens: Maximum tokens in response
        """
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    def format(self, endpoint: str, model_id: str, text: str) -> str:
        """Format text synchronously on a private event loop.

        Raises:
            ServiceUnreachable: Connection failure, timeout or HTTP error status
            InvalidResponse: Reply is not JSON or lacks formatted text
        """
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(self.format_async(endpoint, model_id, text))
        finally:
            loop.close()

    async def format_async(self, endpoint: str, model_id: str, text: str) -> str:
        url = f"{endpoint.rstrip('/')}/api/chat"
        body = {
            "model": model_id,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(text)},
            ],
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }

        logger.debug(f"Formatting request to {url} with model {model_id}")
        try:
            status, payload = await self._post(url, body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ServiceUnreachable(f"Ollama request failed: {e}") from e

        if status != 200:
            raise ServiceUnreachable(f"Ollama API error: {status}")

        content = (payload.get("message") or {}).get("content")
        if not isinstance(content, str):
            raise InvalidResponse("Ollama reply has no message content")

        formatted = extract_formatted_text(content)
        logger.debug(f"Formatting completed: {len(text)} -> {len(formatted)} chars")
        return formatted

    async def _post(self, url: str, body: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json=body) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.debug(f"Ollama error body: {error_text[:200]}")
                    return response.status, {}
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise InvalidResponse(f"Ollama reply is not JSON: {e}") from e
                if not isinstance(payload, dict):
                    raise InvalidResponse("Ollama reply is not a JSON object")
                return response.status, payload
