"""
Ollama Client – HTTP client for local models
============================================
Async client for the Ollama generate API.
"""

from typing import Optional

import aiohttp
from loguru import logger


class OllamaError(RuntimeError):
    """Raised when the Ollama server cannot produce a response."""


class OllamaClient:
    """Minimal async client for ``POST /api/generate``"""

    def __init__(self, base_url: str = "http://localhost:11434", model: str = "llama3.1", timeout: float = 120.0):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    async def agenerate(
        self,
        prompt: str,
        max_tokens: int = 1024,
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        """Generate a completion; raises OllamaError on HTTP or transport failure."""
        url = f"{self.base_url}/api/generate"
        options = {"num_predict": max_tokens}
        if temperature is not None:
            options["temperature"] = temperature
        data = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        if json_mode:
            data["format"] = "json"

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=data) as response:
                    if response.status != 200:
                        raise OllamaError(f"HTTP {response.status}")
                    result = await response.json()
                    return result.get("response", "")
        except aiohttp.ClientError as e:
            logger.warning(f"[OllamaClient] Request to {url} failed: {e}")
            raise OllamaError(str(e)) from e


__all__ = ["OllamaClient", "OllamaError"]
