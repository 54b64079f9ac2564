"""
LLM Caller – Provider dispatch shared by enrichment and analysis
================================================================
Routes a prompt to the configured provider and returns the raw text reply.
Synchronous SDK clients run in a worker thread so the event loop keeps
interleaving other imports.
"""

import asyncio
import json
import re
from typing import Any, Dict, Optional

from loguru import logger

from .config import LLMConfig, LLMProvider
from .factory import LLMClientFactory

_JSON_OBJECT = re.compile(r"\{.*\}", re.S)


def parse_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object from a model reply.

    Accepts bare JSON or JSON wrapped in prose/code fences (first ``{...}``
    block). Returns None when nothing parseable is found.
    """
    if not text:
        return None
    text = text.strip()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        m = _JSON_OBJECT.search(text)
        if not m:
            return None
        try:
            parsed = json.loads(m.group(0))
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


class LLMCaller:
    """Holds a provider client and knows how to prompt it."""

    def __init__(self, config: Optional[LLMConfig] = None, llm_client: Any = None):
        self.config = config or LLMConfig.mock()
        if llm_client is not None:
            self.llm_client = llm_client
        else:
            self.llm_client = LLMClientFactory.create_client(self.config)

    @property
    def available(self) -> bool:
        """True when a provider client exists and a credential is configured."""
        return (
            self.config.provider != LLMProvider.MOCK
            and self.config.is_configured
            and self.llm_client is not None
        )

    async def _call_llm(self, prompt: str, json_mode: bool = True) -> str:
        """
        Call the LLM with the given prompt.

        Raises whatever the provider SDK raises; callers translate that into
        their own domain error.
        """
        provider = self.config.provider

        if provider == LLMProvider.GOOGLE_GEMINI:
            return await asyncio.to_thread(self._call_gemini, prompt, json_mode)

        if provider == LLMProvider.OPENAI:
            return await asyncio.to_thread(self._call_openai, prompt, json_mode)

        if provider == LLMProvider.ANTHROPIC:
            return await asyncio.to_thread(self._call_anthropic, prompt)

        if provider == LLMProvider.OLLAMA:
            return await self.llm_client.agenerate(
                prompt,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                json_mode=json_mode,
            )

        logger.warning(f"No call path for provider {provider.value}")
        return ""

    def _call_gemini(self, prompt: str, json_mode: bool) -> str:
        """Call Google Gemini API"""
        generation_config = {
            "max_output_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            **self.config.extra_params,
        }
        if json_mode:
            generation_config["response_mime_type"] = "application/json"
        response = self.llm_client.models.generate_content(
            model=self.config.model,
            contents=prompt,
            config=generation_config,
        )
        return response.text

    def _call_openai(self, prompt: str, json_mode: bool) -> str:
        """Call OpenAI-compatible API"""
        params = dict(self.config.extra_params)
        if json_mode:
            params["response_format"] = {"type": "json_object"}
        response = self.llm_client.chat.completions.create(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            **params
        )
        return response.choices[0].message.content

    def _call_anthropic(self, prompt: str) -> str:
        """Call Anthropic Claude API"""
        response = self.llm_client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
            **self.config.extra_params
        )
        return response.content[0].text


__all__ = ["LLMCaller", "parse_json_object"]
