"""
Dream Enricher – title, tags and people from free text
======================================================
The enrichment capability consumed by the importer.

Contract:
    enrich_text(text) -> EnrichmentResult
    - no credential configured: empty result for every call, never an error
    - provider or parsing failure: EnrichmentError
"""

from typing import Any, Optional

from loguru import logger

from .base import LLMCaller, parse_json_object
from .config import LLMConfig
from .prompts import build_enrichment_prompt
from ..core.exceptions import EnrichmentError
from ..core.models import EnrichmentResult


class DreamEnricher(LLMCaller):
    """Derives a bounded set of fields from a dream description."""

    @classmethod
    def from_config(cls, config: LLMConfig, llm_client: Any = None) -> "DreamEnricher":
        return cls(config=config, llm_client=llm_client)

    async def enrich_text(self, text: str) -> EnrichmentResult:
        if not self.available:
            return EnrichmentResult.empty()

        prompt = build_enrichment_prompt(text, max_tags=self.config.max_tags)
        provider = self.config.provider.value

        try:
            raw = await self._call_llm(prompt, json_mode=True)
        except Exception as e:
            logger.error(f"[DreamEnricher] Error analyzing dream with {provider}: {e}")
            raise EnrichmentError(
                provider=provider,
                reason=str(e),
                context={"model": self.config.model},
            ) from e

        payload = parse_json_object(raw)
        if payload is None:
            raise EnrichmentError(
                provider=provider,
                reason="Response was not a JSON object",
                context={"model": self.config.model, "response": _preview(raw)},
            )

        result = EnrichmentResult.from_payload(
            payload,
            max_tags=self.config.max_tags,
            max_people=self.config.max_people,
        )
        logger.debug(
            f"[DreamEnricher] title={result.title!r}, "
            f"{len(result.tags)} tags, {len(result.people)} people"
        )
        return result


def _preview(text: Optional[str], limit: int = 120) -> str:
    text = text or ""
    return text if len(text) <= limit else text[:limit] + "..."


__all__ = ["DreamEnricher"]
