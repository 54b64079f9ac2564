"""
Tests for the LLM layer.
========================
Tests for:
  - LLMConfig (credentials, provider defaults, settings mapping)
  - LLMClientFactory (no client without a credential)
  - DreamEnricher (Gemini / OpenAI / Ollama dispatch, bounds, failures)
  - PatternAnalyzer (structured result, empty input, failures)
  - Lenient JSON parsing of model replies
"""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from dreamlog.core.config import EnrichmentConfig
from dreamlog.core.exceptions import AnalysisError, EnrichmentError, UnsupportedProviderError
from dreamlog.llm import (
    DreamEnricher,
    LLMClientFactory,
    LLMConfig,
    LLMProvider,
    PatternAnalyzer,
    parse_json_object,
)
from dreamlog.llm.prompts import build_enrichment_prompt, format_dreams_for_analysis

from conftest import make_dream


ENRICHMENT_REPLY = json.dumps({
    "title": "The Endless Sea",
    "tags": ["water", "flying", "water", "freedom", "night", "stars", "moon"],
    "people": ["Sarah", "Dr. Smith"],
})

ANALYSIS_REPLY = json.dumps({
    "dreamSummary": "Recurring images of open water.",
    "coreElements": {
        "primarySymbols": [{"symbol": "Sea", "interpretations": "The unconscious."}],
        "charactersAndArchetypes": [{"character": "Sarah", "role": "The Guide"}],
        "settingAndAtmosphere": "Calm, moonlit.",
    },
    "majorThemes": ["Freedom", "Exploration"],
    "interpretations": [
        {"lens": "Jungian", "analysis": "Water as the unconscious."},
        {"lens": "Cognitive", "analysis": "Processing a recent trip."},
    ],
    "reflectiveQuestions": ["Where do you feel free?"],
})


def gemini_client(reply=ENRICHMENT_REPLY):
    client = MagicMock()
    client.models.generate_content.return_value = MagicMock(text=reply)
    return client


# =====================================================================
# Configuration and factory
# =====================================================================

class TestLLMConfig:
    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        config = LLMConfig.google_gemini()
        assert config.resolved_api_key() == "from-env"
        assert config.is_configured

    def test_missing_key_is_not_configured(self):
        assert not LLMConfig.google_gemini().is_configured
        assert not LLMConfig.openai().is_configured

    def test_ollama_needs_no_key(self):
        assert LLMConfig.ollama().is_configured

    def test_mock_is_never_configured(self):
        assert not LLMConfig.mock().is_configured

    def test_from_settings(self):
        config = LLMConfig.from_settings(EnrichmentConfig(provider="ollama", max_tags=4))
        assert config.provider == LLMProvider.OLLAMA
        assert config.base_url == "http://localhost:11434"
        assert config.max_tags == 4

    def test_from_settings_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError):
            LLMConfig.from_settings(EnrichmentConfig(provider="carrier-pigeon"))


class TestFactory:
    def test_mock_has_no_client(self):
        assert LLMClientFactory.create_client(LLMConfig.mock()) is None

    def test_no_credential_no_client(self):
        assert LLMClientFactory.create_client(LLMConfig.google_gemini()) is None

    def test_ollama_client(self):
        client = LLMClientFactory.create_client(LLMConfig.ollama(model="mistral"))
        assert client.model == "mistral"
        assert client.base_url == "http://localhost:11434"


# =====================================================================
# Enrichment
# =====================================================================

class TestDreamEnricher:
    @pytest.mark.asyncio
    async def test_gemini_reply_is_parsed_and_bounded(self):
        client = gemini_client()
        enricher = DreamEnricher.from_config(LLMConfig.google_gemini(api_key="k"), llm_client=client)

        result = await enricher.enrich_text("I flew over the sea with Sarah")

        assert result.title == "The Endless Sea"
        assert result.tags == ("water", "flying", "freedom", "night", "stars")
        assert result.people == ("Sarah", "Dr. Smith")

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"]["response_mime_type"] == "application/json"
        assert "I flew over the sea with Sarah" in kwargs["contents"]

    @pytest.mark.asyncio
    async def test_custom_bounds(self):
        config = LLMConfig.google_gemini(api_key="k", max_tags=2, max_people=1)
        enricher = DreamEnricher.from_config(config, llm_client=gemini_client())

        result = await enricher.enrich_text("dream")

        assert result.tags == ("water", "flying")
        assert result.people == ("Sarah",)

    @pytest.mark.asyncio
    async def test_no_credential_yields_empty_result(self):
        enricher = DreamEnricher.from_config(LLMConfig.google_gemini())
        assert not enricher.available
        result = await enricher.enrich_text("dream")
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_mock_provider_yields_empty_result(self):
        result = await DreamEnricher().enrich_text("dream")
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_provider_failure_raises_enrichment_error(self):
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("quota exceeded")
        enricher = DreamEnricher.from_config(LLMConfig.google_gemini(api_key="k"), llm_client=client)

        with pytest.raises(EnrichmentError) as exc:
            await enricher.enrich_text("dream")

        assert exc.value.provider == "google_gemini"
        assert "quota exceeded" in exc.value.message
        assert exc.value.recoverable

    @pytest.mark.asyncio
    async def test_non_json_reply_raises(self):
        enricher = DreamEnricher.from_config(
            LLMConfig.google_gemini(api_key="k"),
            llm_client=gemini_client("Sorry, I can't help with that."),
        )
        with pytest.raises(EnrichmentError):
            await enricher.enrich_text("dream")

    @pytest.mark.asyncio
    async def test_openai_dispatch(self):
        client = MagicMock()
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = '{"title": "Exam Day", "tags": ["school"], "people": []}'
        client.chat.completions.create.return_value = response
        enricher = DreamEnricher.from_config(LLMConfig.openai(api_key="k"), llm_client=client)

        result = await enricher.enrich_text("dream")

        assert result.title == "Exam Day"
        assert client.chat.completions.create.call_args.kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_anthropic_dispatch(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(content=[MagicMock(text='{"title": "Falling"}')])
        enricher = DreamEnricher.from_config(LLMConfig.anthropic(api_key="k"), llm_client=client)

        result = await enricher.enrich_text("dream")

        assert result.title == "Falling"

    @pytest.mark.asyncio
    async def test_ollama_dispatch(self):
        client = MagicMock()
        client.agenerate = AsyncMock(return_value='```json\n{"title": "Night Train"}\n```')
        enricher = DreamEnricher.from_config(LLMConfig.ollama(), llm_client=client)

        result = await enricher.enrich_text("dream")

        assert result.title == "Night Train"
        assert client.agenerate.await_args.kwargs["json_mode"] is True


# =====================================================================
# Pattern analysis
# =====================================================================

class TestPatternAnalyzer:
    @pytest.mark.asyncio
    async def test_structured_result(self):
        client = gemini_client(ANALYSIS_REPLY)
        analyzer = PatternAnalyzer(LLMConfig.google_gemini(api_key="k"), llm_client=client)
        dreams = [make_dream(date(2024, 6, 1), title="Sea", description="Open water")]

        result = await analyzer.analyze(dreams)

        assert result.summary == "Recurring images of open water."
        assert result.core_elements.primary_symbols[0].symbol == "Sea"
        assert result.core_elements.characters[0].role == "The Guide"
        assert result.themes == ("Freedom", "Exploration")
        assert [i.lens for i in result.interpretations] == ["Jungian", "Cognitive"]
        assert result.reflective_questions == ("Where do you feel free?",)
        assert result.to_dict()["core_elements"]["setting_and_atmosphere"] == "Calm, moonlit."

        prompt = client.models.generate_content.call_args.kwargs["contents"]
        assert "Date: 2024-06-01\nTitle: Sea\nDescription: Open water" in prompt

    @pytest.mark.asyncio
    async def test_no_dreams_no_call(self):
        client = gemini_client(ANALYSIS_REPLY)
        analyzer = PatternAnalyzer(LLMConfig.google_gemini(api_key="k"), llm_client=client)

        result = await analyzer.analyze([])

        assert result.is_empty
        client.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_credential_is_empty(self):
        result = await PatternAnalyzer(LLMConfig.google_gemini()).analyze(
            [make_dream(date(2024, 6, 1))]
        )
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_failure_raises_analysis_error(self):
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("boom")
        analyzer = PatternAnalyzer(LLMConfig.google_gemini(api_key="k"), llm_client=client)

        with pytest.raises(AnalysisError) as exc:
            await analyzer.analyze([make_dream(date(2024, 6, 1))])
        assert exc.value.message == "Failed to generate dream analysis."

    @pytest.mark.asyncio
    async def test_missing_summary_has_placeholder(self):
        analyzer = PatternAnalyzer(LLMConfig.google_gemini(api_key="k"), llm_client=gemini_client("{}"))
        result = await analyzer.analyze([make_dream(date(2024, 6, 1))])
        assert result.summary == "No summary available."

    @pytest.mark.asyncio
    async def test_unexpected_shapes_are_ignored(self):
        reply = json.dumps({
            "dreamSummary": "s",
            "coreElements": ["oops"],
            "majorThemes": "Freedom",
            "reflectiveQuestions": "Why?",
        })
        analyzer = PatternAnalyzer(LLMConfig.google_gemini(api_key="k"), llm_client=gemini_client(reply))

        result = await analyzer.analyze([make_dream(date(2024, 6, 1))])

        assert result.summary == "s"
        assert result.core_elements.primary_symbols == ()
        assert result.core_elements.setting_and_atmosphere == ""
        assert result.themes == ()
        assert result.reflective_questions == ()


# =====================================================================
# Helpers
# =====================================================================

class TestHelpers:
    def test_parse_plain_json(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_parse_wrapped_json(self):
        assert parse_json_object('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_parse_rejects_non_objects(self):
        assert parse_json_object("[1, 2]") is None
        assert parse_json_object("no json") is None
        assert parse_json_object("") is None
        assert parse_json_object(None) is None

    def test_enrichment_prompt_mentions_tag_range(self):
        prompt = build_enrichment_prompt("a dream", max_tags=5)
        assert "3 to 5" in prompt
        assert '"""a dream"""' in prompt

    def test_dreams_are_separated_for_analysis(self):
        text = format_dreams_for_analysis([
            make_dream(date(2024, 1, 2), title="B"),
            make_dream(date(2024, 1, 1), title="A"),
        ])
        assert text.count("\n\n---\n\n") == 1
