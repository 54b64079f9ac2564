"""
Pattern Analyzer – multi-lens analysis over a set of dreams
===========================================================
Used by the presentation layer on the dreams of an unlocked window.

Contract:
    analyze(dreams) -> AnalysisResult
    - zero dreams or no credential: all-empty result
    - provider or parsing failure: AnalysisError
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from loguru import logger

from .base import LLMCaller, parse_json_object
from .prompts import build_pattern_prompt
from ..core.exceptions import AnalysisError
from ..core.models import Dream


@dataclass(frozen=True)
class SymbolReading:
    symbol: str
    interpretations: str


@dataclass(frozen=True)
class CharacterRole:
    character: str
    role: str


@dataclass(frozen=True)
class LensReading:
    lens: str
    analysis: str


@dataclass(frozen=True)
class CoreElements:
    primary_symbols: Tuple[SymbolReading, ...] = ()
    characters: Tuple[CharacterRole, ...] = ()
    setting_and_atmosphere: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    summary: str = ""
    core_elements: CoreElements = field(default_factory=CoreElements)
    themes: Tuple[str, ...] = ()
    interpretations: Tuple[LensReading, ...] = ()
    reflective_questions: Tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "AnalysisResult":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.themes or self.interpretations or self.reflective_questions)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AnalysisResult":
        core = payload.get("coreElements")
        if not isinstance(core, dict):
            core = {}
        return cls(
            summary=str(payload.get("dreamSummary") or "No summary available."),
            core_elements=CoreElements(
                primary_symbols=tuple(
                    SymbolReading(str(s.get("symbol", "")), str(s.get("interpretations", "")))
                    for s in _objects(core.get("primarySymbols"))
                ),
                characters=tuple(
                    CharacterRole(str(c.get("character", "")), str(c.get("role", "")))
                    for c in _objects(core.get("charactersAndArchetypes"))
                ),
                setting_and_atmosphere=str(core.get("settingAndAtmosphere") or ""),
            ),
            themes=_strings(payload.get("majorThemes")),
            interpretations=tuple(
                LensReading(str(i.get("lens", "")), str(i.get("analysis", "")))
                for i in _objects(payload.get("interpretations"))
            ),
            reflective_questions=_strings(payload.get("reflectiveQuestions")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "core_elements": {
                "primary_symbols": [
                    {"symbol": s.symbol, "interpretations": s.interpretations}
                    for s in self.core_elements.primary_symbols
                ],
                "characters": [
                    {"character": c.character, "role": c.role}
                    for c in self.core_elements.characters
                ],
                "setting_and_atmosphere": self.core_elements.setting_and_atmosphere,
            },
            "themes": list(self.themes),
            "interpretations": [
                {"lens": i.lens, "analysis": i.analysis} for i in self.interpretations
            ],
            "reflective_questions": list(self.reflective_questions),
        }


def _objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _strings(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v and not isinstance(v, (dict, list)))


class PatternAnalyzer(LLMCaller):
    """Runs the pattern-analysis prompt over a collection of dreams."""

    async def analyze(self, dreams: Sequence[Dream]) -> AnalysisResult:
        if not dreams or not self.available:
            return AnalysisResult.empty()

        prompt = build_pattern_prompt(dreams)
        try:
            raw = await self._call_llm(prompt, json_mode=True)
        except Exception as e:
            logger.error(f"[PatternAnalyzer] Error analyzing dream patterns: {e}")
            raise AnalysisError(context={"dreams": len(dreams)}) from e

        payload = parse_json_object(raw)
        if payload is None:
            logger.error("[PatternAnalyzer] Analysis response was not a JSON object")
            raise AnalysisError(context={"dreams": len(dreams)})

        try:
            return AnalysisResult.from_payload(payload)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"[PatternAnalyzer] Analysis response had an unexpected shape: {e}")
            raise AnalysisError(context={"dreams": len(dreams)}) from e


__all__ = [
    "AnalysisResult",
    "CoreElements",
    "SymbolReading",
    "CharacterRole",
    "LensReading",
    "PatternAnalyzer",
]
