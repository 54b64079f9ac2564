"""
Prompt templates for dream enrichment and pattern analysis.
"""

from typing import Iterable

from ..core.models import Dream


ENRICHMENT_PROMPT = """Analyze the following dream description.
Create a short, evocative title (like a movie title, at most 5-7 words), extract
{max_tags_hint} key themes, symbols or topics as "tags" (e.g. "flying", "lost",
"water"), and list the proper names of any people mentioned as "people"
(e.g. "Sarah", "Dr. Smith").

Return STRICT JSON only, with exactly this shape:
{{"title": "string", "tags": ["string"], "people": ["string"]}}

Dream: \"\"\"{description}\"\"\"
"""


PATTERN_ANALYSIS_PROMPT = """You are a Dream Analyst and Symbolism Expert. Your approach draws on
Jungian psychology (archetypes, the collective unconscious, symbolism),
cognitive neuroscience (memory consolidation, emotional regulation, threat
simulation), cross-cultural mythology and narrative analysis.

Analyze the dream collection below. Do not give a single definitive meaning;
offer a range of possible interpretations and a framework for the dreamer's
own reflection. With several dreams, focus on recurring patterns, evolving
narratives and overall emotional tone. With a single dream, analyze it in depth.

Work through these steps:
1. Summarize the dream(s) in 2-3 sentences, synthesizing common threads.
2. Break down the core elements: primary symbols with common interpretations,
   key characters with their possible archetypal roles, and the setting and
   atmosphere.
3. Identify 2-4 major themes.
4. Interpret from at least two lenses (Jungian, Cognitive, Narrative).
5. Close with 5-7 open-ended reflective questions linking the dreams to
   waking life.

Tone: insightful, empathetic, objective. Prefer "This could symbolize..." over
definitive or alarmist language. Explain concepts in plain terms.

Return STRICT JSON only, with exactly this shape:
{{
  "dreamSummary": "string",
  "coreElements": {{
    "primarySymbols": [{{"symbol": "string", "interpretations": "string"}}],
    "charactersAndArchetypes": [{{"character": "string", "role": "string"}}],
    "settingAndAtmosphere": "string"
  }},
  "majorThemes": ["string"],
  "interpretations": [{{"lens": "string", "analysis": "string"}}],
  "reflectiveQuestions": ["string"]
}}

THE DREAM(S) TO ANALYZE:

{dreams}
"""


def build_enrichment_prompt(description: str, max_tags: int = 5) -> str:
    hint = f"3 to {max_tags}" if max_tags > 3 else f"up to {max_tags}"
    return ENRICHMENT_PROMPT.format(max_tags_hint=hint, description=description)


def format_dreams_for_analysis(dreams: Iterable[Dream]) -> str:
    blocks = [
        f"Date: {d.date.isoformat()}\nTitle: {d.title}\nDescription: {d.description}"
        for d in dreams
    ]
    return "\n\n---\n\n".join(blocks)


def build_pattern_prompt(dreams: Iterable[Dream]) -> str:
    return PATTERN_ANALYSIS_PROMPT.format(dreams=format_dreams_for_analysis(dreams))


__all__ = [
    "ENRICHMENT_PROMPT",
    "PATTERN_ANALYSIS_PROMPT",
    "build_enrichment_prompt",
    "build_pattern_prompt",
    "format_dreams_for_analysis",
]
