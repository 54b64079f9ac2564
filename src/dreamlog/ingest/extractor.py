"""
Field Extractor – HTML journal export → DraftRecord
===================================================
Heuristic extraction for free-form exported journal entries.

Order of operations:
    1. Title       – first <h1>, consumed
    2. Date        – first short h2-h6/p/div whose text is mostly a date, consumed
    3. Description – rendered text of everything not consumed

Consumed nodes are tracked by identity instead of being removed from the
tree, so the parsed document is never mutated. Text computed for later steps
skips consumed subtrees, which keeps the title and date out of the
description.
"""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Set, Tuple

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction, Tag
from loguru import logger

from dreamlog.core.models import DEFAULT_TITLE, DraftRecord


DATE_PATTERN = re.compile(r"(?:Date:)?\s*(\d{4}-\d{2}-\d{2})")
# A node is taken as a date label only when its trimmed text is shorter than this
MAX_DATE_TEXT_LENGTH = 30
DATE_CANDIDATE_TAGS = ["h2", "h3", "h4", "h5", "h6", "p", "div"]

_NON_TEXT_NODES = (Comment, Declaration, Doctype, ProcessingInstruction)
_UNRENDERED_TAGS = {"head", "title", "script", "style", "template", "noscript", "meta", "link"}
_PARAGRAPH_TAGS = {"p", "h1", "h2", "h3", "h4", "h5", "h6"}
_BLOCK_TAGS = _PARAGRAPH_TAGS | {
    "div", "section", "article", "header", "footer", "main", "aside", "nav",
    "blockquote", "pre", "ul", "ol", "li", "dl", "dt", "dd", "table", "tr",
    "figure", "figcaption", "hr", "address", "body", "html",
}
_INLINE_WS = re.compile(r"\s+")
_LINE_WS = re.compile(r"[ \t\r\f\v]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class FieldExtractor:
    """Turns one exported HTML document into a title/date/description draft."""

    def __init__(self, default_title: str = DEFAULT_TITLE, parser: str = "html.parser"):
        self.default_title = default_title
        self.parser = parser

    def extract(self, document: str, fallback_date: date) -> DraftRecord:
        soup = BeautifulSoup(document or "", self.parser)
        root = soup.body or soup
        consumed: Set[int] = set()

        title = self._extract_title(root, consumed)
        found_date, date_node = self._extract_date(root, consumed)
        description = self.rendered_text(root, consumed)

        logger.debug(
            f"[FieldExtractor] title={title!r}, "
            f"date={'document' if date_node is not None else 'fallback'}, "
            f"description_chars={len(description)}"
        )
        return DraftRecord(
            title=title,
            date=found_date or fallback_date,
            description=description,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _extract_title(self, root: Tag, consumed: Set[int]) -> str:
        heading = root.find("h1")
        if heading is None:
            return self.default_title
        consumed.add(id(heading))
        return self.text_content(heading, consumed).strip() or self.default_title

    def _extract_date(self, root: Tag, consumed: Set[int]) -> Tuple[Optional[date], Optional[Tag]]:
        for node in root.find_all(DATE_CANDIDATE_TAGS):
            if self._inside_consumed(node, consumed):
                continue

            text = self.text_content(node, consumed).strip()
            match = DATE_PATTERN.search(text)
            if not match or len(text) >= MAX_DATE_TEXT_LENGTH:
                continue

            try:
                found = date.fromisoformat(match.group(1))
            except ValueError:
                # Date-shaped but not a calendar date (e.g. 2024-13-40)
                continue

            consumed.add(id(node))
            return found, node

        return None, None

    # ------------------------------------------------------------------
    # Text helpers
    # ------------------------------------------------------------------

    def text_content(self, node: Tag, consumed: Set[int]) -> str:
        """Raw concatenated text of ``node``, skipping consumed subtrees."""
        parts: List[str] = []
        for child in node.children:
            if isinstance(child, Tag):
                if id(child) in consumed:
                    continue
                parts.append(self.text_content(child, consumed))
            elif not isinstance(child, _NON_TEXT_NODES):
                parts.append(str(child))
        return "".join(parts)

    def rendered_text(self, node: Tag, consumed: Set[int]) -> str:
        """Tag-stripped text with block elements on their own lines, trimmed."""
        chunks: List[str] = []
        self._render(node, consumed, chunks)
        lines = [_LINE_WS.sub(" ", line).strip() for line in "".join(chunks).split("\n")]
        return _EXTRA_BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()

    def _render(self, node: Tag, consumed: Set[int], chunks: List[str]) -> None:
        for child in node.children:
            if isinstance(child, Tag):
                if id(child) in consumed or child.name in _UNRENDERED_TAGS:
                    continue
                if child.name == "br":
                    chunks.append("\n")
                    continue
                if child.name not in _BLOCK_TAGS:
                    self._render(child, consumed, chunks)
                    continue
                gap = "\n\n" if child.name in _PARAGRAPH_TAGS else "\n"
                chunks.append(gap)
                self._render(child, consumed, chunks)
                chunks.append(gap)
            elif not isinstance(child, _NON_TEXT_NODES):
                chunks.append(_INLINE_WS.sub(" ", str(child)))

    @staticmethod
    def _inside_consumed(node: Tag, consumed: Set[int]) -> bool:
        current = node
        while current is not None:
            if id(current) in consumed:
                return True
            current = current.parent
        return False


_default_extractor = FieldExtractor()


def extract_draft(document: str, fallback_date: date) -> DraftRecord:
    """Module-level convenience wrapper around a default ``FieldExtractor``."""
    return _default_extractor.extract(document, fallback_date)


__all__ = [
    "DATE_PATTERN",
    "MAX_DATE_TEXT_LENGTH",
    "FieldExtractor",
    "extract_draft",
]
