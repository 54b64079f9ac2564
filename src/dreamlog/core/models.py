"""
Dream Data Model
================
Records that flow through ingestion, storage and the window engine.

Dream            – a logged entry, owned by the journal
DraftRecord      – extractor output, never persisted
EnrichmentResult – best-effort title/tags/people from the enrichment provider
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import ValidationError


DEFAULT_TITLE = "Untitled Dream"


def unique_labels(
    labels: Optional[Iterable[Any]],
    limit: Optional[int] = None,
    field_name: str = "labels",
) -> Tuple[str, ...]:
    """
    Normalize a label list: trim, drop blanks, drop exact duplicates.

    First occurrence wins, so insertion order is preserved.

    Raises:
        ValidationError: If ``labels`` is a bare string or not iterable.
    """
    if labels is not None and (isinstance(labels, (str, bytes)) or not isinstance(labels, Iterable)):
        raise ValidationError(field_name, "Expected a list of labels", value=labels)
    seen: List[str] = []
    for label in labels or ():
        if label is None:
            continue
        text = str(label).strip()
        if not text or text in seen:
            continue
        seen.append(text)
        if limit is not None and len(seen) >= limit:
            break
    return tuple(seen)


def parse_dream_date(value: Any, field_name: str = "date") -> date:
    """Coerce an ISO ``YYYY-MM-DD`` string (or date/datetime) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(field_name, "Expected a YYYY-MM-DD date", value=value)


def new_dream_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Dream:
    """A single logged dream. Edits produce a new instance with the same id."""
    id: str
    date: date
    title: str
    description: str
    tags: Tuple[str, ...] = ()
    people: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        description: str,
        dream_date: date,
        title: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        people: Optional[Iterable[str]] = None,
        dream_id: Optional[str] = None,
    ) -> "Dream":
        """
        Build a validated dream.

        Blank titles fall back to ``DEFAULT_TITLE``; tags and people are
        de-duplicated. An empty description is rejected.

        Raises:
            ValidationError: If the description is empty, a field has the wrong
                type or the date is invalid.
        """
        if description is not None and not isinstance(description, str):
            raise ValidationError("description", "Expected text", value=description)
        if title is not None and not isinstance(title, str):
            raise ValidationError("title", "Expected text", value=title)

        text = (description or "").strip()
        if not text:
            raise ValidationError("description", "A dream needs a non-empty description")

        return cls(
            id=dream_id or new_dream_id(),
            date=parse_dream_date(dream_date),
            title=(title or "").strip() or DEFAULT_TITLE,
            description=text,
            tags=unique_labels(tags, field_name="tags"),
            people=unique_labels(people, field_name="people"),
        )

    def edited(self, **changes: Any) -> "Dream":
        """Return a replacement record; ``id`` is never changed."""
        if "id" in changes and changes["id"] != self.id:
            raise ValidationError("id", "Dream ids are immutable", value=changes["id"])
        changes.pop("id", None)
        updated = replace(self, **changes)
        return Dream.create(
            description=updated.description,
            dream_date=updated.date,
            title=updated.title,
            tags=updated.tags,
            people=updated.people,
            dream_id=self.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "people": list(self.people),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dream":
        """
        Deserialize a stored dream.

        Raises:
            ValidationError: If required fields are missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValidationError("dream", "Expected an object", value=data)
        dream_id = data.get("id")
        if not dream_id:
            raise ValidationError("id", "Stored dream has no id", value=data)
        return cls.create(
            description=data.get("description", ""),
            dream_date=parse_dream_date(data.get("date")),
            title=data.get("title"),
            tags=data.get("tags"),
            people=data.get("people"),
            dream_id=str(dream_id),
        )


@dataclass(frozen=True)
class DraftRecord:
    """Structured fields pulled from one imported document."""
    title: str
    date: date
    description: str

    @property
    def has_title(self) -> bool:
        return self.title != DEFAULT_TITLE

    @property
    def is_usable(self) -> bool:
        return bool(self.description)


@dataclass(frozen=True)
class EnrichmentResult:
    """Best-effort derived fields; any of them may be empty."""
    title: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    people: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "EnrichmentResult":
        return cls()

    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        max_tags: Optional[int] = None,
        max_people: Optional[int] = None,
    ) -> "EnrichmentResult":
        title = payload.get("title") or ""
        tags = payload.get("tags") or []
        people = payload.get("people") or []
        if isinstance(tags, str):
            tags = [tags]
        if isinstance(people, str):
            people = [people]
        if not isinstance(tags, (list, tuple)):
            tags = []
        if not isinstance(people, (list, tuple)):
            people = []
        return cls(
            title=str(title).strip(),
            tags=unique_labels(tags, limit=max_tags),
            people=unique_labels(people, limit=max_people),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.tags or self.people)


def sort_newest_first(dreams: Iterable[Dream]) -> List[Dream]:
    """Stable sort by dream date, most recent first."""
    return sorted(dreams, key=lambda d: d.date, reverse=True)


__all__ = [
    "DEFAULT_TITLE",
    "Dream",
    "DraftRecord",
    "EnrichmentResult",
    "unique_labels",
    "parse_dream_date",
    "new_dream_id",
    "sort_newest_first",
]
