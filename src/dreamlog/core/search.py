"""
Dream search and tag cloud helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .models import Dream


@dataclass(frozen=True)
class TagCloud:
    people: Tuple[str, ...]
    tags: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not (self.people or self.tags)


def search_dreams(dreams: Sequence[Dream], term: str) -> List[Dream]:
    """
    Case-insensitive substring match over title, description, tags and people.

    A blank term matches everything.
    """
    if not term or not term.strip():
        return list(dreams)

    needle = term.lower()
    return [
        d for d in dreams
        if needle in d.title.lower()
        or needle in d.description.lower()
        or any(needle in tag.lower() for tag in d.tags)
        or any(needle in person.lower() for person in d.people)
    ]


def build_tag_cloud(dreams: Iterable[Dream], hidden_tags: Iterable[str] = ()) -> TagCloud:
    """Sorted distinct people and tags, minus anything the user has hidden."""
    hidden = set(hidden_tags)
    people = set()
    tags = set()
    for dream in dreams:
        people.update(dream.people)
        tags.update(dream.tags)
    return TagCloud(
        people=tuple(sorted(p for p in people if p not in hidden)),
        tags=tuple(sorted(t for t in tags if t not in hidden)),
    )


__all__ = ["TagCloud", "search_dreams", "build_tag_cloud"]
