"""
Dream Journal
=============
Application-owned state: the dream collection and the hidden-tag list.

Every mutation builds a new sorted collection and hands it to the store in
one ``replace`` call. Readers get snapshots (tuples), never the live list.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .config import DreamLogConfig
from .exceptions import DreamNotFoundError
from .models import Dream, sort_newest_first


class DreamJournal:
    """Owns the dream collection and hidden tags; persists through injected stores."""

    def __init__(self, store, tag_store=None):
        self.store = store
        self.tag_store = tag_store
        self._dreams: Tuple[Dream, ...] = ()
        self._hidden_tags: Tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: DreamLogConfig) -> "DreamJournal":
        from ..storage import JsonDreamStore, JsonTagStore

        journal = cls(
            store=JsonDreamStore(config.paths.dreams_file),
            tag_store=JsonTagStore(config.paths.hidden_tags_file),
        )
        journal.load()
        return journal

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    @property
    def dreams(self) -> Tuple[Dream, ...]:
        return self._dreams

    def __len__(self) -> int:
        return len(self._dreams)

    def load(self) -> None:
        self._dreams = tuple(sort_newest_first(self.store.load()))
        if self.tag_store is not None:
            self._hidden_tags = tuple(self.tag_store.load())
        logger.debug(
            f"[DreamJournal] Loaded {len(self._dreams)} dreams, "
            f"{len(self._hidden_tags)} hidden tags"
        )

    def get(self, dream_id: str) -> Dream:
        for dream in self._dreams:
            if dream.id == dream_id:
                return dream
        raise DreamNotFoundError(dream_id)

    def add(self, dream: Dream) -> None:
        self._save([*self._dreams, dream])

    def add_many(self, dreams: Iterable[Dream]) -> int:
        """Append a batch in a single replace. Returns the number appended."""
        batch = list(dreams)
        if batch:
            self._save([*self._dreams, *batch])
        return len(batch)

    def update(self, dream: Dream) -> None:
        if not any(d.id == dream.id for d in self._dreams):
            raise DreamNotFoundError(dream.id)
        self._save([dream if d.id == dream.id else d for d in self._dreams])

    def delete(self, dream_id: str) -> None:
        remaining = [d for d in self._dreams if d.id != dream_id]
        if len(remaining) == len(self._dreams):
            raise DreamNotFoundError(dream_id)
        self._save(remaining)

    def _save(self, dreams: List[Dream]) -> None:
        snapshot = tuple(sort_newest_first(dreams))
        self._dreams = snapshot
        self.store.replace(list(snapshot))

    # ------------------------------------------------------------------
    # Hidden tags
    # ------------------------------------------------------------------

    @property
    def hidden_tags(self) -> Tuple[str, ...]:
        return self._hidden_tags

    def hide_tag(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self._hidden_tags:
            return False
        self._save_hidden_tags((*self._hidden_tags, tag))
        return True

    def unhide_tag(self, tag: str) -> bool:
        if tag not in self._hidden_tags:
            return False
        self._save_hidden_tags(tuple(t for t in self._hidden_tags if t != tag))
        return True

    def _save_hidden_tags(self, tags: Tuple[str, ...]) -> None:
        self._hidden_tags = tags
        if self.tag_store is not None:
            self.tag_store.replace(list(tags))


__all__ = ["DreamJournal"]
