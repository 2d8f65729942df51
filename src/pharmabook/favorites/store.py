"""Persistent set of favorite condition ids"""
from __future__ import annotations

import json
import logging
from typing import FrozenSet, Protocol, Set

from pharmabook.errors import FavoritesWriteError

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

FAVORITES_KEY = "pharmabook_favorites"


class FavoritesStore(Protocol):
    def load(self) -> FrozenSet[str]: ...

    def toggle(self, condition_id: str) -> bool: ...

    def count(self) -> int: ...

    def contains(self, condition_id: str) -> bool: ...

    def ids(self) -> FrozenSet[str]: ...


def decode_favorites(raw: str | None) -> Set[str]:
    """Parse the stored JSON array; anything unexpected reads as empty."""
    if raw is None:
        return set()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored favorites are not valid JSON; starting empty")
        return set()
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        logger.warning("Stored favorites are not a list of ids; starting empty")
        return set()
    return set(data)


class KeyValueFavoritesStore:
    def __init__(self, storage: KeyValueStorage, key: str = FAVORITES_KEY):
        self.storage = storage
        self.key = key
        self._ids: Set[str] = set()

    def load(self) -> FrozenSet[str]:
        try:
            raw = self.storage.get_item(self.key)
        except OSError as e:
            logger.warning(f"Could not read favorites: {e}")
            raw = None
        self._ids = decode_favorites(raw)
        logger.debug(f"Loaded {len(self._ids)} favorites")
        return frozenset(self._ids)

    def toggle(self, condition_id: str) -> bool:
        """
        Flip membership and persist the whole set before returning.

        Returns the new membership. If the write fails the in-memory set is
        restored and FavoritesWriteError is raised.
        """
        updated = set(self._ids)
        if condition_id in updated:
            updated.discard(condition_id)
        else:
            updated.add(condition_id)

        try:
            self.storage.set_item(self.key, json.dumps(sorted(updated), ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to persist favorites, keeping previous set: {e}")
            raise FavoritesWriteError(f"Could not save favorites: {e}") from e

        self._ids = updated
        return condition_id in updated

    def count(self) -> int:
        return len(self._ids)

    def contains(self, condition_id: str) -> bool:
        return condition_id in self._ids

    def ids(self) -> FrozenSet[str]:
        return frozenset(self._ids)
