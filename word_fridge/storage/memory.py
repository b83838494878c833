from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Mapping

from word_fridge.errors import DuplicateLabelError, WordNotFoundError
from word_fridge.models import WordItem, as_utc
from word_fridge.storage.base import capture_values, check_review_fields, label_key


class InMemoryStore:
    """Process-local word store with the same contract as ``Database``."""

    def __init__(self, items: Iterable[WordItem] = ()) -> None:
        self._lock = threading.Lock()
        self._items: dict[int, WordItem] = {}
        for item in items:
            self._items[item.word_id] = item
        self._next_id = max(self._items, default=0) + 1

    def list_items(self) -> list[WordItem]:
        with self._lock:
            return [self._items[key] for key in sorted(self._items)]

    def get_item(self, word_id: int) -> WordItem | None:
        with self._lock:
            return self._items.get(word_id)

    def find_by_label(self, label_en: str) -> WordItem | None:
        wanted = label_key(label_en)
        with self._lock:
            for item in self._items.values():
                if label_key(item.label_en) == wanted:
                    return item
        return None

    def insert_item(self, fields: Mapping[str, object], now: datetime) -> WordItem:
        values = capture_values(fields)
        stamp = as_utc(now)
        with self._lock:
            wanted = label_key(values["label_en"])
            if any(label_key(item.label_en) == wanted for item in self._items.values()):
                raise DuplicateLabelError(values["label_en"])
            item = WordItem(
                word_id=self._next_id,
                last_reviewed_at=stamp,
                created_at=stamp,
                **values,
            )
            self._items[item.word_id] = item
            self._next_id += 1
        return item

    def compare_and_set(self, word_id: int, expected_version: int, **fields: object) -> WordItem | None:
        with self._lock:
            current = self._items.get(word_id)
            if current is None:
                raise WordNotFoundError(word_id)
            if current.version != expected_version:
                return None
            check_review_fields(current, fields)
            if isinstance(fields.get("last_reviewed_at"), datetime):
                fields["last_reviewed_at"] = as_utc(fields["last_reviewed_at"])
            updated = replace(current, version=current.version + 1, **fields)
            self._items[word_id] = updated
        return updated
