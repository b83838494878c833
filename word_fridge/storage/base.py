from __future__ import annotations

from datetime import datetime
from typing import Mapping, Protocol

from word_fridge.models import (
    DEFAULT_EMOJI,
    DEFAULT_EXAMPLE,
    DEFAULT_LANGUAGE,
    DEFAULT_TRANSLATION,
    WordItem,
)

REVIEW_FIELDS = ("proficiency_level", "review_count", "last_reviewed_at")


class WordStore(Protocol):
    """Catalog of captured words.

    ``compare_and_set`` is the only write path after capture. It applies
    ``fields`` only while the stored ``version`` still equals
    ``expected_version`` and returns the updated item, or ``None`` when the
    version moved on. Unknown ids raise ``WordNotFoundError``.

    Labels are matched on ``label_key``, so lookups and the uniqueness check
    ignore extra whitespace and Unicode case in every store.
    """

    def list_items(self) -> list[WordItem]: ...

    def get_item(self, word_id: int) -> WordItem | None: ...

    def find_by_label(self, label_en: str) -> WordItem | None: ...

    def insert_item(self, fields: Mapping[str, object], now: datetime) -> WordItem: ...

    def compare_and_set(self, word_id: int, expected_version: int, **fields: object) -> WordItem | None: ...


def check_review_fields(current: WordItem, fields: Mapping[str, object]) -> None:
    unknown = set(fields) - set(REVIEW_FIELDS)
    if unknown:
        raise ValueError(f"fields not updatable: {', '.join(sorted(unknown))}")
    level = fields.get("proficiency_level")
    if level is not None and int(level) < current.proficiency_level:
        raise ValueError("proficiency_level cannot decrease")


def capture_values(fields: Mapping[str, object]) -> dict:
    label = _clean_text(fields.get("label_en"))
    if not label:
        raise ValueError("label_en is empty")
    return {
        "label_en": label,
        "native_definition": _clean_text(fields.get("native_definition")) or label,
        "language_code": _clean_text(fields.get("language_code")) or DEFAULT_LANGUAGE,
        "translated_word": _clean_text(fields.get("translated_word")) or DEFAULT_TRANSLATION,
        "example_sentence": _clean_text(fields.get("example_sentence")) or DEFAULT_EXAMPLE,
        "emoji": _clean_text(fields.get("emoji")) or DEFAULT_EMOJI,
        "image_path": _clean_text(fields.get("image_path")) or None,
    }


def label_key(value: object) -> str:
    """Lookup key for a label: whitespace collapsed, Unicode case folded."""
    return _clean_text(value).casefold()


def _clean_text(value: object) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split()).strip()
