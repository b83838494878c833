from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Mapping

from word_fridge.config import DB_PATH
from word_fridge.errors import DuplicateLabelError, WordNotFoundError
from word_fridge.models import WordItem, as_utc
from word_fridge.storage.base import capture_values, check_review_fields, label_key

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: Path = DB_PATH, *, timeout: float = 5.0) -> None:
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def connect(self):
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize(self) -> None:
        schema_path = Path(__file__).with_name("schema.sql")
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(schema_path.read_text(encoding="utf-8"))

    def list_items(self) -> list[WordItem]:
        with self.connect() as conn:
            rows = conn.execute("SELECT * FROM word_items ORDER BY word_id ASC").fetchall()
        return [_decode_item(row) for row in rows]

    def get_item(self, word_id: int) -> WordItem | None:
        with self.connect() as conn:
            row = conn.execute("SELECT * FROM word_items WHERE word_id = ?", (word_id,)).fetchone()
        return _decode_item(row) if row else None

    def find_by_label(self, label_en: str) -> WordItem | None:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT * FROM word_items WHERE label_key = ?", (label_key(label_en),)
            ).fetchone()
        return _decode_item(row) if row else None

    def insert_item(self, fields: Mapping[str, object], now: datetime) -> WordItem:
        values = capture_values(fields)
        stamp = as_utc(now).isoformat()
        try:
            with self.connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO word_items
                    (
                      label_en, label_key, native_definition, language_code, translated_word,
                      example_sentence, emoji, image_path, proficiency_level, review_count,
                      last_reviewed_at, created_at, version
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, 0, ?, ?, 1)
                    """,
                    (
                        values["label_en"],
                        label_key(values["label_en"]),
                        values["native_definition"],
                        values["language_code"],
                        values["translated_word"],
                        values["example_sentence"],
                        values["emoji"],
                        values["image_path"],
                        stamp,
                        stamp,
                    ),
                )
                row = conn.execute("SELECT * FROM word_items WHERE word_id = ?", (cursor.lastrowid,)).fetchone()
        except sqlite3.IntegrityError as exc:
            raise DuplicateLabelError(values["label_en"]) from exc
        if row is None:
            raise RuntimeError("failed to create word item")
        return _decode_item(row)

    def compare_and_set(self, word_id: int, expected_version: int, **fields: object) -> WordItem | None:
        with self.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            current = conn.execute("SELECT * FROM word_items WHERE word_id = ?", (word_id,)).fetchone()
            if current is None:
                raise WordNotFoundError(word_id)
            item = _decode_item(current)
            if item.version != expected_version:
                logger.debug("version mismatch on word %s: expected %s, found %s", word_id, expected_version, item.version)
                return None
            check_review_fields(item, fields)

            values = {key: _encode_value(value) for key, value in fields.items()}
            assignments = ", ".join(f"{key} = ?" for key in values)
            set_clause = f"{assignments}, version = version + 1" if assignments else "version = version + 1"
            cursor = conn.execute(
                f"UPDATE word_items SET {set_clause} WHERE word_id = ? AND version = ?",
                (*values.values(), word_id, expected_version),
            )
            if cursor.rowcount != 1:
                return None
            row = conn.execute("SELECT * FROM word_items WHERE word_id = ?", (word_id,)).fetchone()
        return _decode_item(row) if row else None


def _decode_item(row: sqlite3.Row) -> WordItem:
    return WordItem(
        word_id=int(row["word_id"]),
        label_en=str(row["label_en"]),
        native_definition=str(row["native_definition"]),
        language_code=str(row["language_code"]),
        translated_word=str(row["translated_word"]),
        example_sentence=str(row["example_sentence"]),
        emoji=row["emoji"],
        image_path=row["image_path"],
        proficiency_level=int(row["proficiency_level"]),
        review_count=int(row["review_count"]),
        last_reviewed_at=_parse_dt(row["last_reviewed_at"]),
        created_at=_parse_dt(row["created_at"]),
        version=int(row["version"]),
    )


def _encode_value(value: object) -> object:
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    return value


def _parse_dt(value: object) -> datetime:
    text = str(value or "").strip()
    if not text:
        raise ValueError("missing timestamp")
    return as_utc(datetime.fromisoformat(text))
