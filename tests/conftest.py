from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import word_fridge.app as app_module
from word_fridge.config import Settings
from word_fridge.engine import FridgeEngine
from word_fridge.models import WordItem
from word_fridge.quiz.book import QuizBook
from word_fridge.storage.db import Database
from word_fridge.storage.memory import InMemoryStore

UTC = timezone.utc
NOW = datetime(2026, 2, 12, 9, 0, tzinfo=UTC)


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_item():
    def _make(word_id: int, label: str, *, level: int = 0, days_ago: float = 0, native: str | None = None) -> WordItem:
        reviewed = NOW - timedelta(days=days_ago)
        return WordItem(
            word_id=word_id,
            label_en=label,
            native_definition=native or f"{label.lower()}-def",
            last_reviewed_at=reviewed,
            created_at=reviewed - timedelta(days=1),
            proficiency_level=level,
        )

    return _make


@pytest.fixture()
def fridge_catalog(make_item):
    return [
        make_item(1, "Apple", level=0, days_ago=31),
        make_item(2, "Banana", level=5, days_ago=1),
        make_item(3, "Cabbage", level=0, days_ago=10),
        make_item(4, "Daikon", level=0, days_ago=0),
    ]


@pytest.fixture()
def memory_store(fridge_catalog):
    return InMemoryStore(fridge_catalog)


@pytest.fixture()
def memory_engine(memory_store):
    return FridgeEngine(memory_store, clock=lambda: NOW, rng=random.Random(7))


@pytest.fixture()
def temp_db(tmp_path):
    db = Database(tmp_path / "word_fridge_test.db")
    db.initialize()
    return db


@pytest.fixture()
def client(temp_db, monkeypatch):
    engine = FridgeEngine(temp_db, Settings(db_path=temp_db.db_path), clock=lambda: NOW, rng=random.Random(3))
    monkeypatch.setattr(app_module, "db", temp_db)
    monkeypatch.setattr(app_module, "engine", engine)
    monkeypatch.setattr(app_module, "quiz_book", QuizBook())
    with TestClient(app_module.app) as c:
        yield c
