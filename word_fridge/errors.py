from __future__ import annotations


class FridgeError(Exception):
    """Base class for errors raised by the freshness engine."""


class InsufficientCatalogError(FridgeError, ValueError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"quiz needs {required} distinct items, catalog has {available}")
        self.required = required
        self.available = available


class WordNotFoundError(FridgeError, LookupError):
    def __init__(self, word_id: int) -> None:
        super().__init__(f"word {word_id} not found")
        self.word_id = word_id


class QuizNotFoundError(FridgeError, LookupError):
    def __init__(self, quiz_id: str) -> None:
        super().__init__(f"quiz {quiz_id} not found or already answered")
        self.quiz_id = quiz_id


class ConcurrentModificationError(FridgeError, RuntimeError):
    def __init__(self, word_id: int, reason: str = "concurrent review commit") -> None:
        super().__init__(f"word {word_id}: {reason}")
        self.word_id = word_id


class DuplicateLabelError(FridgeError, ValueError):
    def __init__(self, label_en: str) -> None:
        super().__init__(f"label already captured: {label_en}")
        self.label_en = label_en
