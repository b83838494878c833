from __future__ import annotations

import threading

from word_fridge.errors import QuizNotFoundError
from word_fridge.models import QuizChallenge

DEFAULT_MAX_PENDING = 256


class QuizBook:
    """Outstanding challenges keyed by quiz id; the correct answer never leaves here.

    A challenge is single use: ``take`` removes it, so every answer, right or
    wrong, needs a freshly issued quiz.
    """

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self.max_pending = max(1, int(max_pending))
        self._lock = threading.Lock()
        self._pending: dict[str, QuizChallenge] = {}

    def issue(self, challenge: QuizChallenge) -> QuizChallenge:
        with self._lock:
            while len(self._pending) >= self.max_pending:
                # dicts keep insertion order, so the first key is the oldest quiz
                self._pending.pop(next(iter(self._pending)))
            self._pending[challenge.quiz_id] = challenge
        return challenge

    def take(self, quiz_id: str) -> QuizChallenge:
        with self._lock:
            challenge = self._pending.pop(quiz_id, None)
        if challenge is None:
            raise QuizNotFoundError(quiz_id)
        return challenge

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
