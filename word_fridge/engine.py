from __future__ import annotations

import logging
import random
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Callable, Mapping

from word_fridge.config import Settings
from word_fridge.errors import DuplicateLabelError, WordNotFoundError
from word_fridge.models import AnswerResult, ItemView, QuizChallenge, RankProgress, StatsSummary, WordItem, as_utc
from word_fridge.progression.xp import rank_progress
from word_fridge.quiz.generator import generate_quiz
from word_fridge.quiz.review import submit_answer
from word_fridge.scheduler.freshness import days_since_review, freshness
from word_fridge.stats.aggregator import get_stats
from word_fridge.storage.base import WordStore, label_key

UTC = timezone.utc
logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class FridgeEngine:
    """Entry point for the calling layer.

    Each call captures one ``now`` from the clock and, where it needs the
    catalog, one snapshot from the store; every derived value in the call is
    computed from that pair.
    """

    def __init__(
        self,
        store: WordStore,
        settings: Settings | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.clock = clock or _utc_now
        self.rng = rng or random.Random()

    def now(self) -> datetime:
        return as_utc(self.clock())

    def get_freshness_status(self, item: WordItem, now: datetime | None = None) -> str:
        return freshness(item, now or self.now(), self.settings.freshness)

    def view(self, item: WordItem, now: datetime) -> ItemView:
        return ItemView(
            item=item,
            freshness=freshness(item, now, self.settings.freshness),
            days_since_review=days_since_review(item, now),
        )

    def list_items(self, now: datetime | None = None) -> list[ItemView]:
        now = now or self.now()
        catalog = sorted(self.store.list_items(), key=lambda item: (item.last_reviewed_at, item.word_id))
        return [self.view(item, now) for item in catalog]

    def get_item(self, word_id: int, now: datetime | None = None) -> ItemView:
        item = self.store.get_item(word_id)
        if item is None:
            raise WordNotFoundError(word_id)
        return self.view(item, now or self.now())

    def capture(self, fields: Mapping[str, object]) -> tuple[WordItem, bool]:
        """Get-or-create by label; the flag is ``True`` when a new item was stored."""
        label = label_key(fields.get("label_en"))
        existing = self.store.find_by_label(label) if label else None
        if existing is not None:
            return existing, False
        try:
            item = self.store.insert_item(fields, self.now())
        except DuplicateLabelError:
            existing = self.store.find_by_label(label)
            if existing is None:
                raise
            return existing, False
        logger.info("captured word %s (%s)", item.word_id, item.label_en)
        return item, True

    def get_stats(self, now: datetime | None = None) -> StatsSummary:
        return get_stats(self.store.list_items(), now or self.now(), self.settings.freshness)

    def get_rank(self) -> RankProgress:
        return rank_progress(self.store.list_items(), self.settings.xp)

    def get_profile(self, now: datetime | None = None) -> dict:
        now = now or self.now()
        catalog = self.store.list_items()
        stats = get_stats(catalog, now, self.settings.freshness)
        rank = rank_progress(catalog, self.settings.xp)
        return {**asdict(rank), **asdict(stats), "percentages": stats.percentages}

    def generate_quiz(self, target_word_id: int, k: int | None = None) -> QuizChallenge:
        return generate_quiz(
            self.store.list_items(),
            target_word_id,
            self.settings.review.quiz_options if k is None else k,
            rng=self.rng,
            now=self.now(),
        )

    def submit_answer(self, challenge: QuizChallenge, selected_word_id: int) -> AnswerResult:
        return submit_answer(
            self.store,
            challenge,
            selected_word_id,
            now=self.now(),
            review=self.settings.review,
            xp=self.settings.xp,
            freshness_policy=self.settings.freshness,
        )
