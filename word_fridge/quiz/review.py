from __future__ import annotations

import logging
from datetime import datetime

from word_fridge.config import FreshnessPolicy, ReviewPolicy, XpPolicy
from word_fridge.errors import ConcurrentModificationError, WordNotFoundError
from word_fridge.models import AnswerResult, QuizChallenge, WordItem, as_utc
from word_fridge.progression.xp import review_xp
from word_fridge.scheduler.freshness import freshness
from word_fridge.storage.base import WordStore

COMMIT_ATTEMPTS = 2
logger = logging.getLogger(__name__)


def submit_answer(
    store: WordStore,
    challenge: QuizChallenge,
    selected_word_id: int,
    *,
    now: datetime,
    review: ReviewPolicy | None = None,
    xp: XpPolicy | None = None,
    freshness_policy: FreshnessPolicy | None = None,
) -> AnswerResult:
    review = review or ReviewPolicy()
    xp = xp or XpPolicy()
    freshness_policy = freshness_policy or FreshnessPolicy()

    if int(selected_word_id) != challenge.target_word_id:
        logger.info(
            "quiz %s: wrong answer %s for word %s",
            challenge.quiz_id,
            selected_word_id,
            challenge.target_word_id,
        )
        return AnswerResult(correct=False)

    updated = commit_review(store, challenge, now=now, level_delta=review.level_delta)
    return AnswerResult(
        correct=True,
        xp_delta=review_xp(review.level_delta, xp),
        updated_item=updated,
        freshness=freshness(updated, now, freshness_policy),
    )


def commit_review(store: WordStore, challenge: QuizChallenge, *, now: datetime, level_delta: int) -> WordItem:
    """Advance the challenge target by ``level_delta`` and stamp it reviewed.

    The write is a compare-and-set on the item version. A conflict is retried
    once from a fresh read, but only while the item still sits at the review
    baseline the challenge was issued against; anything else means another
    commit already credited it.
    """
    word_id = challenge.target_word_id
    now = as_utc(now)

    for attempt in range(1, COMMIT_ATTEMPTS + 1):
        current = store.get_item(word_id)
        if current is None:
            raise WordNotFoundError(word_id)
        if not _at_baseline(current, challenge):
            raise ConcurrentModificationError(word_id, "already reviewed since the quiz was issued")

        updated = store.compare_and_set(
            word_id,
            current.version,
            proficiency_level=current.proficiency_level + level_delta,
            review_count=current.review_count + 1,
            last_reviewed_at=now,
        )
        if updated is not None:
            logger.info(
                "word %s reviewed: level %s -> %s",
                word_id,
                current.proficiency_level,
                updated.proficiency_level,
            )
            return updated
        logger.warning("review commit conflict on word %s (attempt %s)", word_id, attempt)

    raise ConcurrentModificationError(word_id)


def _at_baseline(item: WordItem, challenge: QuizChallenge) -> bool:
    return (
        item.proficiency_level == challenge.baseline_level
        and as_utc(item.last_reviewed_at) == challenge.baseline_reviewed_at
    )
