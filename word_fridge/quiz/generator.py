from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Iterable

from word_fridge.errors import InsufficientCatalogError, WordNotFoundError
from word_fridge.models import QuizChallenge, QuizOption, WordItem, as_utc

UTC = timezone.utc
DEFAULT_OPTION_COUNT = 4
logger = logging.getLogger(__name__)


def generate_quiz(
    catalog: Iterable[WordItem],
    target_word_id: int,
    k: int = DEFAULT_OPTION_COUNT,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> QuizChallenge:
    """Build a k-option multiple choice challenge for ``target_word_id``.

    One option is the target, the other ``k - 1`` are distinct catalog items
    drawn at random. Options are shuffled, so the correct id never leaks
    through position.
    """
    if k < 2:
        raise ValueError("a quiz needs at least 2 options")
    rng = rng or random.Random()
    now = as_utc(now or datetime.now(UTC))

    distinct: dict[int, WordItem] = {}
    for item in catalog:
        distinct.setdefault(item.word_id, item)

    target = distinct.get(target_word_id)
    if target is None:
        raise WordNotFoundError(target_word_id)
    if len(distinct) < k:
        raise InsufficientCatalogError(required=k, available=len(distinct))

    others = [item for word_id, item in distinct.items() if word_id != target_word_id]
    distractors = rng.sample(others, k - 1)
    options = [QuizOption(word_id=item.word_id, text=item.display_text()) for item in [target, *distractors]]
    rng.shuffle(options)

    challenge = QuizChallenge(
        quiz_id=uuid.uuid4().hex,
        target_word_id=target.word_id,
        prompt=_prompt(target),
        options=tuple(options),
        issued_at=now,
        baseline_level=target.proficiency_level,
        baseline_reviewed_at=as_utc(target.last_reviewed_at),
    )
    logger.debug("quiz %s issued for word %s with options %s", challenge.quiz_id, target.word_id, challenge.option_ids())
    return challenge


def _prompt(target: WordItem) -> str:
    if target.emoji:
        return f"{target.emoji} {target.label_en}"
    return target.label_en
