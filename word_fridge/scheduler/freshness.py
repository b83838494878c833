from __future__ import annotations

from datetime import datetime

from word_fridge.config import FreshnessPolicy
from word_fridge.models import FRESH, ROTTEN, WARNING, WordItem, as_utc

SECONDS_PER_DAY = 86400.0
DEFAULT_POLICY = FreshnessPolicy()


def elapsed_days(item: WordItem, now: datetime) -> float:
    delta = as_utc(now) - as_utc(item.last_reviewed_at)
    return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)


def days_since_review(item: WordItem, now: datetime) -> int:
    return int(elapsed_days(item, now))


def freshness_windows(proficiency_level: int, policy: FreshnessPolicy = DEFAULT_POLICY) -> tuple[float, float]:
    bonus = max(0, int(proficiency_level)) * policy.level_bonus_days
    return policy.fresh_days + bonus, policy.rotten_days + bonus


def freshness(item: WordItem, now: datetime, policy: FreshnessPolicy = DEFAULT_POLICY) -> str:
    """Derive the freshness state of ``item`` at ``now``.

    Both windows widen with proficiency, so a well-known word tolerates a
    longer gap before it turns. For a fixed level the result only moves
    FRESH -> WARNING -> ROTTEN as time passes; a review commit resetting
    ``last_reviewed_at`` is the only way back.
    """
    fresh_window, rotten_window = freshness_windows(item.proficiency_level, policy)
    elapsed = elapsed_days(item, now)
    if elapsed < fresh_window:
        return FRESH
    if elapsed < rotten_window:
        return WARNING
    return ROTTEN
