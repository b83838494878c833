from __future__ import annotations

from datetime import datetime
from typing import Iterable

from word_fridge.config import FreshnessPolicy
from word_fridge.models import FRESH, ROTTEN, WARNING, StatsSummary, WordItem
from word_fridge.scheduler.freshness import DEFAULT_POLICY, freshness


def get_stats(
    catalog: Iterable[WordItem],
    now: datetime,
    policy: FreshnessPolicy = DEFAULT_POLICY,
) -> StatsSummary:
    counts = {FRESH: 0, WARNING: 0, ROTTEN: 0}
    total = 0
    for item in catalog:
        counts[freshness(item, now, policy)] += 1
        total += 1

    return StatsSummary(
        total_items=total,
        fresh_count=counts[FRESH],
        warning_count=counts[WARNING],
        rotten_count=counts[ROTTEN],
        fresh_percentage=_percentage(counts[FRESH], total),
        warning_percentage=_percentage(counts[WARNING], total),
        rotten_percentage=_percentage(counts[ROTTEN], total),
    )


def _percentage(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(count * 100.0 / total, 1)
