from __future__ import annotations

from typing import Iterable

from word_fridge.config import XpPolicy
from word_fridge.models import RankProgress, WordItem

DEFAULT_POLICY = XpPolicy()


def total_xp(catalog: Iterable[WordItem], policy: XpPolicy = DEFAULT_POLICY) -> int:
    items = list(catalog)
    levels = sum(max(0, item.proficiency_level) for item in items)
    return policy.base_xp_per_item * len(items) + policy.per_level_xp * levels


def review_xp(level_delta: int, policy: XpPolicy = DEFAULT_POLICY) -> int:
    return policy.per_level_xp * level_delta


def rank_for_xp(xp: int, policy: XpPolicy = DEFAULT_POLICY) -> RankProgress:
    ranks = policy.ranks
    index = 0
    for i, (threshold, _) in enumerate(ranks):
        if threshold <= xp:
            index = i
        else:
            break

    current_xp, current_title = ranks[index]
    if index + 1 >= len(ranks):
        # top rank: nothing left to climb
        return RankProgress(
            total_xp=xp,
            current_title=current_title,
            next_title=current_title,
            current_level_xp=current_xp,
            next_level_xp=current_xp,
            progress_percentage=100.0,
        )

    next_xp, next_title = ranks[index + 1]
    progress = (xp - current_xp) / (next_xp - current_xp) * 100
    return RankProgress(
        total_xp=xp,
        current_title=current_title,
        next_title=next_title,
        current_level_xp=current_xp,
        next_level_xp=next_xp,
        progress_percentage=round(min(100.0, max(0.0, progress)), 2),
    )


def rank_progress(catalog: Iterable[WordItem], policy: XpPolicy = DEFAULT_POLICY) -> RankProgress:
    return rank_for_xp(total_xp(catalog, policy), policy)
