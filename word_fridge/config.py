from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
DB_PATH = DATA_DIR / "word_fridge.db"

DEFAULT_RANKS: tuple[tuple[int, str], ...] = (
    (0, "🥚 Dorm Student"),
    (200, "🍳 Home Cook"),
    (1000, "👨‍🍳 Master Chef"),
    (5000, "👑 Legend"),
)


@dataclass(frozen=True)
class FreshnessPolicy:
    fresh_days: float = 7.0
    rotten_days: float = 30.0
    level_bonus_days: float = 2.0

    def __post_init__(self) -> None:
        if self.fresh_days <= 0:
            raise ValueError("fresh_days must be positive")
        if self.rotten_days < self.fresh_days:
            raise ValueError("rotten_days must not be shorter than fresh_days")
        if self.level_bonus_days < 0:
            raise ValueError("level_bonus_days must not be negative")


@dataclass(frozen=True)
class XpPolicy:
    base_xp_per_item: int = 50
    per_level_xp: int = 20
    ranks: tuple[tuple[int, str], ...] = DEFAULT_RANKS

    def __post_init__(self) -> None:
        if self.base_xp_per_item < 0 or self.per_level_xp < 0:
            raise ValueError("xp rates must not be negative")
        if not self.ranks:
            raise ValueError("at least one rank is required")
        if self.ranks[0][0] != 0:
            raise ValueError("the first rank must start at 0 xp")
        thresholds = [threshold for threshold, _ in self.ranks]
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("rank thresholds must be strictly increasing")


@dataclass(frozen=True)
class ReviewPolicy:
    level_delta: int = 1
    quiz_options: int = 4

    def __post_init__(self) -> None:
        if self.level_delta < 1:
            raise ValueError("level_delta must be at least 1")
        if self.quiz_options < 2:
            raise ValueError("quiz_options must be at least 2")


@dataclass(frozen=True)
class Settings:
    db_path: Path = DB_PATH
    freshness: FreshnessPolicy = field(default_factory=FreshnessPolicy)
    xp: XpPolicy = field(default_factory=XpPolicy)
    review: ReviewPolicy = field(default_factory=ReviewPolicy)
    log_level: str = "INFO"


def load_settings() -> Settings:
    freshness = FreshnessPolicy(
        fresh_days=_env_float("WORD_FRIDGE_FRESH_DAYS", 7.0),
        rotten_days=_env_float("WORD_FRIDGE_ROTTEN_DAYS", 30.0),
        level_bonus_days=_env_float("WORD_FRIDGE_LEVEL_BONUS_DAYS", 2.0),
    )
    xp = XpPolicy(
        base_xp_per_item=_env_int("WORD_FRIDGE_BASE_XP", 50),
        per_level_xp=_env_int("WORD_FRIDGE_LEVEL_XP", 20),
    )
    review = ReviewPolicy(
        level_delta=_env_int("WORD_FRIDGE_LEVEL_DELTA", 1),
        quiz_options=_env_int("WORD_FRIDGE_QUIZ_OPTIONS", 4),
    )
    db_path = os.getenv("WORD_FRIDGE_DB_PATH", "").strip()
    return Settings(
        db_path=Path(db_path) if db_path else DB_PATH,
        freshness=freshness,
        xp=xp,
        review=review,
        log_level=os.getenv("WORD_FRIDGE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
