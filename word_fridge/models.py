from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone

UTC = timezone.utc

FRESH = "FRESH"
WARNING = "WARNING"
ROTTEN = "ROTTEN"
FRESHNESS_STATES = (FRESH, WARNING, ROTTEN)

DEFAULT_EMOJI = "📦"
DEFAULT_TRANSLATION = "???"
DEFAULT_EXAMPLE = "No example available."
DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class WordItem:
    word_id: int
    label_en: str
    native_definition: str
    last_reviewed_at: datetime
    created_at: datetime
    language_code: str = DEFAULT_LANGUAGE
    translated_word: str = DEFAULT_TRANSLATION
    example_sentence: str = DEFAULT_EXAMPLE
    emoji: str | None = DEFAULT_EMOJI
    image_path: str | None = None
    proficiency_level: int = 0
    review_count: int = 0
    version: int = 1

    def display_text(self) -> str:
        return self.native_definition or self.label_en

    def to_dict(self) -> dict:
        data = asdict(self)
        data["last_reviewed_at"] = self.last_reviewed_at.isoformat()
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass(frozen=True)
class ItemView:
    item: WordItem
    freshness: str
    days_since_review: int

    def to_dict(self) -> dict:
        return {**self.item.to_dict(), "freshness": self.freshness, "days_since_review": self.days_since_review}


@dataclass(frozen=True)
class StatsSummary:
    total_items: int
    fresh_count: int
    warning_count: int
    rotten_count: int
    fresh_percentage: float
    warning_percentage: float
    rotten_percentage: float

    @property
    def percentages(self) -> dict[str, float]:
        return {
            FRESH: self.fresh_percentage,
            WARNING: self.warning_percentage,
            ROTTEN: self.rotten_percentage,
        }


@dataclass(frozen=True)
class RankProgress:
    total_xp: int
    current_title: str
    next_title: str
    current_level_xp: int
    next_level_xp: int
    progress_percentage: float


@dataclass(frozen=True)
class QuizOption:
    word_id: int
    text: str


@dataclass(frozen=True)
class QuizChallenge:
    quiz_id: str
    target_word_id: int
    prompt: str
    options: tuple[QuizOption, ...]
    issued_at: datetime
    baseline_level: int
    baseline_reviewed_at: datetime

    def option_ids(self) -> list[int]:
        return [option.word_id for option in self.options]

    def to_public_dict(self) -> dict:
        return {
            "quiz_id": self.quiz_id,
            "question": self.prompt,
            "options": [{"word_id": option.word_id, "text": option.text} for option in self.options],
            "issued_at": self.issued_at.isoformat(),
        }


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    xp_delta: int = 0
    updated_item: WordItem | None = None
    freshness: str | None = None


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
