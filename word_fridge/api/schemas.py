from __future__ import annotations

from pydantic import BaseModel, Field


class CaptureRequest(BaseModel):
    label_en: str = Field(min_length=1, max_length=120)
    native_definition: str | None = Field(default=None, max_length=200)
    language_code: str = Field(default="en", min_length=2, max_length=16)
    translated_word: str | None = Field(default=None, max_length=120)
    example_sentence: str | None = Field(default=None, max_length=500)
    emoji: str | None = Field(default=None, max_length=16)
    image_path: str | None = Field(default=None, max_length=300)


class AnswerRequest(BaseModel):
    selected_word_id: int = Field(ge=1)
