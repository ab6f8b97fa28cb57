"""
Quiz models for Adducation
"""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class QuizDifficulty(str, Enum):
    """Quiz difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class QuizQuestion(BaseModel):
    """A single multiple-choice question produced by the LLM."""

    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(
        default=0, ge=0,
        description="Zero-based index into options"
    )
    explanation: str = ""

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _coerce_answer(cls, value: Any) -> Any:
        # Models sometimes answer with a letter ("B") or a numeric string
        if isinstance(value, str):
            text = value.strip()
            if re.fullmatch(r"[A-Da-d]", text):
                return ord(text.upper()) - ord("A")
            if text.isdigit():
                return int(text)
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _stringify_options(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(v) for v in value]
        return value

    @model_validator(mode="after")
    def _answer_in_range(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for "
                f"{len(self.options)} options"
            )
        return self
