"""
Interview practice and learning content models for Adducation
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class InterviewEvaluation(BaseModel):
    """Structured feedback on a practice interview answer."""

    score: float = Field(..., ge=1, le=10)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    overall_feedback: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = float(value.split("/")[0].strip())
        if isinstance(value, (int, float)):
            return min(10, max(1, value))
        return value

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @classmethod
    def neutral(cls, feedback: str) -> "InterviewEvaluation":
        """Default evaluation when the model's reply could not be parsed."""
        return cls(
            score=7,
            strengths=["Response provided"],
            improvements=["Could be more detailed"],
            overall_feedback=feedback,
        )


GENERIC_RECOMMENDATIONS = [
    "Focus on building practical projects",
    "Join relevant online communities",
    "Practice coding challenges daily",
    "Read industry blogs and documentation",
    "Attend virtual meetups and webinars",
]


class LearningRecommendations(BaseModel):
    """Personalised learning recommendations."""

    recommendations: list[str] = Field(default_factory=list)

    @field_validator("recommendations", mode="before")
    @classmethod
    def _flatten(cls, value: Any) -> Any:
        # Some models return [{"title": ..., "description": ...}, ...]
        if not isinstance(value, list):
            return value
        flattened = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("title") or item.get("recommendation") or item.get("description") or ""
            if str(item).strip():
                flattened.append(str(item).strip())
        return flattened

    @classmethod
    def generic(cls) -> "LearningRecommendations":
        return cls(recommendations=list(GENERIC_RECOMMENDATIONS))
