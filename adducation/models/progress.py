"""
Gamification models for Adducation

Defines user progress, the achievement catalog, and the XP → level rule.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


XP_PER_LEVEL = 100


def level_for_xp(total_xp: int) -> int:
    """Level reached with the given XP: floor(xp / 100) + 1."""
    return max(total_xp, 0) // XP_PER_LEVEL + 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Achievement(BaseModel):
    """A static catalog entry. Unlocked ids live on UserProgress."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    icon: str
    xp_reward: int = Field(..., ge=0)


DEFAULT_ACHIEVEMENTS: list[Achievement] = [
    Achievement(
        id="first_login",
        title="Welcome Aboard!",
        description="Complete your first login",
        icon="👋",
        xp_reward=10,
    ),
    Achievement(
        id="first_lesson",
        title="Learning Begins",
        description="Complete your first lesson",
        icon="📚",
        xp_reward=25,
    ),
    Achievement(
        id="first_interview",
        title="Interview Ready",
        description="Complete your first mock interview",
        icon="🎤",
        xp_reward=50,
    ),
    Achievement(
        id="streak_7",
        title="Week Warrior",
        description="Maintain a 7-day learning streak",
        icon="⚡",
        xp_reward=75,
    ),
    Achievement(
        id="level_5",
        title="Rising Star",
        description="Reach level 5",
        icon="⭐",
        xp_reward=100,
    ),
]


# Shorthand keys some backends use instead of the full field names
_SHORTHANDS = {
    "xp": ("totalXp", "total_xp"),
    "level": ("currentLevel", "current_level"),
    "streak": ("currentStreak", "current_streak"),
}


class UserProgress(BaseModel):
    """
    Per-user gamification record.

    Reads camelCase, snake_case, and the xp/level/streak shorthands.
    `current_level` is always derived from `total_xp`.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = ""
    user_id: str

    # XP and level
    current_level: int = 1
    total_xp: int = Field(default=0, ge=0)

    # Streaks
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_activity_date: datetime = Field(default_factory=utcnow)

    # Learning record
    skill_levels: dict[str, float] = Field(default_factory=dict)
    completed_courses: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(
        default_factory=list,
        description="Unlocked achievement ids"
    )

    # Interview practice
    interviews_practiced: int = Field(default=0, ge=0)
    average_interview_score: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _accept_shorthands(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for short, (camel, snake) in _SHORTHANDS.items():
            if short in data and camel not in data and snake not in data:
                data[camel] = data[short]
        return data

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("last_activity_date", mode="after")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _derive_level(self) -> "UserProgress":
        self.current_level = level_for_xp(self.total_xp)
        return self

    @classmethod
    def default_for(cls, user_id: str) -> "UserProgress":
        """Zero-valued record for a user with no stored progress."""
        return cls(id=f"progress_{user_id}", user_id=user_id)

    def to_payload(self) -> dict[str, Any]:
        """camelCase JSON-ready dict."""
        return self.model_dump(mode="json", by_alias=True)


class ProgressSyncResult(BaseModel):
    """Sentinel returned when a progress write could not be completed."""

    partial: bool = True
    message: str = "Progress update failed but continuing"
