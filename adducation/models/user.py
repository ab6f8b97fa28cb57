"""
User and authentication models for Adducation
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserType(str, Enum):
    """Audience segment a user signed up as."""

    STUDENT = "student"
    JOB_SEEKER = "jobSeeker"
    EXAM_CANDIDATE = "examCandidate"


class User(BaseModel):
    """
    A registered user.

    The backend and the local cache use camelCase keys; snake_case keys are
    accepted as well.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    # Identity
    id: str = Field(..., description="Backend user ID")
    email: str
    username: str = ""

    # Profile
    first_name: str | None = None
    last_name: str | None = None
    job_title: str | None = None
    skills: list[str] = Field(default_factory=list)

    user_type: UserType = Field(
        default=UserType.STUDENT,
        description="Category tag chosen at registration"
    )
    created_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Some backends hand out integer ids
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("user_type", mode="before")
    @classmethod
    def _coerce_user_type(cls, value: Any) -> Any:
        if value is None:
            return UserType.STUDENT
        valid = {t.value for t in UserType}
        return value if value in valid else UserType.STUDENT

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [s.strip() for s in value.split(",") if s.strip()]
        return value

    def to_storage(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the backend and local cache."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AuthResult(BaseModel):
    """Outcome of a login or registration attempt."""

    success: bool
    user: User | None = None
    token: str | None = None
    message: str | None = None
