"""
Data models and schemas for Adducation

Contains Pydantic models for:
- Users and authentication results
- Gamification progress and achievements
- Quiz questions
- Interview evaluations and learning recommendations
- LLM gateway results
"""

from adducation.models.user import User, UserType, AuthResult
from adducation.models.progress import (
    Achievement,
    DEFAULT_ACHIEVEMENTS,
    ProgressSyncResult,
    UserProgress,
    level_for_xp,
)
from adducation.models.quiz import QuizQuestion, QuizDifficulty
from adducation.models.interview import (
    GENERIC_RECOMMENDATIONS,
    InterviewEvaluation,
    LearningRecommendations,
)
from adducation.models.llm import ErrorKind, LLMResult, OpenRouterModel

__all__ = [
    # User
    "User",
    "UserType",
    "AuthResult",
    # Progress
    "Achievement",
    "DEFAULT_ACHIEVEMENTS",
    "ProgressSyncResult",
    "UserProgress",
    "level_for_xp",
    # Quiz
    "QuizQuestion",
    "QuizDifficulty",
    # Interview
    "GENERIC_RECOMMENDATIONS",
    "InterviewEvaluation",
    "LearningRecommendations",
    # LLM
    "ErrorKind",
    "LLMResult",
    "OpenRouterModel",
]
