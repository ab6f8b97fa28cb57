"""
Learning API endpoints
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from adducation.api.dependencies import get_gamification, get_llm_gateway
from adducation.api.errors import unwrap
from adducation.core.gamification import LEARNING_CONTENT_XP, GamificationState
from adducation.core.llm_gateway import LLMGateway
from adducation.models.interview import LearningRecommendations

router = APIRouter()


class RecommendationsRequest(BaseModel):
    """Request model for personalised recommendations."""
    topic: str = Field(..., min_length=1)
    user_level: str = "beginner"
    skills: list[str] = []
    goal: str = Field(..., min_length=1)


@router.post("/recommendations", response_model=LearningRecommendations)
async def recommendations(
    request: RecommendationsRequest,
    llm: LLMGateway = Depends(get_llm_gateway),
    gamification: GamificationState = Depends(get_gamification),
) -> LearningRecommendations:
    """Generate learning recommendations (+15 XP when progress is loaded)."""
    result = await llm.generate_learning_content(
        topic=request.topic,
        user_level=request.user_level,
        skills=request.skills,
        goal=request.goal,
    )
    content = unwrap(result)

    await gamification.add_xp(LEARNING_CONTENT_XP, "Generated personalized learning content")
    return content
