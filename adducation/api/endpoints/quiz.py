"""
Quiz API endpoints
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from adducation.api.dependencies import get_llm_gateway
from adducation.api.errors import unwrap
from adducation.core.llm_gateway import LLMGateway
from adducation.models.quiz import QuizDifficulty, QuizQuestion

router = APIRouter()


class QuizRequest(BaseModel):
    """Request model for quiz generation."""
    topic: str = Field(..., min_length=1)
    difficulty: QuizDifficulty = QuizDifficulty.INTERMEDIATE
    question_count: int = Field(default=5, ge=1, le=20)


class QuizResponse(BaseModel):
    topic: str
    questions: list[QuizQuestion]


@router.post("/generate", response_model=QuizResponse)
async def generate_quiz(
    request: QuizRequest,
    llm: LLMGateway = Depends(get_llm_gateway),
) -> QuizResponse:
    """
    Generate a multiple-choice quiz.

    Fails with 400 when no API key is configured, 502 when the provider call
    fails, and 422 when the reply could not be parsed into questions.
    """
    result = await llm.generate_quiz_questions(
        topic=request.topic,
        difficulty=request.difficulty.value,
        question_count=request.question_count,
    )
    return QuizResponse(topic=request.topic, questions=unwrap(result))
