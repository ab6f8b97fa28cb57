"""
Interview API endpoints

Handles mock interview practice:
- Generating a practice question
- Evaluating an answer and awarding XP
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from adducation.api.dependencies import get_gamification, get_llm_gateway
from adducation.api.errors import unwrap
from adducation.core.gamification import QUESTION_GENERATED_XP, GamificationState
from adducation.core.llm_gateway import LLMGateway
from adducation.models.interview import InterviewEvaluation

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class QuestionRequest(BaseModel):
    """Request model for a practice question."""
    job_role: str = Field(..., min_length=1)
    difficulty: str = "intermediate"
    skills: list[str] = []


class QuestionResponse(BaseModel):
    question: str


class EvaluateRequest(BaseModel):
    """Request model for answer evaluation."""
    question: str = Field(..., min_length=1)
    response: str
    job_role: str
    model_id: str | None = None


class EvaluateResponse(BaseModel):
    evaluation: InterviewEvaluation
    xp_awarded: int


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/question", response_model=QuestionResponse)
async def generate_question(
    request: QuestionRequest,
    llm: LLMGateway = Depends(get_llm_gateway),
    gamification: GamificationState = Depends(get_gamification),
) -> QuestionResponse:
    result = await llm.generate_interview_question(
        job_role=request.job_role,
        difficulty=request.difficulty,
        skills=request.skills,
    )
    question = unwrap(result)

    await gamification.add_xp(QUESTION_GENERATED_XP, "Generated interview question")
    return QuestionResponse(question=question)


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_response(
    request: EvaluateRequest,
    llm: LLMGateway = Depends(get_llm_gateway),
    gamification: GamificationState = Depends(get_gamification),
) -> EvaluateResponse:
    """
    Evaluate a practice answer.

    XP is only awarded when progress is loaded for a signed-in user.
    """
    if not request.response.strip():
        raise HTTPException(status_code=400, detail="Please provide a response")

    result = await llm.evaluate_interview_response(
        question=request.question,
        response=request.response,
        job_role=request.job_role,
        model_id=request.model_id or llm.get_selected_model(),
    )
    evaluation: InterviewEvaluation = unwrap(result)

    xp = await gamification.record_interview(evaluation.score)
    return EvaluateResponse(evaluation=evaluation, xp_awarded=xp)
