"""
Progress API endpoints

Exposes gamification state:
- Progress snapshot
- XP awards and streak updates
- Achievement catalog and unlocks
- Course completion
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from adducation.api.dependencies import get_gamification, require_progress
from adducation.core.gamification import GamificationState
from adducation.models.progress import UserProgress

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AddXPRequest(BaseModel):
    """Request model for an XP award."""
    amount: int = Field(..., ge=0, le=10_000)
    reason: str = ""


class CompleteCourseRequest(BaseModel):
    xp: int = Field(default=25, ge=0)
    title: str = ""


class AchievementStatus(BaseModel):
    """Catalog entry with the user's unlock state."""
    id: str
    title: str
    description: str
    icon: str
    xp_reward: int
    unlocked: bool


class UnlockResponse(BaseModel):
    achievement_id: str
    newly_unlocked: bool
    progress: UserProgress


class CourseResponse(BaseModel):
    course_id: str
    xp_awarded: int
    progress: UserProgress


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.get("", response_model=UserProgress)
async def get_progress(progress: UserProgress = Depends(require_progress)) -> UserProgress:
    """Current user's progress, loaded on first access."""
    return progress


@router.post("/xp", response_model=UserProgress)
async def add_xp(
    request: AddXPRequest,
    progress: UserProgress = Depends(require_progress),
    gamification: GamificationState = Depends(get_gamification),
) -> UserProgress:
    return await gamification.add_xp(request.amount, request.reason or "manual award")


@router.post("/streak", response_model=UserProgress)
async def update_streak(
    progress: UserProgress = Depends(require_progress),
    gamification: GamificationState = Depends(get_gamification),
) -> UserProgress:
    """Record today's activity against the streak."""
    return await gamification.update_streak()


@router.get("/achievements", response_model=list[AchievementStatus])
async def list_achievements(
    progress: UserProgress = Depends(require_progress),
    gamification: GamificationState = Depends(get_gamification),
) -> list[AchievementStatus]:
    return [
        AchievementStatus(
            **achievement.model_dump(),
            unlocked=achievement.id in progress.achievements,
        )
        for achievement in gamification.achievements
    ]


@router.post("/achievements/{achievement_id}", response_model=UnlockResponse)
async def unlock_achievement(
    achievement_id: str,
    progress: UserProgress = Depends(require_progress),
    gamification: GamificationState = Depends(get_gamification),
) -> UnlockResponse:
    if gamification.get_achievement(achievement_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown achievement: {achievement_id}")

    unlocked = await gamification.unlock_achievement(achievement_id)
    return UnlockResponse(
        achievement_id=achievement_id,
        newly_unlocked=unlocked,
        progress=gamification.user_progress,
    )


@router.post("/courses/{course_id}/complete", response_model=CourseResponse)
async def complete_course(
    course_id: str,
    request: CompleteCourseRequest,
    progress: UserProgress = Depends(require_progress),
    gamification: GamificationState = Depends(get_gamification),
) -> CourseResponse:
    """Mark a lesson complete. Repeat completions award nothing."""
    xp = await gamification.complete_course(course_id, request.xp, request.title)
    return CourseResponse(
        course_id=course_id,
        xp_awarded=xp,
        progress=gamification.user_progress,
    )
