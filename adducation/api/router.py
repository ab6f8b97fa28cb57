"""
Main API router for Adducation

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from adducation.api.endpoints import auth, progress, quiz, interview, learning, preferences

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Auth"]
)

api_router.include_router(
    progress.router,
    prefix="/progress",
    tags=["Progress"]
)

api_router.include_router(
    quiz.router,
    prefix="/quiz",
    tags=["Quiz"]
)

api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    learning.router,
    prefix="/learning",
    tags=["Learning"]
)

api_router.include_router(
    preferences.router,
    prefix="/settings",
    tags=["Settings"]
)
