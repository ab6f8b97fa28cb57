"""
Auth API endpoints

Handles the user session:
- Login and registration
- Logout
- Current user and profile updates
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from adducation.api.dependencies import get_auth_state, get_gamification, require_user
from adducation.core.auth_state import AuthState
from adducation.core.gamification import GamificationState
from adducation.models.user import User, UserType

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class LoginRequest(BaseModel):
    """Request model for login."""
    email: str
    password: str


class RegisterRequest(BaseModel):
    """Request model for registration. Forwarded to the backend in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    password: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    job_title: str | None = None
    skills: list[str] = []
    user_type: UserType = UserType.STUDENT


class ProfileUpdateRequest(BaseModel):
    """Partial profile update."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    job_title: str | None = None
    skills: list[str] | None = None
    user_type: UserType | None = None


class SessionResponse(BaseModel):
    """Response after a successful login or registration."""
    user: User | None
    authenticated: bool


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    auth: AuthState = Depends(get_auth_state),
    gamification: GamificationState = Depends(get_gamification),
) -> SessionResponse:
    """Log in and load the user's progress."""
    if not await auth.login(request.email, request.password):
        raise HTTPException(status_code=401, detail=auth.last_error or "Invalid credentials")

    if auth.user:
        await gamification.load_user_progress(auth.user.id)
        await gamification.unlock_achievement("first_login")

    return SessionResponse(user=auth.user, authenticated=True)


@router.post("/register", response_model=SessionResponse)
async def register(
    request: RegisterRequest,
    auth: AuthState = Depends(get_auth_state),
    gamification: GamificationState = Depends(get_gamification),
) -> SessionResponse:
    """Create an account."""
    payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
    if not await auth.register(payload):
        raise HTTPException(status_code=400, detail=auth.last_error or "Registration failed")

    if auth.user:
        await gamification.load_user_progress(auth.user.id)

    return SessionResponse(user=auth.user, authenticated=True)


@router.post("/logout")
async def logout(
    auth: AuthState = Depends(get_auth_state),
    gamification: GamificationState = Depends(get_gamification),
) -> dict[str, str]:
    """End the session and drop the user's progress."""
    auth.logout()
    gamification.reset()
    return {"status": "logged_out"}


@router.get("/me", response_model=User)
async def current_user(user: User = Depends(require_user)) -> User:
    return user


@router.patch("/profile", response_model=User)
async def update_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(require_user),
    auth: AuthState = Depends(get_auth_state),
) -> User:
    """Update profile fields and return the refreshed user."""
    changes = request.model_dump(mode="json", by_alias=True, exclude_none=True)
    if not changes:
        return user

    if not await auth.update_profile(changes):
        raise HTTPException(status_code=502, detail="Failed to update profile")
    return auth.user
