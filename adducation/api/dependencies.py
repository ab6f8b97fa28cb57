"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

import logging

from fastapi import Depends, HTTPException

from adducation.config.settings import get_settings
from adducation.core.auth_state import AuthState
from adducation.core.backend_client import BackendClient
from adducation.core.gamification import GamificationState
from adducation.core.llm_gateway import LLMGateway
from adducation.core.preferences import Preferences
from adducation.models.progress import UserProgress
from adducation.models.user import User
from adducation.storage.local_store import LocalStore

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_store: LocalStore | None = None
_backend: BackendClient | None = None
_llm_gateway: LLMGateway | None = None
_auth_state: AuthState | None = None
_gamification: GamificationState | None = None


def get_store() -> LocalStore:
    """Get the local storage singleton."""
    global _store

    if _store is None:
        _store = LocalStore(get_settings().storage_path or None)

    return _store


def get_backend() -> BackendClient:
    """Get the backend client singleton."""
    global _backend

    if _backend is None:
        _backend = BackendClient(get_store())

    return _backend


def get_llm_gateway() -> LLMGateway:
    """Get the LLM gateway singleton."""
    global _llm_gateway

    if _llm_gateway is None:
        _llm_gateway = LLMGateway(get_store())

    return _llm_gateway


def get_auth_state() -> AuthState:
    """
    Get the auth state singleton.

    Rehydrates the cached session on first use.
    """
    global _auth_state

    if _auth_state is None:
        _auth_state = AuthState(get_backend())
        _auth_state.check_auth()

    return _auth_state


def get_gamification() -> GamificationState:
    """Get the gamification state singleton."""
    global _gamification

    if _gamification is None:
        _gamification = GamificationState(get_backend(), get_store())

    return _gamification


def get_preferences() -> Preferences:
    return Preferences(get_store())


# ============================================================================
# REQUEST GUARDS
# ============================================================================

def require_user(auth: AuthState = Depends(get_auth_state)) -> User:
    """Current user, or 401."""
    if not auth.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth.user


async def require_progress(
    user: User = Depends(require_user),
    gamification: GamificationState = Depends(get_gamification),
) -> UserProgress:
    """The current user's progress, loading it on first access."""
    progress = gamification.user_progress
    if progress is None or progress.user_id != user.id:
        progress = await gamification.load_user_progress(user.id)
    if progress is None:
        raise HTTPException(status_code=503, detail="Progress unavailable")
    return progress


# ============================================================================
# LIFECYCLE
# ============================================================================

async def startup():
    """Probe the backend and restore the cached session."""
    await get_backend().check_backend_connection()
    auth = get_auth_state()
    if auth.is_authenticated:
        logger.info(f"Restored session for {auth.user.email}")
        await get_gamification().load_user_progress(auth.user.id)


async def cleanup():
    """Cleanup resources on shutdown."""
    global _store, _backend, _llm_gateway, _auth_state, _gamification

    if _gamification:
        await _gamification.drain()

    if _backend:
        await _backend.close()

    if _llm_gateway:
        await _llm_gateway.close()

    _store = _backend = _llm_gateway = _auth_state = _gamification = None
