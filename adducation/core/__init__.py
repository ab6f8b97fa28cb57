"""
Core business logic modules for Adducation

Contains:
- Backend Client: auth, profile, and progress calls with endpoint probing
- LLM Gateway: OpenRouter chat completions and tolerant reply parsing
- Gamification State: XP, levels, streaks, achievements
- Auth State: current session
- Preferences: theme and debug panel
"""

from adducation.core.backend_client import BackendClient
from adducation.core.llm_gateway import LLMGateway
from adducation.core.gamification import GamificationState
from adducation.core.auth_state import AuthState
from adducation.core.preferences import Preferences

__all__ = [
    "BackendClient",
    "LLMGateway",
    "GamificationState",
    "AuthState",
    "Preferences",
]
