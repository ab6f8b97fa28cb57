"""
Auth state for Adducation

Thin session wrapper over the backend client. Every operation reports a
boolean outcome; none raise.
"""

import logging
from typing import Any

from adducation.core.backend_client import BackendClient
from adducation.models.user import User

logger = logging.getLogger(__name__)


class AuthState:
    """Current user and token, backed by the locally cached session."""

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self.user: User | None = None
        self.token: str | None = None
        self.is_loading = False
        self.last_error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    async def login(self, email: str, password: str) -> bool:
        self.is_loading = True
        try:
            result = await self.backend.login(email, password)
        except Exception as e:
            logger.error(f"Login error: {e}")
            self.last_error = "Login failed"
            return False
        finally:
            self.is_loading = False

        if not result.success:
            self.last_error = result.message
            return False

        self.user, self.token, self.last_error = result.user, result.token, None
        return True

    async def register(self, user_data: dict[str, Any]) -> bool:
        self.is_loading = True
        try:
            result = await self.backend.register(user_data)
        except Exception as e:
            logger.error(f"Registration error: {e}")
            self.last_error = "Registration failed"
            return False
        finally:
            self.is_loading = False

        if not result.success:
            self.last_error = result.message
            return False

        self.user, self.token, self.last_error = result.user, result.token, None
        return True

    def check_auth(self) -> bool:
        """Rehydrate from the cached token and user; both must be present."""
        token = self.backend.get_token()
        user = self.backend.get_current_user()
        if token and user:
            self.user, self.token = user, token
        else:
            self.user, self.token = None, None
        self.is_loading = False
        return self.is_authenticated

    def logout(self):
        self.backend.logout()
        self.user, self.token = None, None

    async def update_profile(self, data: dict[str, Any]) -> bool:
        if self.user is None:
            return False

        try:
            updated = await self.backend.update_profile(self.user.id, data)
        except Exception as e:
            logger.error(f"Profile update error: {e}")
            return False

        if updated is None:
            return False
        self.user = updated
        return True
