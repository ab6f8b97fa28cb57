"""
Backend Client for Adducation

Talks to the remote backend for:
- Login and registration
- Profile updates
- Reading and writing gamification progress

The backend's route shape is not guaranteed, so login and progress calls walk
an ordered list of endpoint templates and use the first one that does not
answer 404. The winning template is remembered per operation.

Every failure (network, non-2xx, bad JSON) is converted into a result object;
nothing raises out of this module.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from adducation.config.settings import Settings, get_settings
from adducation.models.progress import ProgressSyncResult
from adducation.models.user import AuthResult, User
from adducation.storage.local_store import AUTH_TOKEN_KEY, CURRENT_USER_KEY, LocalStore

logger = logging.getLogger(__name__)


def format_progress_payload(user_id: str, progress: dict[str, Any]) -> dict[str, Any]:
    """
    Reshape a progress record for a backend with unknown field naming.

    Every key is sent in both camelCase and snake_case, along with the user id
    under both spellings and the xp/level/streak shorthands.
    """
    payload = dict(progress)
    for key, value in progress.items():
        alternate = to_camel(key) if "_" in key else to_snake(key)
        payload.setdefault(alternate, value)

    payload["userId"] = user_id
    payload["user_id"] = user_id
    payload.setdefault("xp", payload.get("totalXp") or payload.get("total_xp") or 0)
    payload.setdefault("level", payload.get("currentLevel") or payload.get("current_level") or 1)
    payload.setdefault("streak", payload.get("currentStreak") or payload.get("current_streak") or 0)
    return payload


class BackendClient:
    """
    HTTP client for the remote auth/progress backend.

    Token and user are cached in local storage so a restart can rehydrate the
    session without a network call.
    """

    def __init__(
        self,
        store: LocalStore,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the backend client.

        Args:
            store: Local durable storage for token and user
            settings: Settings override (defaults to environment)
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings or get_settings()
        self.store = store
        self.base_url = self.settings.api_base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.request_timeout_seconds,
            transport=transport,
        )

        # Assume reachable until the startup probe says otherwise
        self.is_backend_available = True

        # operation -> endpoint template that last answered non-404
        self._resolved: dict[str, str] = {}

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # CONNECTIVITY
    # =========================================================================

    async def check_backend_connection(self) -> bool:
        """
        Probe the backend root with a short timeout and cache the result.

        Returns:
            Whether the backend answered with a 2xx status
        """
        logger.info(f"Checking backend connection: {self.base_url}")
        try:
            response = await self.client.get(
                "/",
                timeout=self.settings.health_check_timeout_seconds,
            )
            self.is_backend_available = response.is_success
        except httpx.HTTPError as e:
            logger.error(f"Backend connection check failed: {e}")
            self.is_backend_available = False

        logger.info(f"Backend available: {self.is_backend_available}")
        return self.is_backend_available

    # =========================================================================
    # ENDPOINT PROBING
    # =========================================================================

    def _ordered_candidates(self, operation: str, templates: list[str]) -> list[str]:
        resolved = self._resolved.get(operation)
        if resolved in templates:
            return [resolved] + [t for t in templates if t != resolved]
        return list(templates)

    async def _probe(
        self,
        operation: str,
        templates: list[str],
        method: str,
        user_id: str = "",
        **kwargs: Any,
    ) -> tuple[httpx.Response | None, str | None]:
        """
        Send the request to each candidate until one is not a 404.

        Each candidate is tried at most once. A network error moves on to the
        next candidate.

        Returns:
            (response, path) for the accepted candidate, or the last response
            seen and None when every candidate was 404 or unreachable
        """
        response = None
        for template in self._ordered_candidates(operation, templates):
            path = template.format(user_id=user_id)
            logger.info(f"Trying {operation} endpoint: {method} {path}")
            try:
                response = await self.client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.error(f"Error with endpoint {path}: {e}")
                continue

            logger.info(f"Endpoint {path} response status: {response.status_code}")
            if response.status_code != 404:
                self._resolved[operation] = template
                return response, path

            if self._resolved.get(operation) == template:
                del self._resolved[operation]

        return response, None

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any] | None:
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _parse_user(data: Any) -> User | None:
        if not isinstance(data, dict):
            return None
        try:
            return User.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed user record: {e}")
            return None

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _complete_auth(
        self,
        response: httpx.Response,
        data: dict[str, Any],
        default_message: str,
    ) -> AuthResult:
        """Accept an auth response that signals success or carries a token."""
        token = data.get("accessToken") or data.get("token")
        if response.is_success and (data.get("success") or token):
            user = self._parse_user(data.get("user"))
            if token:
                self.store.set_item(AUTH_TOKEN_KEY, token)
            if user:
                self.store.set_json(CURRENT_USER_KEY, user.to_storage())
            return AuthResult(success=True, user=user, token=token)

        message = data.get("message") or default_message
        logger.info(f"Authentication rejected: {message}")
        return AuthResult(success=False, message=message)

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Log in, probing the configured login endpoints.

        Returns:
            AuthResult with user and token on success
        """
        logger.info(f"Login attempt for {email} via {self.base_url}")

        if not self.is_backend_available:
            return AuthResult(
                success=False,
                message=(
                    f"Backend server at {self.base_url} is not responding. "
                    "Please check your connection or server status."
                ),
            )

        response, path = await self._probe(
            "login",
            self.settings.login_endpoints,
            "POST",
            json={"email": email, "password": password},
        )
        if response is None:
            logger.error("All login endpoints failed")
            return AuthResult(
                success=False,
                message="Login failed. Could not connect to any endpoint.",
            )

        data = self._json(response)
        if data is None:
            logger.error(f"Login response from {path} was not a JSON object")
            return AuthResult(
                success=False,
                message="Login failed. Invalid response from server.",
            )

        return self._complete_auth(response, data, "Invalid credentials")

    async def register(self, user_data: dict[str, Any]) -> AuthResult:
        """Register a new account at the single registration endpoint."""
        if not self.is_backend_available:
            return AuthResult(
                success=False,
                message=f"Backend server at {self.base_url} is not responding.",
            )

        try:
            response = await self.client.post(
                self.settings.register_endpoint,
                json=user_data,
            )
        except httpx.HTTPError as e:
            logger.error(f"Registration error: {e}")
            return AuthResult(
                success=False,
                message="Registration failed. Please check your connection.",
            )

        logger.info(f"Register response status: {response.status_code}")
        data = self._json(response)
        if data is None:
            return AuthResult(
                success=False,
                message="Registration failed. Invalid response from server.",
            )

        return self._complete_auth(response, data, "Registration failed")

    def logout(self):
        """Forget the cached session. No network call."""
        self.store.remove_item(AUTH_TOKEN_KEY)
        self.store.remove_item(CURRENT_USER_KEY)

    def get_token(self) -> str | None:
        return self.store.get_item(AUTH_TOKEN_KEY)

    def get_current_user(self) -> User | None:
        return self._parse_user(self.store.get_json(CURRENT_USER_KEY))

    # =========================================================================
    # PROFILE
    # =========================================================================

    async def update_profile(self, user_id: str, data: dict[str, Any]) -> User | None:
        """
        Write profile changes and refresh the cached user.

        Returns:
            The updated user, or None without a token or on any failure
        """
        token = self.get_token()
        if not token:
            return None

        path = self.settings.profile_endpoint.format(user_id=user_id)
        try:
            response = await self.client.put(
                path,
                json=data,
                headers=self._auth_headers(token),
            )
        except httpx.HTTPError as e:
            logger.error(f"Profile update error: {e}")
            return None

        if not response.is_success:
            logger.error(f"Profile update failed with status {response.status_code}")
            return None

        body = self._json(response)
        if body and isinstance(body.get("user"), dict):
            body = body["user"]
        user = self._parse_user(body)
        if user:
            self.store.set_json(CURRENT_USER_KEY, user.to_storage())
        return user

    # =========================================================================
    # PROGRESS
    # =========================================================================

    async def get_user_progress(self, user_id: str) -> dict[str, Any] | None:
        """
        Fetch the stored progress record.

        Returns:
            The backend's progress dict, or None when missing or unreachable
        """
        token = self.get_token()
        if not token or not self.is_backend_available:
            return None

        response, path = await self._probe(
            "progress",
            self.settings.progress_endpoints,
            "GET",
            user_id=user_id,
            headers=self._auth_headers(token),
        )
        if response is None or not response.is_success:
            logger.error("Failed to get user progress")
            return None

        data = self._json(response)
        if data and isinstance(data.get("progress"), dict):
            data = data["progress"]
        logger.debug(f"User progress data from {path}: {data}")
        return data

    async def update_user_progress(
        self,
        user_id: str,
        progress: dict[str, Any],
    ) -> dict[str, Any] | ProgressSyncResult:
        """
        Push a progress record to the backend.

        The payload carries both key spellings. If the accepted endpoint
        rejects the PUT with 400 the same body is sent once more as a POST.

        Returns:
            The backend's reply, or a partial-success sentinel on failure
        """
        token = self.get_token()
        if not token or not self.is_backend_available:
            return ProgressSyncResult(message="Progress not synced: no backend session")

        payload = format_progress_payload(user_id, progress)
        headers = self._auth_headers(token)

        response, path = await self._probe(
            "progress",
            self.settings.progress_endpoints,
            "PUT",
            user_id=user_id,
            json=payload,
            headers=headers,
        )

        if path is not None and response.status_code == 400:
            logger.info(f"Trying POST instead of PUT for endpoint: {path}")
            try:
                response = await self.client.post(path, json=payload, headers=headers)
                logger.info(f"POST request status: {response.status_code}")
            except httpx.HTTPError as e:
                logger.error(f"Update user progress error: {e}")
                return ProgressSyncResult()

        if response is None or path is None:
            logger.warning("Failed to update user progress - no valid endpoint found")
            return ProgressSyncResult()

        if not response.is_success:
            logger.error(f"Error response body: {response.text}")
            logger.warning("Progress update failed but continuing execution")
            return ProgressSyncResult()

        return self._json(response) or {}
