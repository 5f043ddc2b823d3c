"""Service for handling authentication-related operations."""

from __future__ import annotations

import httpx

from takify.api.auth import AuthAPI
from takify.models import AuthError
from takify.services.config_service import ConfigService
from takify.services.session import Session, SessionProvider
from takify.utils.logger import get_logger


class AuthService:
    """Signs users in and out and keeps the session provider up to date.

    The token of a successful login is stored through the config service so
    later invocations can restore the session without asking again.
    """

    def __init__(
        self,
        auth_api: AuthAPI,
        session_provider: SessionProvider,
        config_service: ConfigService,
    ):
        self.auth_api = auth_api
        self.session_provider = session_provider
        self.config_service = config_service

    def restore_session(self) -> Session | None:
        """Load stored credentials into the session provider, if any."""
        credentials = self.config_service.load_credentials()
        if not credentials or "token" not in credentials or "user_id" not in credentials:
            return None
        session = Session(
            user_id=credentials["user_id"],
            token=credentials["token"],
            email=credentials.get("email"),
        )
        self.session_provider.set_session(session)
        return session

    def is_authenticated(self) -> bool:
        return self.session_provider.current is not None

    async def login(self, email: str, password: str) -> Session:
        """Sign in with email and password.

        Raises:
            AuthError: If the backend rejects the credentials or is unreachable
        """
        return await self._authenticate(self.auth_api.login, email, password)

    async def signup(self, email: str, password: str) -> Session:
        """Create an account and sign in.

        Raises:
            AuthError: If the backend refuses the signup or is unreachable
        """
        return await self._authenticate(self.auth_api.signup, email, password)

    async def _authenticate(self, call, email: str, password: str) -> Session:
        try:
            result = await call(email, password)
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            raise AuthError(f"Authentication failed: {detail}") from e
        except httpx.RequestError as e:
            raise AuthError(f"Could not reach the server: {e}") from e

        try:
            user = result["user"]
            session = Session(
                user_id=user["id"],
                token=result["token"],
                email=user.get("email", email),
            )
        except (KeyError, TypeError) as e:
            raise AuthError("Malformed authentication response") from e

        self.config_service.save_credentials(session.token, session.user_id, session.email)
        self.session_provider.set_session(session)
        get_logger().info("signed in as %s", session.user_id)
        return session

    async def logout(self) -> None:
        """Sign out locally, telling the server when possible."""
        if self.session_provider.current is not None:
            try:
                await self.auth_api.logout()
            except httpx.HTTPError as e:
                # Local sign-out proceeds regardless
                get_logger().warning("server logout failed: %s", e)
        self.config_service.clear_credentials()
        self.session_provider.clear()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"
