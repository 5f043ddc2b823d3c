"""Authentication API endpoints."""

from takify.api.client import APIClient


class AuthAPI:
    """Authentication API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def login(self, email: str, password: str) -> dict:
        """Exchange email and password for a token.

        Returns:
            ``{"token": ..., "user": {"id": ..., "email": ...}}``
        """
        response = await self.client.post(
            "/v1/auth/login",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return response.json()

    async def signup(self, email: str, password: str) -> dict:
        """Create an account. Answers like ``login``."""
        response = await self.client.post(
            "/v1/auth/signup",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return response.json()

    async def logout(self) -> None:
        """Invalidate the current token on the server."""
        await self.client.post("/v1/auth/logout")
