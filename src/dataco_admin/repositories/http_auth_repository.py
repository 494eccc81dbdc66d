# Rev 0.1.0
from __future__ import annotations

from ..api.client import ApiClient, unwrap
from ..api.errors import AuthRequiredError
from ..services.auth_session import AdminUser


class HttpAuthRepository:
    def __init__(self, client: ApiClient):
        self._client = client

    async def login(self, username: str, password: str) -> AdminUser:
        body = await self._client.post(
            "/api/auth/login", {"username": username, "password": password}, auth=False
        )
        token, user = unwrap(body, "token"), unwrap(body, "user")
        if not token or not isinstance(user, dict):
            raise AuthRequiredError("Login failed")
        return self._client.session.store(token, user)

    def logout(self) -> None:
        self._client.session.clear()
