"""
Local JWT authentication provider.
"""

from __future__ import annotations

from jose import JWTError

from workspace_kpi.core.config import Settings
from workspace_kpi.core.exceptions import AuthenticationError
from workspace_kpi.core.security import decode_access_token
from workspace_kpi.interfaces.auth_provider import IAuthProvider, User
from workspace_kpi.interfaces.user_repository import IUserRepository

INVALID_TOKEN = "Invalid or expired token"


class LocalAuthProvider(IAuthProvider):
    """Local auth provider with HMAC JWT validation."""

    def __init__(self, settings: Settings, user_repo: IUserRepository):
        if not settings.LOCAL_JWT_SECRET:
            raise ValueError("LOCAL_JWT_SECRET must be set for local auth")
        self._settings = settings
        self._user_repo = user_repo

    async def verify_token(self, token: str) -> User:
        try:
            claims = decode_access_token(token, self._settings)
        except JWTError as e:
            raise AuthenticationError(INVALID_TOKEN) from e

        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError(INVALID_TOKEN)
        # Repository errors propagate; they are not credential failures.
        user = await self._user_repo.get(str(subject))
        if not user:
            raise AuthenticationError("User not found")
        return User(id=user.id, email=user.email, display_name=user.name)
