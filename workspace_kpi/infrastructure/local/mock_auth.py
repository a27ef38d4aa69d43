"""
Mock authentication provider for local development.
"""

from workspace_kpi.core.exceptions import AuthenticationError
from workspace_kpi.interfaces.auth_provider import IAuthProvider, User


class MockAuthProvider(IAuthProvider):
    """Mock auth provider that treats the bearer token as the user ID."""

    async def verify_token(self, token: str) -> User:
        """
        Verify token - in mock mode, token is treated as user_id.

        Args:
            token: User ID (in mock mode)

        Returns:
            User carrying that ID
        """
        if not token.strip():
            raise AuthenticationError("Empty token")
        if "@" in token:
            return User(id=token, email=token, display_name=token)
        return User(id=token, email=f"{token}@example.com", display_name=token)
