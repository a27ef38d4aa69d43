"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class KpiServiceError(Exception):
    """Base exception for the workspace KPI service."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(KpiServiceError):
    """Resource not found."""

    pass


class AuthenticationError(KpiServiceError):
    """Bearer token rejected."""

    pass


class AuthorizationError(KpiServiceError):
    """Authorization failed."""

    pass


class ForbiddenError(AuthorizationError):
    """Forbidden operation (authorization denied)."""

    pass


class InfrastructureError(KpiServiceError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass
