"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the SQLite-backed
repositories and the auth provider selected by configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from workspace_kpi.core.config import Settings, get_settings
from workspace_kpi.core.exceptions import AuthenticationError
from workspace_kpi.core.logger import setup_logger
from workspace_kpi.interfaces.auth_provider import IAuthProvider, User
from workspace_kpi.interfaces.member_repository import IMemberRepository
from workspace_kpi.interfaces.task_repository import ITaskRepository
from workspace_kpi.interfaces.user_repository import IUserRepository
from workspace_kpi.interfaces.workspace_repository import IWorkspaceRepository
from workspace_kpi.services.team_kpi_service import TeamKpiService

logger = setup_logger(__name__)

INTERNAL_ERROR = "Internal server error"


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from workspace_kpi.infrastructure.local.task_repository import SqliteTaskRepository
    return SqliteTaskRepository()


@lru_cache()
def get_workspace_repository() -> IWorkspaceRepository:
    """Get workspace repository instance."""
    from workspace_kpi.infrastructure.local.workspace_repository import SqliteWorkspaceRepository
    return SqliteWorkspaceRepository()


@lru_cache()
def get_member_repository() -> IMemberRepository:
    """Get workspace member repository instance."""
    from workspace_kpi.infrastructure.local.member_repository import SqliteMemberRepository
    return SqliteMemberRepository()


@lru_cache()
def get_user_repository() -> IUserRepository:
    """Get user repository instance."""
    from workspace_kpi.infrastructure.local.user_repository import SqliteUserRepository
    return SqliteUserRepository()


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "local":
        from workspace_kpi.infrastructure.auth.local_auth import LocalAuthProvider

        return LocalAuthProvider(settings, get_user_repository())

    from workspace_kpi.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider()


# ===========================================
# Services
# ===========================================


def get_team_kpi_service(
    task_repo: ITaskRepository = Depends(get_task_repository),
    workspace_repo: IWorkspaceRepository = Depends(get_workspace_repository),
    member_repo: IMemberRepository = Depends(get_member_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> TeamKpiService:
    """Build the KPI service over the configured repositories."""
    return TeamKpiService(
        task_repo,
        workspace_repo,
        member_repo,
        user_repo,
        fetch_concurrency=settings.KPI_FETCH_CONCURRENCY,
    )


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    With the mock provider the bearer token is the user ID.
    With the local provider the token is a signed JWT.
    A rejected token is a 401; a provider failure is a generic 500.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )
    except Exception as e:
        logger.exception(f"Token verification failed: {e!r}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

AppSettings = Annotated[Settings, Depends(get_settings)]
KpiService = Annotated[TeamKpiService, Depends(get_team_kpi_service)]
CurrentUser = Annotated[User, Depends(get_current_user)]
