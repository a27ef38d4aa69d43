"""Abstract interfaces for infrastructure abstraction."""

from workspace_kpi.interfaces.auth_provider import IAuthProvider
from workspace_kpi.interfaces.member_repository import IMemberRepository
from workspace_kpi.interfaces.task_repository import ITaskRepository
from workspace_kpi.interfaces.user_repository import IUserRepository
from workspace_kpi.interfaces.workspace_repository import IWorkspaceRepository

__all__ = [
    "ITaskRepository",
    "IWorkspaceRepository",
    "IMemberRepository",
    "IUserRepository",
    "IAuthProvider",
]
