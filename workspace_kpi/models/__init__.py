"""Pydantic models (schemas) for the application."""

from workspace_kpi.models.enums import MemberRole, TaskStatus
from workspace_kpi.models.kpi import (
    AdminWorkspaceSummary,
    DateRange,
    DateRangeEcho,
    MemberKPIResult,
    MemberOverallKPI,
    MemberWorkspaceKPI,
    PaginationInfo,
    TeamKPIReport,
    TeamStats,
    WorkspaceKPIEntry,
)
from workspace_kpi.models.task import Task, TaskCreate
from workspace_kpi.models.user import UserAccount, UserCreate
from workspace_kpi.models.workspace import (
    Workspace,
    WorkspaceCreate,
    WorkspaceKPIWeights,
    WorkspaceMembership,
    WorkspaceMembershipCreate,
)

__all__ = [
    # Enums
    "TaskStatus",
    "MemberRole",
    # Task
    "Task",
    "TaskCreate",
    # Workspace
    "Workspace",
    "WorkspaceCreate",
    "WorkspaceKPIWeights",
    "WorkspaceMembership",
    "WorkspaceMembershipCreate",
    # User
    "UserAccount",
    "UserCreate",
    # KPI
    "DateRange",
    "DateRangeEcho",
    "MemberKPIResult",
    "WorkspaceKPIEntry",
    "MemberWorkspaceKPI",
    "MemberOverallKPI",
    "TeamStats",
    "AdminWorkspaceSummary",
    "PaginationInfo",
    "TeamKPIReport",
]
