from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from workspace_kpi.core.exceptions import ForbiddenError, NotFoundError
from workspace_kpi.interfaces.member_repository import IMemberRepository
from workspace_kpi.interfaces.user_repository import IUserRepository
from workspace_kpi.interfaces.workspace_repository import IWorkspaceRepository
from workspace_kpi.models.enums import MemberRole
from workspace_kpi.models.user import UserAccount
from workspace_kpi.models.workspace import Workspace

ADMIN_ACCESS_REQUIRED = "Admin access required"

# Roles whose memberships are scored in the team report.
TEAM_KPI_MEMBER_ROLES = {MemberRole.MEMBER}
# Roles never counted as workspace members in KPI views.
KPI_EXCLUDED_ROLES = {MemberRole.CUSTOMER}


@dataclass(frozen=True)
class AdminScope:
    """Workspaces a caller administers, in resolution order."""

    user_id: str
    workspaces: list[Workspace] = field(default_factory=list)

    @property
    def workspace_ids(self) -> list[UUID]:
        return [workspace.id for workspace in self.workspaces]

    @property
    def is_empty(self) -> bool:
        return not self.workspaces

    def contains(self, workspace_id: UUID) -> bool:
        return workspace_id in self.workspace_ids

    def target_workspace_ids(self, filter_workspace_id: Optional[UUID]) -> list[UUID]:
        """Narrow to one workspace when the filter is inside scope; ignore it otherwise."""
        if filter_workspace_id is not None and self.contains(filter_workspace_id):
            return [filter_workspace_id]
        return self.workspace_ids


def is_super_admin(user: Optional[UserAccount]) -> bool:
    return bool(user and user.is_super_admin)


async def ensure_workspace_kpi_access(
    user_id: str,
    workspace_id: UUID,
    user_repo: IUserRepository,
    member_repo: IMemberRepository,
    workspace_repo: IWorkspaceRepository,
) -> Workspace:
    """
    Allow members of the workspace who are ADMIN there or super-admins.

    Callers without a membership are forbidden, super-admin or not.
    """
    member = await member_repo.get_by_user_and_workspace(user_id, workspace_id)
    if member is None:
        raise ForbiddenError(ADMIN_ACCESS_REQUIRED)
    if member.role != MemberRole.ADMIN and not is_super_admin(await user_repo.get(user_id)):
        raise ForbiddenError(ADMIN_ACCESS_REQUIRED)

    workspace = await workspace_repo.get(workspace_id)
    if not workspace:
        raise NotFoundError(f"Workspace {workspace_id} not found")
    return workspace


async def resolve_admin_scope(
    user_id: str,
    user_repo: IUserRepository,
    member_repo: IMemberRepository,
    workspace_repo: IWorkspaceRepository,
) -> AdminScope:
    """
    Workspaces where the caller is ADMIN, followed by (super-admins only)
    the workspaces they own and do not already administer.
    """
    admin_ids = await member_repo.list_admin_workspace_ids(user_id)
    workspaces = await workspace_repo.list_by_ids(admin_ids)

    user = await user_repo.get(user_id)
    if is_super_admin(user):
        known_ids = {workspace.id for workspace in workspaces}
        owned = await workspace_repo.list_owned_by(user_id)
        workspaces.extend(workspace for workspace in owned if workspace.id not in known_ids)

    return AdminScope(user_id=user_id, workspaces=workspaces)
