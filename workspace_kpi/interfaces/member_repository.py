"""
Workspace member repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from uuid import UUID

from workspace_kpi.models.enums import MemberRole
from workspace_kpi.models.workspace import WorkspaceMembership, WorkspaceMembershipCreate


class IMemberRepository(ABC):
    """
    Abstract interface for workspace membership persistence.

    List methods return memberships ordered by creation time. ``roles``
    keeps only the given roles, ``exclude_roles`` drops them.
    """

    @abstractmethod
    async def get_by_user_and_workspace(
        self, user_id: str, workspace_id: UUID
    ) -> Optional[WorkspaceMembership]:
        """Get a user's membership in a workspace."""
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        """List a user's memberships across all workspaces."""
        pass

    @abstractmethod
    async def list_by_workspace(
        self,
        workspace_id: UUID,
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        """List memberships of one workspace."""
        pass

    @abstractmethod
    async def list_by_workspaces(
        self,
        workspace_ids: list[UUID],
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        """List memberships across several workspaces."""
        pass

    @abstractmethod
    async def count_by_workspace(
        self,
        workspace_id: UUID,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> int:
        """Count memberships of a workspace."""
        pass

    @abstractmethod
    async def list_admin_workspace_ids(self, user_id: str) -> list[UUID]:
        """List IDs of workspaces where the user holds the ADMIN role."""
        pass

    @abstractmethod
    async def create(
        self, workspace_id: UUID, member: WorkspaceMembershipCreate
    ) -> WorkspaceMembership:
        """Add a member to a workspace (seeding and tests)."""
        pass
