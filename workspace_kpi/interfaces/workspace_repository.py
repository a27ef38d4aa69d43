"""
Workspace repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from workspace_kpi.models.workspace import Workspace, WorkspaceCreate


class IWorkspaceRepository(ABC):
    """Abstract interface for workspace persistence."""

    @abstractmethod
    async def get(self, workspace_id: UUID) -> Optional[Workspace]:
        """Get a workspace by ID."""
        pass

    @abstractmethod
    async def list_by_ids(self, workspace_ids: list[UUID]) -> list[Workspace]:
        """Get several workspaces, preserving the order of ``workspace_ids``."""
        pass

    @abstractmethod
    async def list_owned_by(self, user_id: str) -> list[Workspace]:
        """List workspaces owned by a user."""
        pass

    @abstractmethod
    async def create(self, owner_user_id: str, workspace: WorkspaceCreate) -> Workspace:
        """Create a workspace (seeding and tests)."""
        pass
