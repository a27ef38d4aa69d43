"""
Task repository interface.

Supplies the KPI engine with workspace tasks.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from workspace_kpi.models.kpi import DateRange
from workspace_kpi.models.task import Task, TaskCreate


class ITaskRepository(ABC):
    """Abstract interface for task reads used by the KPI engine."""

    @abstractmethod
    async def list_for_workspace(
        self,
        workspace_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Task]:
        """
        List non-archived tasks of a workspace.

        Args:
            workspace_id: Workspace ID
            date_range: Optional inclusive bounds on task creation time

        Returns:
            Tasks ordered by creation time
        """
        pass

    @abstractmethod
    async def create(self, workspace_id: UUID, task: TaskCreate) -> Task:
        """Create a task (seeding and tests)."""
        pass
