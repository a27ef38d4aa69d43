"""
SQLite implementation of Task repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from workspace_kpi.infrastructure.local.database import TaskORM, get_session_factory
from workspace_kpi.interfaces.task_repository import ITaskRepository
from workspace_kpi.models.enums import TaskStatus
from workspace_kpi.models.kpi import DateRange
from workspace_kpi.models.task import Task, TaskCreate
from workspace_kpi.utils.datetime_utils import to_naive_utc


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskORM) -> Task:
        """Convert ORM object to Pydantic model."""
        return Task(
            id=UUID(orm.id),
            workspace_id=UUID(orm.workspace_id),
            name=orm.name,
            status=TaskStatus(orm.status),
            assignee_ids=[UUID(member_id) for member_id in (orm.assignee_ids or [])],
            reviewer_id=UUID(orm.reviewer_id) if orm.reviewer_id else None,
            due_date=orm.due_date,
            follower_ids=[UUID(member_id) for member_id in (orm.follower_ids or [])],
            parent_task_id=UUID(orm.parent_task_id) if orm.parent_task_id else None,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def list_for_workspace(
        self,
        workspace_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Task]:
        """List non-archived tasks, optionally bounded by creation time."""
        async with self._session_factory() as session:
            query = select(TaskORM).where(
                TaskORM.workspace_id == str(workspace_id),
                TaskORM.status != TaskStatus.ARCHIVED.value,
            )

            if date_range is not None:
                if date_range.start is not None:
                    query = query.where(TaskORM.created_at >= to_naive_utc(date_range.start))
                if date_range.end is not None:
                    query = query.where(TaskORM.created_at <= to_naive_utc(date_range.end))

            query = query.order_by(TaskORM.created_at.asc(), TaskORM.id.asc())

            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def create(self, workspace_id: UUID, task: TaskCreate) -> Task:
        """Create a new task."""
        now = datetime.utcnow()
        async with self._session_factory() as session:
            orm = TaskORM(
                id=str(uuid4()),
                workspace_id=str(workspace_id),
                name=task.name,
                status=task.status.value,
                assignee_ids=[str(member_id) for member_id in task.assignee_ids],
                reviewer_id=str(task.reviewer_id) if task.reviewer_id else None,
                follower_ids=[str(member_id) for member_id in task.follower_ids],
                due_date=to_naive_utc(task.due_date) if task.due_date else None,
                parent_task_id=str(task.parent_task_id) if task.parent_task_id else None,
                created_at=to_naive_utc(task.created_at) if task.created_at else now,
                updated_at=to_naive_utc(task.updated_at) if task.updated_at else now,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
