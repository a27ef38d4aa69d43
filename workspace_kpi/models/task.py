"""
Task model definitions.

Tasks are read-only inputs to the KPI engine. Assignee, reviewer and
follower references are workspace membership IDs.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from workspace_kpi.models.enums import TaskStatus


class Task(BaseModel):
    """Task as seen by the KPI engine."""

    id: UUID
    workspace_id: UUID
    name: str = Field("", max_length=500)
    status: TaskStatus = TaskStatus.TODO
    assignee_ids: list[UUID] = Field(default_factory=list, description="Assigned member IDs")
    reviewer_id: Optional[UUID] = Field(None, description="Reviewing member ID")
    due_date: Optional[datetime] = None
    follower_ids: list[UUID] = Field(default_factory=list, description="Following member IDs")
    parent_task_id: Optional[UUID] = Field(None, description="Parent task ID (subtasks only)")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @property
    def is_subtask(self) -> bool:
        return self.parent_task_id is not None

    def is_assigned_to(self, member_id: UUID) -> bool:
        return member_id in self.assignee_ids

    def is_followed_by(self, member_id: UUID) -> bool:
        return member_id in self.follower_ids


class TaskCreate(BaseModel):
    """Create a new task (seeding and tests)."""

    name: str = Field(..., min_length=1, max_length=500)
    status: TaskStatus = TaskStatus.TODO
    assignee_ids: list[UUID] = Field(default_factory=list)
    reviewer_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    follower_ids: list[UUID] = Field(default_factory=list)
    parent_task_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
