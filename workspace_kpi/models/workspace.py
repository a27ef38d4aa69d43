"""
Workspace and membership models.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from workspace_kpi.models.enums import MemberRole


class WorkspaceKPIWeights(BaseModel):
    """
    Per-workspace KPI weights, expressed as percentages.

    The five weights are expected to add up to 100 but this is not enforced;
    the engine applies each one as configured.
    """

    completion: float = Field(0.0, description="Completion rate weight (%)")
    productivity: float = Field(0.0, description="Productivity weight (%)")
    sla: float = Field(0.0, description="SLA compliance weight (%)")
    collaboration: float = Field(0.0, description="Collaboration weight (%)")
    review: float = Field(0.0, description="Review weight (%)")

    @property
    def total(self) -> float:
        return self.completion + self.productivity + self.sla + self.collaboration + self.review


class Workspace(BaseModel):
    """Workspace with its KPI configuration."""

    id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    owner_user_id: str = Field(..., description="User who created/owns the workspace")
    with_review_stage: bool = True
    kpi_weights: WorkspaceKPIWeights = Field(default_factory=WorkspaceKPIWeights)
    created_at: datetime

    class Config:
        from_attributes = True


class WorkspaceCreate(BaseModel):
    """Create a workspace (seeding and tests)."""

    name: str = Field(..., min_length=1, max_length=200)
    with_review_stage: bool = True
    kpi_weights: WorkspaceKPIWeights | None = None


class WorkspaceMembership(BaseModel):
    """Links a user to a workspace with a role."""

    id: UUID
    user_id: str
    workspace_id: UUID
    role: MemberRole = MemberRole.MEMBER
    created_at: datetime

    class Config:
        from_attributes = True


class WorkspaceMembershipCreate(BaseModel):
    """Add a user to a workspace (seeding and tests)."""

    user_id: str = Field(..., min_length=1, max_length=255)
    role: MemberRole = MemberRole.MEMBER
