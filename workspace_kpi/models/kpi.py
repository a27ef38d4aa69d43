"""
Member KPI models.

All of these are computed per request from current task and membership
state; none of them is persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from workspace_kpi.utils.datetime_utils import format_iso


class DateRange(BaseModel):
    """Inclusive created-at window applied to task fetches."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None


class MemberKPIResult(BaseModel):
    """One member's score in one workspace, with its sub-metrics."""

    kpi_score: int
    tasks_assigned: int = Field(..., ge=0)
    tasks_completed: int = Field(..., ge=0)
    completion_rate: float = 0.0
    productivity: float = 0.0
    sla_compliance: float = 1.0
    collaboration: float = 0.0
    review: float = 0.0
    contribution_score: float = 0.0


class WorkspaceKPIEntry(BaseModel):
    """Input to the cross-workspace aggregation (one per membership)."""

    workspace_id: UUID
    workspace_name: str = "Unknown"
    kpi_score: int
    tasks_assigned: int = Field(..., ge=0)
    tasks_completed: int = Field(..., ge=0)


class MemberWorkspaceKPI(WorkspaceKPIEntry):
    """Per-workspace breakdown entry with its aggregation weight attached."""

    weight: float = Field(..., ge=0, le=1)


class MemberOverallKPI(BaseModel):
    """One member's KPI aggregated across the workspaces in scope."""

    member_id: UUID
    user_id: str
    user_name: str = "Unknown"
    user_email: Optional[str] = None
    overall_kpi: int
    rating: str
    workspace_breakdown: list[MemberWorkspaceKPI] = Field(default_factory=list)
    total_tasks_across_workspaces: int = 0
    total_completed_across_workspaces: int = 0
    workspace_count: int = 0


class TeamStats(BaseModel):
    """Team-wide summary, computed over the full member list."""

    total_members: int = 0
    average_kpi: int = 0
    high_performers: int = 0
    total_tasks: int = 0
    total_completed: int = 0


class AdminWorkspaceSummary(BaseModel):
    id: UUID
    name: str
    member_count: int = 0


class PaginationInfo(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(..., ge=1)
    total_members: int = 0
    total_pages: int = 0
    has_more: bool = False


class DateRangeEcho(BaseModel):
    """Resolved date bounds, echoed back as ISO strings."""

    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_range(cls, date_range: Optional[DateRange]) -> "DateRangeEcho":
        if date_range is None:
            return cls()
        return cls(
            start_date=format_iso(date_range.start),
            end_date=format_iso(date_range.end),
        )


class TeamKPIReport(BaseModel):
    """Team KPI report for the workspaces a caller administers."""

    members: list[MemberOverallKPI] = Field(default_factory=list)
    admin_workspaces: list[AdminWorkspaceSummary] = Field(default_factory=list)
    team_stats: TeamStats = Field(default_factory=TeamStats)
    pagination: PaginationInfo
    date_range: DateRangeEcho = Field(default_factory=DateRangeEcho)
