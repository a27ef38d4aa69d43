"""
Cross-workspace KPI aggregation.

A member's overall KPI is the average of their per-workspace scores,
weighted by how many tasks they are assigned in each workspace.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from workspace_kpi.models.kpi import MemberWorkspaceKPI, WorkspaceKPIEntry
from workspace_kpi.services.member_kpi import round_score


@dataclass(frozen=True)
class WorkspaceKPIAggregate:
    overall_kpi: int
    breakdown: list[MemberWorkspaceKPI] = field(default_factory=list)
    total_tasks_assigned: int = 0
    total_tasks_completed: int = 0

    @property
    def workspace_count(self) -> int:
        return len(self.breakdown)


def involvement_weights(entries: Sequence[WorkspaceKPIEntry]) -> list[float]:
    """
    Weight of each entry: its share of the member's assigned tasks.

    Falls back to uniform weights when the member has no assigned task
    anywhere.
    """
    if not entries:
        return []
    total_assigned = sum(entry.tasks_assigned for entry in entries)
    if total_assigned > 0:
        return [entry.tasks_assigned / total_assigned for entry in entries]
    return [1 / len(entries)] * len(entries)


def aggregate_workspace_kpis(entries: Sequence[WorkspaceKPIEntry]) -> WorkspaceKPIAggregate:
    """Combine per-workspace results into one overall KPI."""
    weights = involvement_weights(entries)
    breakdown = [
        MemberWorkspaceKPI(**entry.model_dump(), weight=weight)
        for entry, weight in zip(entries, weights)
    ]
    overall = sum(item.kpi_score * item.weight for item in breakdown)
    return WorkspaceKPIAggregate(
        overall_kpi=round_score(overall),
        breakdown=breakdown,
        total_tasks_assigned=sum(item.tasks_assigned for item in breakdown),
        total_tasks_completed=sum(item.tasks_completed for item in breakdown),
    )
