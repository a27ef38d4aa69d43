"""
Member KPI calculation.

Scores one member in one workspace from that workspace's tasks:

- completion rate: completed / assigned
- productivity: contribution points normalized against a fixed ceiling
- SLA compliance: on-time share of the member's due-dated assigned tasks
- collaboration: completed / followed (tasks followed but not assigned)
- review: completed / (completed + in review) for tasks the member reviews

The weighted sum uses the workspace's weight percentages exactly as
configured. Weights that do not add up to 100 are not renormalized and the
result is not clamped.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from workspace_kpi.models.enums import TaskStatus
from workspace_kpi.models.kpi import MemberKPIResult
from workspace_kpi.models.task import Task
from workspace_kpi.models.workspace import WorkspaceKPIWeights
from workspace_kpi.services.kpi_constants import (
    ASSIGNED_COMPLETED_POINTS,
    FOLLOWING_COMPLETED_POINTS,
    PRODUCTIVITY_CEILING,
    REVIEWING_COMPLETED_POINTS,
)
from workspace_kpi.services.sla_compliance import sla_ratio
from workspace_kpi.utils.datetime_utils import now_utc


def round_score(value: float) -> int:
    """Round half up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def compute_member_kpi(
    member_id: UUID,
    tasks: Iterable[Task],
    weights: WorkspaceKPIWeights,
    with_review_stage: bool,
    now: Optional[datetime] = None,
) -> MemberKPIResult:
    """
    Compute one member's KPI for one workspace.

    Args:
        member_id: Workspace membership ID of the member
        tasks: Non-archived tasks of the workspace
        weights: Workspace KPI weights (percentages)
        with_review_stage: Whether the review metric applies in this workspace
        now: Reference time for open-task SLA checks (defaults to current UTC)

    Returns:
        Score, raw assigned/completed counts, and the sub-metrics
    """
    now = now or now_utc()
    task_list = list(tasks)

    # Every assignee gets full credit for a shared task.
    assigned = [task for task in task_list if task.is_assigned_to(member_id)]
    completed = [task for task in assigned if task.status == TaskStatus.DONE]

    # Assignment wins over following for the same task.
    following = [
        task
        for task in task_list
        if task.is_followed_by(member_id) and not task.is_assigned_to(member_id)
    ]
    following_completed = [task for task in following if task.status == TaskStatus.DONE]

    reviewing_completed = sum(
        1 for task in task_list if task.reviewer_id == member_id and task.status == TaskStatus.DONE
    )
    reviewing_in_review = sum(
        1 for task in task_list if task.reviewer_id == member_id and task.status == TaskStatus.IN_REVIEW
    )

    completion_rate = len(completed) / len(assigned) if assigned else 0.0

    contribution_score = (
        len(completed) * ASSIGNED_COMPLETED_POINTS
        + len(following_completed) * FOLLOWING_COMPLETED_POINTS
        + reviewing_completed * REVIEWING_COMPLETED_POINTS
    )
    productivity = min(contribution_score / PRODUCTIVITY_CEILING, 1.0)

    sla_compliance = sla_ratio(assigned, now)

    collaboration = len(following_completed) / len(following) if following else 0.0

    reviewed_total = reviewing_completed + reviewing_in_review
    review = reviewing_completed / reviewed_total if with_review_stage and reviewed_total else 0.0

    weighted = (
        completion_rate * (weights.completion / 100)
        + productivity * (weights.productivity / 100)
        + sla_compliance * (weights.sla / 100)
        + collaboration * (weights.collaboration / 100)
    )
    if with_review_stage:
        weighted += review * (weights.review / 100)

    return MemberKPIResult(
        kpi_score=round_score(weighted * 100),
        tasks_assigned=len(assigned),
        tasks_completed=len(completed),
        completion_rate=completion_rate,
        productivity=productivity,
        sla_compliance=sla_compliance,
        collaboration=collaboration,
        review=review,
        contribution_score=contribution_score,
    )


def format_kpi_breakdown(
    result: MemberKPIResult,
    weights: WorkspaceKPIWeights,
    with_review_stage: bool = True,
) -> str:
    """Render the weighted terms, e.g. ``(67×0.30) + (20×0.20) + ...``."""
    terms = [
        (result.completion_rate, weights.completion),
        (result.productivity, weights.productivity),
        (result.sla_compliance, weights.sla),
        (result.collaboration, weights.collaboration),
    ]
    if with_review_stage:
        terms.append((result.review, weights.review))
    return " + ".join(f"({round_score(metric * 100)}×{weight / 100:.2f})" for metric, weight in terms)
