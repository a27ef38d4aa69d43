"""
SLA compliance calculation.

A task with a due date is within SLA when it was completed on or before the
deadline, or when it is still open and the deadline has not passed yet.
Tasks without a due date never count against anyone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from workspace_kpi.models.enums import TaskStatus
from workspace_kpi.models.task import Task
from workspace_kpi.services.kpi_constants import SLA_MAIN_TASK_WEIGHT, SLA_SUBTASK_WEIGHT
from workspace_kpi.utils.datetime_utils import now_utc, to_naive_utc


@dataclass(frozen=True)
class SLAComplianceBreakdown:
    main_task_ratio: float
    subtask_ratio: float
    main_due_count: int
    subtask_due_count: int
    combined: float


def is_within_sla(task: Task, now: datetime, done_status: TaskStatus = TaskStatus.DONE) -> bool:
    """Classify a due-dated task. Callers must skip tasks without a due date."""
    if task.due_date is None:
        raise ValueError(f"Task {task.id} has no due date")
    due = to_naive_utc(task.due_date)
    if task.status == done_status:
        return to_naive_utc(task.updated_at) <= due
    return due >= to_naive_utc(now)


def _count_within_sla(
    tasks: Iterable[Task],
    now: datetime,
    done_status: TaskStatus,
) -> tuple[int, int]:
    due_count = 0
    within_count = 0
    for task in tasks:
        if task.due_date is None:
            continue
        due_count += 1
        if is_within_sla(task, now, done_status):
            within_count += 1
    return within_count, due_count


def sla_ratio(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    done_status: TaskStatus = TaskStatus.DONE,
) -> float:
    """Share of due-dated tasks within SLA; 1.0 when none has a due date."""
    within_count, due_count = _count_within_sla(tasks, now or now_utc(), done_status)
    return within_count / due_count if due_count else 1.0


def combined_sla(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    done_status: TaskStatus = TaskStatus.DONE,
) -> SLAComplianceBreakdown:
    """
    SLA compliance over a mix of main tasks and subtasks.

    Main tasks and subtasks are scored separately and blended 0.7 / 0.3.
    When only one group has due-dated tasks its ratio is used as is; when
    neither has any the result is 1.0.
    """
    now = now or now_utc()
    task_list = list(tasks)
    main_tasks = [task for task in task_list if not task.is_subtask]
    subtasks = [task for task in task_list if task.is_subtask]

    main_within, main_due = _count_within_sla(main_tasks, now, done_status)
    sub_within, sub_due = _count_within_sla(subtasks, now, done_status)

    main_ratio = main_within / main_due if main_due else 1.0
    sub_ratio = sub_within / sub_due if sub_due else 1.0

    if main_due and sub_due:
        combined = SLA_MAIN_TASK_WEIGHT * main_ratio + SLA_SUBTASK_WEIGHT * sub_ratio
    elif main_due:
        combined = main_ratio
    elif sub_due:
        combined = sub_ratio
    else:
        combined = 1.0

    return SLAComplianceBreakdown(
        main_task_ratio=main_ratio,
        subtask_ratio=sub_ratio,
        main_due_count=main_due,
        subtask_due_count=sub_due,
        combined=combined,
    )
