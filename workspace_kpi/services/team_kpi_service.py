"""
Team KPI service.

Builds the two admin-facing KPI views:

1. Workspace overall KPI: every non-customer member of one workspace, each
   scored across all of their workspaces.
2. Team KPI report: every regular member of the workspaces the caller
   administers, with team stats, pagination and an optional created-at window.

Repository fan-outs are independent reads and run concurrently, bounded by
a semaphore. Results are keyed by workspace and folded per user in membership
order, so the output does not depend on fetch completion order.
"""

from __future__ import annotations

import asyncio
import math
from datetime import datetime
from functools import partial
from typing import Awaitable, Callable, Iterable, Optional, Sequence, TypeVar
from uuid import UUID

from workspace_kpi.core.exceptions import InfrastructureError, KpiServiceError
from workspace_kpi.core.logger import setup_logger
from workspace_kpi.interfaces.member_repository import IMemberRepository
from workspace_kpi.interfaces.task_repository import ITaskRepository
from workspace_kpi.interfaces.user_repository import IUserRepository
from workspace_kpi.interfaces.workspace_repository import IWorkspaceRepository
from workspace_kpi.models.kpi import (
    AdminWorkspaceSummary,
    DateRange,
    DateRangeEcho,
    MemberOverallKPI,
    PaginationInfo,
    TeamKPIReport,
    TeamStats,
    WorkspaceKPIEntry,
)
from workspace_kpi.models.task import Task
from workspace_kpi.models.user import UserAccount
from workspace_kpi.models.workspace import Workspace, WorkspaceMembership
from workspace_kpi.services.kpi_access import (
    KPI_EXCLUDED_ROLES,
    TEAM_KPI_MEMBER_ROLES,
    AdminScope,
    ensure_workspace_kpi_access,
    resolve_admin_scope,
)
from workspace_kpi.services.kpi_aggregator import aggregate_workspace_kpis
from workspace_kpi.services.kpi_constants import get_kpi_rating, is_high_performer
from workspace_kpi.services.member_kpi import compute_member_kpi, round_score
from workspace_kpi.utils.datetime_utils import now_utc

logger = setup_logger(__name__)

DEFAULT_FETCH_CONCURRENCY = 8

T = TypeVar("T")


def group_memberships_by_user(
    memberships: Iterable[WorkspaceMembership],
) -> dict[str, list[WorkspaceMembership]]:
    """Group memberships by user, keeping first-seen user order."""
    grouped: dict[str, list[WorkspaceMembership]] = {}
    for membership in memberships:
        grouped.setdefault(membership.user_id, []).append(membership)
    return grouped


def sort_by_overall_kpi(members: Iterable[MemberOverallKPI]) -> list[MemberOverallKPI]:
    """Highest overall KPI first; ties keep their original order."""
    return sorted(members, key=lambda member: member.overall_kpi, reverse=True)


def summarize_team(members: Sequence[MemberOverallKPI]) -> TeamStats:
    """Team stats over the full member list (before pagination)."""
    count = len(members)
    if not count:
        return TeamStats()
    return TeamStats(
        total_members=count,
        average_kpi=round_score(sum(member.overall_kpi for member in members) / count),
        high_performers=sum(1 for member in members if is_high_performer(member.overall_kpi)),
        total_tasks=sum(member.total_tasks_across_workspaces for member in members),
        total_completed=sum(member.total_completed_across_workspaces for member in members),
    )


def paginate(
    members: Sequence[MemberOverallKPI],
    page: int,
    limit: int,
) -> tuple[list[MemberOverallKPI], PaginationInfo]:
    total = len(members)
    total_pages = math.ceil(total / limit)
    start = (page - 1) * limit
    pagination = PaginationInfo(
        page=page,
        limit=limit,
        total_members=total,
        total_pages=total_pages,
        has_more=page < total_pages,
    )
    return list(members[start:start + limit]), pagination


def empty_team_report(limit: int, date_range: Optional[DateRange] = None) -> TeamKPIReport:
    """Report returned to callers who administer no workspace."""
    return TeamKPIReport(
        members=[],
        admin_workspaces=[],
        team_stats=TeamStats(),
        pagination=PaginationInfo(page=1, limit=limit),
        date_range=DateRangeEcho.from_range(date_range),
    )


class TeamKpiService:
    """Assembles member KPI reports from repository data."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        workspace_repo: IWorkspaceRepository,
        member_repo: IMemberRepository,
        user_repo: IUserRepository,
        fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.task_repo = task_repo
        self.workspace_repo = workspace_repo
        self.member_repo = member_repo
        self.user_repo = user_repo
        self.fetch_concurrency = max(1, fetch_concurrency)
        self.clock = clock

    async def _gather_bounded(self, calls: Iterable[Callable[[], Awaitable[T]]]) -> list[T]:
        """Run repository calls concurrently, at most ``fetch_concurrency`` at a time."""
        semaphore = asyncio.Semaphore(self.fetch_concurrency)

        async def run(call: Callable[[], Awaitable[T]]) -> T:
            async with semaphore:
                return await call()

        return list(await asyncio.gather(*(run(call) for call in calls)))

    async def _fetch_tasks(
        self,
        workspace_ids: Iterable[UUID],
        date_range: Optional[DateRange] = None,
    ) -> dict[UUID, list[Task]]:
        """Fetch each distinct workspace's tasks once, concurrently."""
        unique_ids = list(dict.fromkeys(workspace_ids))
        try:
            results = await self._gather_bounded(
                partial(self.task_repo.list_for_workspace, workspace_id, date_range)
                for workspace_id in unique_ids
            )
        except KpiServiceError:
            raise
        except Exception as e:
            logger.error(f"Failed to load tasks for workspaces {unique_ids}: {e!r}")
            raise InfrastructureError("Failed to load workspace tasks") from e
        return dict(zip(unique_ids, results))

    def _member_overall(
        self,
        member_id: UUID,
        user_id: str,
        memberships: Sequence[WorkspaceMembership],
        workspaces_by_id: dict[UUID, Workspace],
        tasks_by_workspace: dict[UUID, list[Task]],
        user: Optional[UserAccount],
        now: datetime,
    ) -> MemberOverallKPI:
        entries: list[WorkspaceKPIEntry] = []
        for membership in memberships:
            workspace = workspaces_by_id.get(membership.workspace_id)
            if workspace is None:
                logger.debug(
                    f"Skipping membership {membership.id}: workspace {membership.workspace_id} not found"
                )
                continue
            result = compute_member_kpi(
                membership.id,
                tasks_by_workspace.get(workspace.id, []),
                workspace.kpi_weights,
                workspace.with_review_stage,
                now,
            )
            entries.append(
                WorkspaceKPIEntry(
                    workspace_id=workspace.id,
                    workspace_name=workspace.name,
                    kpi_score=result.kpi_score,
                    tasks_assigned=result.tasks_assigned,
                    tasks_completed=result.tasks_completed,
                )
            )

        aggregate = aggregate_workspace_kpis(entries)
        return MemberOverallKPI(
            member_id=member_id,
            user_id=user_id,
            user_name=(user.name if user and user.name else "Unknown"),
            user_email=user.email if user else None,
            overall_kpi=aggregate.overall_kpi,
            rating=get_kpi_rating(aggregate.overall_kpi).label,
            workspace_breakdown=aggregate.breakdown,
            total_tasks_across_workspaces=aggregate.total_tasks_assigned,
            total_completed_across_workspaces=aggregate.total_tasks_completed,
            workspace_count=aggregate.workspace_count,
        )

    async def _admin_workspace_summaries(
        self, workspaces: Sequence[Workspace]
    ) -> list[AdminWorkspaceSummary]:
        counts = await self._gather_bounded(
            partial(self.member_repo.count_by_workspace, workspace.id, exclude_roles=KPI_EXCLUDED_ROLES)
            for workspace in workspaces
        )
        return [
            AdminWorkspaceSummary(id=workspace.id, name=workspace.name, member_count=count)
            for workspace, count in zip(workspaces, counts)
        ]

    async def build_team_report(
        self,
        caller_id: str,
        filter_workspace_id: Optional[UUID] = None,
        page: int = 1,
        limit: int = 10,
        date_range: Optional[DateRange] = None,
    ) -> TeamKPIReport:
        """
        Team KPI report over the caller's admin scope.

        Stats are computed over every member before the page slice is taken.
        The admin workspace list always covers the full scope, regardless of
        ``filter_workspace_id``.
        """
        page = max(1, page)
        limit = max(1, limit)
        scope: AdminScope = await resolve_admin_scope(
            caller_id, self.user_repo, self.member_repo, self.workspace_repo
        )
        if scope.is_empty:
            logger.info(f"No admin workspaces for user {caller_id}")
            return empty_team_report(limit, date_range)

        target_ids = scope.target_workspace_ids(filter_workspace_id)
        memberships = await self.member_repo.list_by_workspaces(
            target_ids, roles=TEAM_KPI_MEMBER_ROLES
        )
        grouped = group_memberships_by_user(memberships)

        workspaces_by_id = {workspace.id: workspace for workspace in scope.workspaces}
        tasks_by_workspace = await self._fetch_tasks(
            (membership.workspace_id for membership in memberships), date_range
        )
        users = await self.user_repo.get_many(list(grouped))
        now = self.clock()

        members = sort_by_overall_kpi(
            self._member_overall(
                user_memberships[0].id,
                user_id,
                user_memberships,
                workspaces_by_id,
                tasks_by_workspace,
                users.get(user_id),
                now,
            )
            for user_id, user_memberships in grouped.items()
        )

        team_stats = summarize_team(members)
        page_members, pagination = paginate(members, page, limit)
        admin_workspaces = await self._admin_workspace_summaries(scope.workspaces)

        logger.info(
            f"Team KPI for {caller_id}: {team_stats.total_members} members, "
            f"{len(target_ids)}/{len(scope.workspaces)} workspaces, page {page}/{pagination.total_pages}"
        )

        return TeamKPIReport(
            members=page_members,
            admin_workspaces=admin_workspaces,
            team_stats=team_stats,
            pagination=pagination,
            date_range=DateRangeEcho.from_range(date_range),
        )

    async def build_workspace_overall_kpi(
        self,
        caller_id: str,
        workspace_id: UUID,
    ) -> list[MemberOverallKPI]:
        """
        Overall KPI for every non-customer member of one workspace.

        Each member is scored across all of their own non-customer
        memberships, not only the requested workspace.
        """
        await ensure_workspace_kpi_access(
            caller_id, workspace_id, self.user_repo, self.member_repo, self.workspace_repo
        )

        workspace_members = await self.member_repo.list_by_workspace(
            workspace_id, exclude_roles=KPI_EXCLUDED_ROLES
        )
        if not workspace_members:
            return []

        user_ids = list(dict.fromkeys(member.user_id for member in workspace_members))
        membership_lists = await self._gather_bounded(
            partial(self.member_repo.list_by_user, user_id, exclude_roles=KPI_EXCLUDED_ROLES)
            for user_id in user_ids
        )
        memberships_by_user = dict(zip(user_ids, membership_lists))

        all_workspace_ids = list(
            dict.fromkeys(
                membership.workspace_id
                for memberships in membership_lists
                for membership in memberships
            )
        )
        workspaces = await self.workspace_repo.list_by_ids(all_workspace_ids)
        workspaces_by_id = {workspace.id: workspace for workspace in workspaces}
        tasks_by_workspace = await self._fetch_tasks(all_workspace_ids)
        users = await self.user_repo.get_many(user_ids)
        now = self.clock()

        results = sort_by_overall_kpi(
            self._member_overall(
                member.id,
                member.user_id,
                memberships_by_user.get(member.user_id, []),
                workspaces_by_id,
                tasks_by_workspace,
                users.get(member.user_id),
                now,
            )
            for member in workspace_members
        )
        logger.info(
            f"Overall KPI for workspace {workspace_id}: {len(results)} members across "
            f"{len(all_workspace_ids)} workspaces"
        )
        return results
