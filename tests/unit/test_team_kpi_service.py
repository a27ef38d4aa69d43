import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from workspace_kpi.core.exceptions import ForbiddenError, InfrastructureError
from workspace_kpi.models.enums import MemberRole
from workspace_kpi.models.kpi import DateRange, MemberOverallKPI
from workspace_kpi.services.team_kpi_service import (
    TeamKpiService,
    paginate,
    sort_by_overall_kpi,
    summarize_team,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _service(store, fetch_concurrency: int = 8) -> TeamKpiService:
    return TeamKpiService(
        store.task_repo,
        store.workspace_repo,
        store.member_repo,
        store.user_repo,
        fetch_concurrency=fetch_concurrency,
        clock=lambda: NOW,
    )


def _team(store):
    """Alice administers Alpha; Bob 2/2, Carol 1/2 and Dan 0/1 done there."""
    store.add_user("alice")
    alpha = store.add_workspace("Alpha")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    for user_id, total, done in [("bob", 2, 2), ("carol", 2, 1), ("dan", 1, 0)]:
        store.add_user(user_id)
        membership = store.add_member(user_id, alpha, MemberRole.MEMBER)
        store.add_tasks(membership, total, done)
    return alpha


@pytest.mark.asyncio
async def test_empty_scope_returns_empty_report(store):
    store.add_user("bob")
    date_range = DateRange(start=NOW - timedelta(days=7), end=NOW)

    report = await _service(store).build_team_report("bob", page=3, limit=20, date_range=date_range)

    assert report.members == []
    assert report.admin_workspaces == []
    assert report.team_stats.total_members == 0
    assert report.pagination.page == 1
    assert report.pagination.limit == 20
    assert report.pagination.total_pages == 0
    assert report.pagination.has_more is False
    assert report.date_range.start_date is not None
    assert report.date_range.end_date is not None


@pytest.mark.asyncio
async def test_members_are_sorted_and_rated(store):
    _team(store)

    report = await _service(store).build_team_report("alice")

    assert [m.user_id for m in report.members] == ["bob", "carol", "dan"]
    assert [m.overall_kpi for m in report.members] == [100, 50, 0]
    assert [m.rating for m in report.members] == ["Excellent", "Average", "Needs Improvement"]
    assert report.members[0].user_name == "Bob"
    assert report.members[0].user_email == "bob@example.com"


@pytest.mark.asyncio
async def test_team_stats_do_not_depend_on_page(store):
    _team(store)
    service = _service(store)

    first = await service.build_team_report("alice", page=1, limit=2)
    second = await service.build_team_report("alice", page=2, limit=2)

    assert first.team_stats == second.team_stats
    assert first.team_stats.total_members == 3
    assert first.team_stats.average_kpi == 50
    assert first.team_stats.high_performers == 1
    assert first.team_stats.total_tasks == 5
    assert first.team_stats.total_completed == 3

    assert [m.user_id for m in first.members] == ["bob", "carol"]
    assert [m.user_id for m in second.members] == ["dan"]
    assert first.pagination.total_pages == 2
    assert first.pagination.has_more is True
    assert second.pagination.has_more is False


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(store):
    _team(store)

    report = await _service(store).build_team_report("alice", page=5, limit=2)

    assert report.members == []
    assert report.pagination.page == 5
    assert report.pagination.has_more is False
    assert report.team_stats.total_members == 3


@pytest.mark.asyncio
async def test_only_member_role_is_scored(store):
    alpha = _team(store)
    store.add_user("vic")
    store.add_user("cus")
    store.add_member("vic", alpha, MemberRole.VISITOR)
    store.add_member("cus", alpha, MemberRole.CUSTOMER)

    report = await _service(store).build_team_report("alice")

    assert {m.user_id for m in report.members} == {"bob", "carol", "dan"}
    # Admin workspace counts exclude customers only.
    assert report.admin_workspaces[0].member_count == 5


@pytest.mark.asyncio
async def test_member_is_aggregated_across_admin_workspaces(store):
    store.add_user("alice")
    store.add_user("bob")
    alpha = store.add_workspace("Alpha")
    beta = store.add_workspace("Beta")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    store.add_member("alice", beta, MemberRole.ADMIN)
    in_alpha = store.add_member("bob", alpha, MemberRole.MEMBER)
    store.add_member("bob", beta, MemberRole.MEMBER)
    store.add_tasks(in_alpha, 10, 4)

    report = await _service(store).build_team_report("alice")

    assert len(report.members) == 1
    bob = report.members[0]
    assert bob.member_id == in_alpha.id
    assert bob.workspace_count == 2
    assert [w.weight for w in bob.workspace_breakdown] == [1.0, 0.0]
    # Beta has no tasks (score 0) and weight 0.
    assert bob.overall_kpi == 40
    assert bob.total_tasks_across_workspaces == 10
    assert bob.total_completed_across_workspaces == 4


@pytest.mark.asyncio
async def test_filter_inside_scope_narrows_members_not_admin_list(store):
    store.add_user("alice")
    alpha = store.add_workspace("Alpha")
    beta = store.add_workspace("Beta")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    store.add_member("alice", beta, MemberRole.ADMIN)
    store.add_user("bob")
    store.add_user("carol")
    store.add_member("bob", alpha)
    store.add_member("carol", beta)

    report = await _service(store).build_team_report("alice", filter_workspace_id=beta.id)

    assert [m.user_id for m in report.members] == ["carol"]
    assert [w.name for w in report.admin_workspaces] == ["Alpha", "Beta"]


@pytest.mark.asyncio
async def test_filter_outside_scope_uses_full_scope(store):
    store.add_user("alice")
    alpha = store.add_workspace("Alpha")
    beta = store.add_workspace("Beta")
    outside = store.add_workspace("Outside")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    store.add_member("alice", beta, MemberRole.ADMIN)
    store.add_user("bob")
    store.add_user("carol")
    store.add_user("eve")
    store.add_member("bob", alpha)
    store.add_member("carol", beta)
    store.add_member("eve", outside)

    filtered = await _service(store).build_team_report("alice", filter_workspace_id=outside.id)
    unfiltered = await _service(store).build_team_report("alice")

    assert {m.user_id for m in filtered.members} == {"bob", "carol"}
    assert filtered.model_dump() == unfiltered.model_dump()


@pytest.mark.asyncio
async def test_super_admin_scope_includes_owned_workspaces(store):
    store.add_user("root", is_super_admin=True)
    owned = store.add_workspace("Owned", owner="root")
    store.add_user("bob")
    store.add_member("bob", owned)

    report = await _service(store).build_team_report("root")

    assert [w.id for w in report.admin_workspaces] == [owned.id]
    assert [m.user_id for m in report.members] == ["bob"]


@pytest.mark.asyncio
async def test_date_range_limits_tasks_and_each_workspace_is_fetched_once(store):
    store.add_user("alice")
    alpha = store.add_workspace("Alpha")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    for user_id in ["bob", "carol"]:
        store.add_user(user_id)
        membership = store.add_member(user_id, alpha)
        store.add_tasks(membership, 2, 2, created_at=NOW - timedelta(days=1))
        store.add_tasks(membership, 2, 0, created_at=NOW - timedelta(days=30))
    date_range = DateRange(start=NOW - timedelta(days=7), end=NOW)

    report = await _service(store).build_team_report("alice", date_range=date_range)

    assert store.task_repo.calls == [(alpha.id, date_range)]
    assert [m.overall_kpi for m in report.members] == [100, 100]
    assert report.team_stats.total_tasks == 4


@pytest.mark.asyncio
async def test_missing_user_record_falls_back_to_unknown(store):
    store.add_user("alice")
    alpha = store.add_workspace("Alpha")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    store.add_member("ghost", alpha)

    report = await _service(store).build_team_report("alice")

    assert report.members[0].user_name == "Unknown"
    assert report.members[0].user_email is None


@pytest.mark.asyncio
async def test_task_source_failure_is_wrapped(store):
    _team(store)
    store.task_repo.error = RuntimeError("database is locked")

    with pytest.raises(InfrastructureError):
        await _service(store).build_team_report("alice")


@pytest.mark.asyncio
async def test_fetches_respect_concurrency_limit(store):
    store.add_user("alice")
    store.add_user("bob")
    for index in range(5):
        workspace = store.add_workspace(f"W{index}")
        store.add_member("alice", workspace, MemberRole.ADMIN)
        store.add_member("bob", workspace)

    in_flight = 0
    peak = 0
    list_for_workspace = store.task_repo.list_for_workspace

    async def tracked(workspace_id, date_range=None):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        return await list_for_workspace(workspace_id, date_range)

    store.task_repo.list_for_workspace = tracked

    report = await _service(store, fetch_concurrency=2).build_team_report("alice")

    assert peak <= 2
    assert report.members[0].workspace_count == 5


def _track_peak(repo, name):
    """Wrap ``repo.<name>`` so the highest number of overlapping calls is recorded."""
    original = getattr(repo, name)
    state = {"in_flight": 0, "peak": 0}

    async def tracked(*args, **kwargs):
        state["in_flight"] += 1
        state["peak"] = max(state["peak"], state["in_flight"])
        await asyncio.sleep(0)
        state["in_flight"] -= 1
        return await original(*args, **kwargs)

    setattr(repo, name, tracked)
    return state


@pytest.mark.asyncio
async def test_member_counts_respect_concurrency_limit(store):
    store.add_user("alice")
    for index in range(4):
        workspace = store.add_workspace(f"W{index}")
        store.add_member("alice", workspace, MemberRole.ADMIN)
        store.add_member(f"user-{index}", workspace)
    state = _track_peak(store.member_repo, "count_by_workspace")

    report = await _service(store, fetch_concurrency=1).build_team_report("alice")

    assert state["peak"] == 1
    assert [summary.member_count for summary in report.admin_workspaces] == [2, 2, 2, 2]


@pytest.mark.asyncio
async def test_membership_lookups_respect_concurrency_limit(store):
    alpha = store.add_workspace("Alpha")
    store.add_user("alice")
    store.add_member("alice", alpha, MemberRole.ADMIN)
    for index in range(4):
        store.add_member(f"user-{index}", alpha)
    state = _track_peak(store.member_repo, "list_by_user")

    results = await _service(store, fetch_concurrency=1).build_workspace_overall_kpi("alice", alpha.id)

    assert state["peak"] == 1
    assert len(results) == 5


@pytest.mark.asyncio
async def test_team_report_floors_page_and_limit(store):
    _team(store)

    report = await _service(store).build_team_report("alice", page=0, limit=0)

    assert report.pagination.page == 1
    assert report.pagination.limit == 1
    assert len(report.members) == 1
    assert report.pagination.total_pages == report.team_stats.total_members


@pytest.mark.asyncio
async def test_workspace_overall_kpi_requires_admin(store):
    alpha = _team(store)

    with pytest.raises(ForbiddenError):
        await _service(store).build_workspace_overall_kpi("bob", alpha.id)


@pytest.mark.asyncio
async def test_workspace_overall_kpi_covers_all_non_customer_members(store):
    alpha = _team(store)
    other = store.add_workspace("Other")
    store.add_user("cus")
    store.add_member("cus", alpha, MemberRole.CUSTOMER)
    # Dan also works elsewhere, outside Alice's scope.
    dan_other = store.add_member("dan", other)
    store.add_tasks(dan_other, 3, 3)

    results = await _service(store).build_workspace_overall_kpi("alice", alpha.id)

    user_ids = [m.user_id for m in results]
    assert "cus" not in user_ids
    assert set(user_ids) == {"alice", "bob", "carol", "dan"}
    dan = next(m for m in results if m.user_id == "dan")
    # 1 task in Alpha (0), 3 in Other (100): 0.25 * 0 + 0.75 * 100
    assert dan.overall_kpi == 75
    assert dan.workspace_count == 2
    assert [m.overall_kpi for m in results] == sorted((m.overall_kpi for m in results), reverse=True)


@pytest.mark.asyncio
async def test_workspace_overall_kpi_member_id_is_workspace_membership(store):
    alpha = _team(store)
    bob_membership = next(m for m in store.memberships if m.user_id == "bob")

    results = await _service(store).build_workspace_overall_kpi("alice", alpha.id)

    bob = next(m for m in results if m.user_id == "bob")
    assert bob.member_id == bob_membership.id


@pytest.mark.asyncio
async def test_workspace_overall_kpi_ignores_date_filter(store):
    alpha = _team(store)

    await _service(store).build_workspace_overall_kpi("alice", alpha.id)

    assert all(date_range is None for _, date_range in store.task_repo.calls)


def test_sort_is_stable_for_ties():
    members = [
        MemberOverallKPI(member_id=uuid4(), user_id=uid, overall_kpi=score, rating="Good")
        for uid, score in [("a", 60), ("b", 70), ("c", 60)]
    ]

    assert [m.user_id for m in sort_by_overall_kpi(members)] == ["b", "a", "c"]


def test_summarize_and_paginate_empty_list():
    stats = summarize_team([])
    page_members, pagination = paginate([], 1, 10)

    assert stats.average_kpi == 0
    assert page_members == []
    assert pagination.total_pages == 0
    assert pagination.has_more is False
