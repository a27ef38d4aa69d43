"""
Shared pytest fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from workspace_kpi.infrastructure.local.database import Base
from workspace_kpi.models.enums import MemberRole, TaskStatus
from workspace_kpi.models.kpi import DateRange
from workspace_kpi.models.task import Task
from workspace_kpi.models.user import UserAccount
from workspace_kpi.models.workspace import Workspace, WorkspaceKPIWeights, WorkspaceMembership
from workspace_kpi.utils.datetime_utils import to_naive_utc

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
async def session_factory():
    """In-memory SQLite session factory with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def test_user_id() -> str:
    return "test-user"


# ===========================================
# In-memory repositories
# ===========================================


def _matches_roles(membership, roles, exclude_roles) -> bool:
    if roles is not None and membership.role not in set(roles):
        return False
    if exclude_roles is not None and membership.role in set(exclude_roles):
        return False
    return True


class FakeUserRepo:
    def __init__(self, store: "KpiStore"):
        self._store = store

    async def get(self, user_id: str) -> Optional[UserAccount]:
        return self._store.users.get(user_id)

    async def get_many(self, user_ids: list[str]) -> dict[str, UserAccount]:
        return {uid: self._store.users[uid] for uid in user_ids if uid in self._store.users}


class FakeWorkspaceRepo:
    def __init__(self, store: "KpiStore"):
        self._store = store

    async def get(self, workspace_id: UUID) -> Optional[Workspace]:
        return self._store.workspaces.get(workspace_id)

    async def list_by_ids(self, workspace_ids: list[UUID]) -> list[Workspace]:
        return [self._store.workspaces[wid] for wid in workspace_ids if wid in self._store.workspaces]

    async def list_owned_by(self, user_id: str) -> list[Workspace]:
        return [ws for ws in self._store.workspaces.values() if ws.owner_user_id == user_id]


class FakeMemberRepo:
    def __init__(self, store: "KpiStore"):
        self._store = store

    async def get_by_user_and_workspace(self, user_id: str, workspace_id: UUID):
        for membership in self._store.memberships:
            if membership.user_id == user_id and membership.workspace_id == workspace_id:
                return membership
        return None

    async def list_by_user(self, user_id: str, roles=None, exclude_roles=None):
        return [
            m
            for m in self._store.memberships
            if m.user_id == user_id and _matches_roles(m, roles, exclude_roles)
        ]

    async def list_by_workspace(self, workspace_id: UUID, roles=None, exclude_roles=None):
        return [
            m
            for m in self._store.memberships
            if m.workspace_id == workspace_id and _matches_roles(m, roles, exclude_roles)
        ]

    async def list_by_workspaces(self, workspace_ids: list[UUID], roles=None, exclude_roles=None):
        wanted = set(workspace_ids)
        return [
            m
            for m in self._store.memberships
            if m.workspace_id in wanted and _matches_roles(m, roles, exclude_roles)
        ]

    async def count_by_workspace(self, workspace_id: UUID, exclude_roles=None) -> int:
        return len(await self.list_by_workspace(workspace_id, exclude_roles=exclude_roles))

    async def list_admin_workspace_ids(self, user_id: str) -> list[UUID]:
        memberships = await self.list_by_user(user_id, roles=[MemberRole.ADMIN])
        return [m.workspace_id for m in memberships]


class FakeTaskRepo:
    def __init__(self, store: "KpiStore"):
        self._store = store
        self.calls: list[tuple[UUID, Optional[DateRange]]] = []
        self.error: Optional[Exception] = None

    async def list_for_workspace(self, workspace_id: UUID, date_range: Optional[DateRange] = None) -> list[Task]:
        self.calls.append((workspace_id, date_range))
        if self.error is not None:
            raise self.error
        tasks = [
            t
            for t in self._store.tasks
            if t.workspace_id == workspace_id and t.status != TaskStatus.ARCHIVED
        ]
        if date_range is not None:
            if date_range.start is not None:
                tasks = [t for t in tasks if to_naive_utc(t.created_at) >= to_naive_utc(date_range.start)]
            if date_range.end is not None:
                tasks = [t for t in tasks if to_naive_utc(t.created_at) <= to_naive_utc(date_range.end)]
        return tasks


class KpiStore:
    """Users, workspaces, memberships and tasks kept in memory."""

    def __init__(self):
        self.users: dict[str, UserAccount] = {}
        self.workspaces: dict[UUID, Workspace] = {}
        self.memberships: list[WorkspaceMembership] = []
        self.tasks: list[Task] = []
        self.user_repo = FakeUserRepo(self)
        self.workspace_repo = FakeWorkspaceRepo(self)
        self.member_repo = FakeMemberRepo(self)
        self.task_repo = FakeTaskRepo(self)

    def add_user(self, user_id: str, name: Optional[str] = None, is_super_admin: bool = False) -> UserAccount:
        user = UserAccount(
            id=user_id,
            email=f"{user_id}@example.com",
            name=name if name is not None else user_id.title(),
            is_super_admin=is_super_admin,
            created_at=BASE_TIME,
        )
        self.users[user_id] = user
        return user

    def add_workspace(
        self,
        name: str,
        owner: str = "owner",
        with_review_stage: bool = False,
        weights: Optional[WorkspaceKPIWeights] = None,
    ) -> Workspace:
        workspace = Workspace(
            id=uuid4(),
            name=name,
            owner_user_id=owner,
            with_review_stage=with_review_stage,
            kpi_weights=weights or WorkspaceKPIWeights(completion=100),
            created_at=BASE_TIME,
        )
        self.workspaces[workspace.id] = workspace
        return workspace

    def add_member(
        self,
        user_id: str,
        workspace: Workspace,
        role: MemberRole = MemberRole.MEMBER,
    ) -> WorkspaceMembership:
        membership = WorkspaceMembership(
            id=uuid4(),
            user_id=user_id,
            workspace_id=workspace.id,
            role=role,
            created_at=BASE_TIME + timedelta(minutes=len(self.memberships)),
        )
        self.memberships.append(membership)
        return membership

    def add_tasks(
        self,
        membership: WorkspaceMembership,
        total: int,
        done: int = 0,
        created_at: Optional[datetime] = None,
    ) -> list[Task]:
        created = []
        for index in range(total):
            task = Task(
                id=uuid4(),
                workspace_id=membership.workspace_id,
                name=f"Task {index}",
                status=TaskStatus.DONE if index < done else TaskStatus.TODO,
                assignee_ids=[membership.id],
                created_at=created_at or BASE_TIME,
                updated_at=created_at or BASE_TIME,
            )
            created.append(task)
        self.tasks.extend(created)
        return created


@pytest.fixture
def store() -> KpiStore:
    return KpiStore()
