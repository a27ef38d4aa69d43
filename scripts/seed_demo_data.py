"""
Seed demo data for the KPI dashboards.

Usage:
    python -m scripts.seed_demo_data          # Dry-run (shows what will be created)
    python -m scripts.seed_demo_data --apply   # Actually insert data

Uses DATABASE_URL from .env. With AUTH_PROVIDER=local a signed token
is printed for each user; with the mock provider the user ID is the token.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Suppress noisy SQLAlchemy logs during seed
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from workspace_kpi.core.config import get_settings
from workspace_kpi.core.security import create_access_token
from workspace_kpi.models.enums import MemberRole, TaskStatus
from workspace_kpi.models.task import TaskCreate
from workspace_kpi.models.user import UserCreate
from workspace_kpi.models.workspace import WorkspaceCreate, WorkspaceMembershipCreate

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
NOW = datetime.now(timezone.utc)


def _days(offset: int) -> datetime:
    return NOW + timedelta(days=offset)


# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------
def _users() -> list[dict]:
    return [
        {"key": "alice", "create": UserCreate(email="alice@example.com", name="Alice", is_super_admin=True)},
        {"key": "bob", "create": UserCreate(email="bob@example.com", name="Bob")},
        {"key": "carol", "create": UserCreate(email="carol@example.com", name="Carol")},
        {"key": "dave", "create": UserCreate(email="dave@example.com", name="Dave")},
    ]


def _workspaces() -> list[dict]:
    return [
        {
            "key": "platform",
            "owner": "alice",
            "create": WorkspaceCreate(name="Platform", with_review_stage=True),
        },
        {
            "key": "mobile",
            "owner": "alice",
            "create": WorkspaceCreate(name="Mobile", with_review_stage=False),
        },
    ]


def _memberships() -> list[dict]:
    return [
        {"workspace": "platform", "user": "alice", "role": MemberRole.ADMIN},
        {"workspace": "platform", "user": "bob", "role": MemberRole.MEMBER},
        {"workspace": "platform", "user": "carol", "role": MemberRole.MEMBER},
        {"workspace": "platform", "user": "dave", "role": MemberRole.CUSTOMER},
        {"workspace": "mobile", "user": "bob", "role": MemberRole.MEMBER},
        {"workspace": "mobile", "user": "carol", "role": MemberRole.VISITOR},
    ]


def _tasks() -> list[dict]:
    """Assignees, reviewer and followers are (workspace, user) membership keys."""
    return [
        {
            "workspace": "platform",
            "name": "Set up CI pipeline",
            "status": TaskStatus.DONE,
            "assignees": ["bob"],
            "reviewer": "alice",
            "due": _days(-5),
            "created": _days(-20),
            "updated": _days(-6),
        },
        {
            "workspace": "platform",
            "name": "Write API contract tests",
            "status": TaskStatus.IN_REVIEW,
            "assignees": ["bob", "carol"],
            "reviewer": "alice",
            "due": _days(3),
            "created": _days(-10),
            "updated": _days(-1),
        },
        {
            "workspace": "platform",
            "name": "Migrate task storage",
            "status": TaskStatus.IN_PROGRESS,
            "assignees": ["carol"],
            "followers": ["bob"],
            "due": _days(-2),
            "created": _days(-15),
            "updated": _days(-3),
        },
        {
            "workspace": "platform",
            "name": "Document deployment runbook",
            "status": TaskStatus.DONE,
            "assignees": ["carol"],
            "followers": ["bob"],
            "due": _days(-1),
            "created": _days(-8),
            "updated": _days(-2),
        },
        {
            "workspace": "platform",
            "name": "Old prototype cleanup",
            "status": TaskStatus.ARCHIVED,
            "assignees": ["bob"],
            "created": _days(-40),
            "updated": _days(-30),
        },
        {
            "workspace": "mobile",
            "name": "Push notification settings screen",
            "status": TaskStatus.DONE,
            "assignees": ["bob"],
            "due": _days(1),
            "created": _days(-7),
            "updated": _days(-1),
        },
        {
            "workspace": "mobile",
            "name": "Offline sync",
            "status": TaskStatus.TODO,
            "assignees": ["bob"],
            "created": _days(-3),
            "updated": _days(-3),
        },
    ]


async def seed(*, dry_run: bool = True) -> None:
    from workspace_kpi.infrastructure.local.database import init_db

    await init_db()

    if dry_run:
        print("=" * 60)
        print("  DRY RUN - showing what will be created")
        print("=" * 60)
        _print_plan()
        return

    from workspace_kpi.infrastructure.local.member_repository import SqliteMemberRepository
    from workspace_kpi.infrastructure.local.task_repository import SqliteTaskRepository
    from workspace_kpi.infrastructure.local.user_repository import SqliteUserRepository
    from workspace_kpi.infrastructure.local.workspace_repository import SqliteWorkspaceRepository

    user_repo = SqliteUserRepository()
    workspace_repo = SqliteWorkspaceRepository()
    member_repo = SqliteMemberRepository()
    task_repo = SqliteTaskRepository()

    settings = get_settings()

    # ---- 1. Users ----
    print("\n--- Creating Users ---")
    real_user_ids: dict[str, str] = {}
    for u in _users():
        user = await user_repo.create(u["create"])
        real_user_ids[u["key"]] = user.id
        print(f"  [OK] {u['key']:10s} id={user.id}  email={user.email}")

    # ---- 2. Workspaces ----
    print("\n--- Creating Workspaces ---")
    real_workspace_ids = {}
    for w in _workspaces():
        workspace = await workspace_repo.create(real_user_ids[w["owner"]], w["create"])
        real_workspace_ids[w["key"]] = workspace.id
        print(f"  [OK] {workspace.name:20s} id={workspace.id} review={workspace.with_review_stage}")

    # ---- 3. Memberships ----
    print("\n--- Creating Memberships ---")
    member_ids = {}
    for m in _memberships():
        membership = await member_repo.create(
            real_workspace_ids[m["workspace"]],
            WorkspaceMembershipCreate(user_id=real_user_ids[m["user"]], role=m["role"]),
        )
        member_ids[(m["workspace"], m["user"])] = membership.id
        print(f"  [OK] {m['workspace']:10s} <- {m['user']:10s} role={m['role'].value}")

    # ---- 4. Tasks ----
    print("\n--- Creating Tasks ---")
    for t in _tasks():
        workspace_key = t["workspace"]

        def resolve(user_key: str):
            return member_ids[(workspace_key, user_key)]

        create = TaskCreate(
            name=t["name"],
            status=t["status"],
            assignee_ids=[resolve(key) for key in t.get("assignees", [])],
            reviewer_id=resolve(t["reviewer"]) if t.get("reviewer") else None,
            follower_ids=[resolve(key) for key in t.get("followers", [])],
            due_date=t.get("due"),
            created_at=t["created"],
            updated_at=t["updated"],
        )
        await task_repo.create(real_workspace_ids[workspace_key], create)
        print(f"  [OK] [{t['status'].value:11s}] {t['name']} ({workspace_key})")

    # ---- Summary ----
    print("\n" + "=" * 60)
    print("  SEED COMPLETE")
    print("=" * 60)
    print("\nBearer tokens:")
    for key, uid in real_user_ids.items():
        if settings.AUTH_PROVIDER == "local" and settings.LOCAL_JWT_SECRET:
            token = create_access_token(uid, settings)
        else:
            token = uid
        print(f"  {key:10s} {token}")
    print()


def _print_plan() -> None:
    print(f"\nUsers ({len(_users())}):")
    for u in _users():
        flag = " (super-admin)" if u["create"].is_super_admin else ""
        print(f"  - {u['key']:10s} ({u['create'].email}){flag}")

    print(f"\nWorkspaces ({len(_workspaces())}):")
    for w in _workspaces():
        print(f"  - {w['create'].name} (owner: {w['owner']}, review: {w['create'].with_review_stage})")

    print(f"\nMemberships ({len(_memberships())}):")
    for m in _memberships():
        print(f"  - {m['workspace']:10s} {m['user']:10s} {m['role'].value}")

    print(f"\nTasks ({len(_tasks())}):")
    for t in _tasks():
        print(f"  - [{t['status'].value:11s}] {t['name']} ({t['workspace']})")

    print("\n-> run again with --apply to insert")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed demo users, workspaces, memberships and tasks."
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Actually insert data. Default is dry-run.",
    )
    args = parser.parse_args()
    asyncio.run(seed(dry_run=not args.apply))


if __name__ == "__main__":
    main()
