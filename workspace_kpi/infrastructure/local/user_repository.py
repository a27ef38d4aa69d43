"""
SQLite implementation of user repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy import select

from workspace_kpi.infrastructure.local.database import UserORM, get_session_factory
from workspace_kpi.interfaces.user_repository import IUserRepository
from workspace_kpi.models.user import UserAccount, UserCreate


class SqliteUserRepository(IUserRepository):
    """SQLite implementation of user repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: UserORM) -> UserAccount:
        return UserAccount(
            id=orm.id,
            email=orm.email,
            name=orm.name,
            is_super_admin=bool(orm.is_super_admin),
            created_at=orm.created_at,
        )

    async def get(self, user_id: str) -> Optional[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(select(UserORM).where(UserORM.id == user_id))
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_many(self, user_ids: list[str]) -> dict[str, UserAccount]:
        if not user_ids:
            return {}
        async with self._session_factory() as session:
            result = await session.execute(select(UserORM).where(UserORM.id.in_(user_ids)))
            return {orm.id: self._orm_to_model(orm) for orm in result.scalars().all()}

    async def create(self, data: UserCreate) -> UserAccount:
        async with self._session_factory() as session:
            orm = UserORM(
                id=str(uuid4()),
                email=data.email.strip().lower(),
                name=data.name,
                is_super_admin=data.is_super_admin,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
