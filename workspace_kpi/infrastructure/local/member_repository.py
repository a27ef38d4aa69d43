"""
SQLite implementation of workspace member repository.
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, func, select

from workspace_kpi.infrastructure.local.database import MemberORM, get_session_factory
from workspace_kpi.interfaces.member_repository import IMemberRepository
from workspace_kpi.models.enums import MemberRole
from workspace_kpi.models.workspace import WorkspaceMembership, WorkspaceMembershipCreate


def _role_values(roles: Optional[Iterable[MemberRole]]) -> list[str]:
    return [role.value for role in roles] if roles is not None else []


class SqliteMemberRepository(IMemberRepository):
    """SQLite implementation of workspace member repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MemberORM) -> WorkspaceMembership:
        return WorkspaceMembership(
            id=UUID(orm.id),
            user_id=orm.user_id,
            workspace_id=UUID(orm.workspace_id),
            role=MemberRole(orm.role),
            created_at=orm.created_at,
        )

    def _with_role_filters(self, query, roles, exclude_roles):
        if roles is not None:
            query = query.where(MemberORM.role.in_(_role_values(roles)))
        if exclude_roles is not None:
            query = query.where(MemberORM.role.not_in(_role_values(exclude_roles)))
        return query

    async def _list(self, query) -> list[WorkspaceMembership]:
        query = query.order_by(MemberORM.created_at.asc(), MemberORM.id.asc())
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get_by_user_and_workspace(
        self, user_id: str, workspace_id: UUID
    ) -> Optional[WorkspaceMembership]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(MemberORM).where(
                    and_(
                        MemberORM.user_id == user_id,
                        MemberORM.workspace_id == str(workspace_id),
                    )
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_by_user(
        self,
        user_id: str,
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        query = select(MemberORM).where(MemberORM.user_id == user_id)
        return await self._list(self._with_role_filters(query, roles, exclude_roles))

    async def list_by_workspace(
        self,
        workspace_id: UUID,
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        query = select(MemberORM).where(MemberORM.workspace_id == str(workspace_id))
        return await self._list(self._with_role_filters(query, roles, exclude_roles))

    async def list_by_workspaces(
        self,
        workspace_ids: list[UUID],
        roles: Optional[Iterable[MemberRole]] = None,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> list[WorkspaceMembership]:
        if not workspace_ids:
            return []
        query = select(MemberORM).where(
            MemberORM.workspace_id.in_([str(workspace_id) for workspace_id in workspace_ids])
        )
        return await self._list(self._with_role_filters(query, roles, exclude_roles))

    async def count_by_workspace(
        self,
        workspace_id: UUID,
        exclude_roles: Optional[Iterable[MemberRole]] = None,
    ) -> int:
        query = select(func.count(MemberORM.id)).where(MemberORM.workspace_id == str(workspace_id))
        if exclude_roles is not None:
            query = query.where(MemberORM.role.not_in(_role_values(exclude_roles)))
        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def list_admin_workspace_ids(self, user_id: str) -> list[UUID]:
        memberships = await self.list_by_user(user_id, roles=[MemberRole.ADMIN])
        return [membership.workspace_id for membership in memberships]

    async def create(
        self, workspace_id: UUID, member: WorkspaceMembershipCreate
    ) -> WorkspaceMembership:
        async with self._session_factory() as session:
            orm = MemberORM(
                id=str(uuid4()),
                user_id=member.user_id,
                workspace_id=str(workspace_id),
                role=member.role.value,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
