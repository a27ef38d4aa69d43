"""
SQLite implementation of workspace repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from workspace_kpi.infrastructure.local.database import WorkspaceORM, get_session_factory
from workspace_kpi.interfaces.workspace_repository import IWorkspaceRepository
from workspace_kpi.models.workspace import Workspace, WorkspaceCreate, WorkspaceKPIWeights
from workspace_kpi.services.kpi_constants import default_kpi_weights


class SqliteWorkspaceRepository(IWorkspaceRepository):
    """SQLite implementation of workspace repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: WorkspaceORM) -> Workspace:
        return Workspace(
            id=UUID(orm.id),
            name=orm.name,
            owner_user_id=orm.user_id,
            with_review_stage=bool(orm.with_review_stage),
            kpi_weights=WorkspaceKPIWeights(
                completion=orm.kpi_completion_weight,
                productivity=orm.kpi_productivity_weight,
                sla=orm.kpi_sla_weight,
                collaboration=orm.kpi_collaboration_weight,
                review=orm.kpi_review_weight,
            ),
            created_at=orm.created_at,
        )

    async def get(self, workspace_id: UUID) -> Optional[Workspace]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(WorkspaceORM).where(WorkspaceORM.id == str(workspace_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_by_ids(self, workspace_ids: list[UUID]) -> list[Workspace]:
        if not workspace_ids:
            return []
        async with self._session_factory() as session:
            result = await session.execute(
                select(WorkspaceORM).where(
                    WorkspaceORM.id.in_([str(workspace_id) for workspace_id in workspace_ids])
                )
            )
            by_id = {orm.id: self._orm_to_model(orm) for orm in result.scalars().all()}
        return [by_id[str(workspace_id)] for workspace_id in workspace_ids if str(workspace_id) in by_id]

    async def list_owned_by(self, user_id: str) -> list[Workspace]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(WorkspaceORM)
                .where(WorkspaceORM.user_id == user_id)
                .order_by(WorkspaceORM.created_at.asc(), WorkspaceORM.id.asc())
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def create(self, owner_user_id: str, workspace: WorkspaceCreate) -> Workspace:
        weights = workspace.kpi_weights or default_kpi_weights(workspace.with_review_stage)
        async with self._session_factory() as session:
            orm = WorkspaceORM(
                id=str(uuid4()),
                user_id=owner_user_id,
                name=workspace.name,
                with_review_stage=workspace.with_review_stage,
                kpi_completion_weight=weights.completion,
                kpi_productivity_weight=weights.productivity,
                kpi_sla_weight=weights.sla,
                kpi_collaboration_weight=weights.collaboration,
                kpi_review_weight=weights.review,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
