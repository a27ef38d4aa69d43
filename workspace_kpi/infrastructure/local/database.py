"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime
from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from workspace_kpi.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class UserORM(Base):
    """User ORM model."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    is_super_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class WorkspaceORM(Base):
    """Workspace ORM model, including the KPI weight configuration."""

    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)  # owner
    name = Column(String(200), nullable=False)
    with_review_stage = Column(Boolean, default=True, nullable=False)
    kpi_completion_weight = Column(Float, default=30.0, nullable=False)
    kpi_productivity_weight = Column(Float, default=20.0, nullable=False)
    kpi_sla_weight = Column(Float, default=20.0, nullable=False)
    kpi_collaboration_weight = Column(Float, default=15.0, nullable=False)
    kpi_review_weight = Column(Float, default=15.0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class MemberORM(Base):
    """Workspace membership ORM model."""

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("user_id", "workspace_id", name="uq_member_user_workspace"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    workspace_id = Column(String(36), nullable=False, index=True)
    role = Column(String(20), default="MEMBER", nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class TaskORM(Base):
    """Task ORM model."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    workspace_id = Column(String(36), nullable=False, index=True)
    name = Column(String(500), nullable=False)
    status = Column(String(20), default="TODO", index=True)
    assignee_ids = Column(JSON, nullable=True, default=list)  # member IDs
    reviewer_id = Column(String(36), nullable=True)  # member ID
    follower_ids = Column(JSON, nullable=True, default=list)  # member IDs
    due_date = Column(DateTime, nullable=True)
    parent_task_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ===========================================
# Engine / Session
# ===========================================


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
