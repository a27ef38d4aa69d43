"""
User account models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Create a user account."""

    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    is_super_admin: bool = False


class UserAccount(BaseModel):
    """User account stored in the database."""

    id: str
    email: str
    name: Optional[str] = None
    is_super_admin: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
