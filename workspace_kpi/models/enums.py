"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/role values.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status."""

    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"


class MemberRole(str, Enum):
    """Role of a member within a workspace."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VISITOR = "VISITOR"
    CUSTOMER = "CUSTOMER"
