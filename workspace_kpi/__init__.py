"""Workspace KPI service."""
