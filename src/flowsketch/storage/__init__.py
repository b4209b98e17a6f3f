"""Storage layer for flowsketch projects."""

from .repository import (
    InMemoryProjectRepository,
    Project,
    ProjectRepository,
    ProjectSummary,
    SQLiteProjectRepository,
)

__all__ = [
    "InMemoryProjectRepository",
    "Project",
    "ProjectRepository",
    "ProjectSummary",
    "SQLiteProjectRepository",
]
