"""Project repository implementations.

A project stores the flow description text a diagram was built from. Steps
and graphs are never stored: they are recomputed from the text on load.

- SQLiteProjectRepository: Persistent SQLite storage
- InMemoryProjectRepository: In-memory storage for testing
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field

from ..core.exceptions import ProjectNotFoundError, ProjectValidationError
from ..utils.logging import get_logger

logger = get_logger(__name__)


def generate_project_id() -> str:
    return uuid4().hex[:12]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validate(project: "Project") -> None:
    if not project.title.strip():
        raise ProjectValidationError("Project title is required", {"project_id": project.id})


class Project(BaseModel):
    id: str = Field(default_factory=generate_project_id)
    title: str
    topic: str = ""
    description: str = ""
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class ProjectSummary(BaseModel):
    id: str
    title: str
    topic: str = ""
    line_count: int = 0
    updated_at: datetime

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSummary":
        return cls(
            id=project.id,
            title=project.title,
            topic=project.topic,
            line_count=sum(1 for line in project.description.splitlines() if line.strip()),
            updated_at=project.updated_at,
        )


# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------

SCHEMA = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    topic TEXT DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_projects_updated_at ON projects(updated_at);
"""


# -----------------------------------------------------------------------------
# SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteProjectRepository:
    """SQLite-backed project repository.

    Usage:
        repo = SQLiteProjectRepository("flowsketch.sqlite")
        repo.save(project)
        project = repo.get(project.id)
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        """Initialize repository.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
        """
        self.db_path = str(db_path)
        self._is_memory = self.db_path == ":memory:"
        self._persistent_conn: Optional[sqlite3.Connection] = None

        # For in-memory databases, keep a persistent connection
        if self._is_memory:
            self._persistent_conn = self._create_connection()

        self._init_schema()

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        if self._is_memory and self._persistent_conn:
            try:
                yield self._persistent_conn
                self._persistent_conn.commit()
            except Exception:
                self._persistent_conn.rollback()
                raise
        else:
            conn = self._create_connection()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    def _init_schema(self) -> None:
        with self._connection() as conn:
            conn.executescript(SCHEMA)

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def save(self, project: Project) -> str:
        """Save a project. Updates if exists, creates if not."""
        _validate(project)
        project.updated_at = _now()
        with self._connection() as conn:
            existing = conn.execute(
                "SELECT id FROM projects WHERE id = ?", (project.id,)
            ).fetchone()

            if existing:
                conn.execute(
                    """
                    UPDATE projects SET
                        title = ?,
                        topic = ?,
                        description = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        project.title,
                        project.topic,
                        project.description,
                        project.updated_at.isoformat(),
                        project.id,
                    ),
                )
            else:
                conn.execute(
                    """
                    INSERT INTO projects (id, title, topic, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        project.id,
                        project.title,
                        project.topic,
                        project.description,
                        project.created_at.isoformat(),
                        project.updated_at.isoformat(),
                    ),
                )

        logger.debug("Saved project", extra={"project_id": project.id})
        return project.id

    def get(self, project_id: str) -> Optional[Project]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM projects WHERE id = ?", (project_id,)
            ).fetchone()

        if not row:
            return None
        return self._deserialize(dict(row))

    def require(self, project_id: str) -> Project:
        project = self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}", {"project_id": project_id})
        return project

    def delete(self, project_id: str) -> bool:
        """Delete a project. Returns True if deleted."""
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
            return cursor.rowcount > 0

    def exists(self, project_id: str) -> bool:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM projects WHERE id = ?", (project_id,)
            ).fetchone()
        return row is not None

    def list(self, limit: Optional[int] = None, offset: int = 0) -> List[ProjectSummary]:
        """List projects, most recently updated first."""
        query = "SELECT * FROM projects ORDER BY updated_at DESC"
        params: List[int] = []
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])
        elif offset:
            query += " LIMIT -1 OFFSET ?"
            params.append(offset)

        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [ProjectSummary.from_project(self._deserialize(dict(row))) for row in rows]

    @staticmethod
    def _deserialize(row: Dict[str, str]) -> Project:
        return Project(
            id=row["id"],
            title=row["title"],
            topic=row.get("topic") or "",
            description=row.get("description") or "",
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# In-Memory Repository
# -----------------------------------------------------------------------------


class InMemoryProjectRepository:
    """In-memory project repository for testing.

    This provides the same interface as SQLiteProjectRepository
    but stores everything in memory.
    """

    def __init__(self):
        self._projects: Dict[str, Project] = {}

    def save(self, project: Project) -> str:
        _validate(project)
        project.updated_at = _now()
        self._projects[project.id] = project.model_copy()
        return project.id

    def get(self, project_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        return project.model_copy() if project else None

    def require(self, project_id: str) -> Project:
        project = self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}", {"project_id": project_id})
        return project

    def delete(self, project_id: str) -> bool:
        if project_id in self._projects:
            del self._projects[project_id]
            return True
        return False

    def exists(self, project_id: str) -> bool:
        return project_id in self._projects

    def list(self, limit: Optional[int] = None, offset: int = 0) -> List[ProjectSummary]:
        results = [ProjectSummary.from_project(p) for p in self._projects.values()]
        results.sort(key=lambda p: p.updated_at, reverse=True)
        if offset > 0:
            results = results[offset:]
        # Negative limits mean "no limit", matching SQLite.
        if limit is not None and limit >= 0:
            results = results[:limit]
        return results


ProjectRepository = Union[SQLiteProjectRepository, InMemoryProjectRepository]
