"""Tests for project repository implementations.

Tests cover:
- SQLiteProjectRepository
- InMemoryProjectRepository
- CRUD operations, listing and validation
"""

from datetime import datetime, timedelta, timezone

import pytest

from flowsketch.core.exceptions import ProjectNotFoundError, ProjectValidationError
from flowsketch.storage import repository as repository_module
from flowsketch.storage.repository import (
    InMemoryProjectRepository,
    Project,
    ProjectSummary,
    SQLiteProjectRepository,
)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(params=["sqlite", "memory"])
def repo(request):
    """Parameterized fixture that tests both repository implementations."""
    if request.param == "sqlite":
        return SQLiteProjectRepository(":memory:")
    else:
        return InMemoryProjectRepository()


@pytest.fixture
def ticking_clock(monkeypatch):
    """Make every save one second later than the previous one."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ticks = iter(range(1000))
    monkeypatch.setattr(repository_module, "_now", lambda: start + timedelta(seconds=next(ticks)))


@pytest.fixture
def sample_project(canonical_text):
    return Project(id="proj-1", title="Veri doğrulama", topic="doğrulama", description=canonical_text)


# -----------------------------------------------------------------------------
# CRUD
# -----------------------------------------------------------------------------


class TestCrud:
    def test_save_and_get(self, repo, sample_project):
        assert repo.save(sample_project) == "proj-1"

        loaded = repo.get("proj-1")
        assert loaded.title == "Veri doğrulama"
        assert loaded.description == sample_project.description
        assert loaded.created_at == sample_project.created_at

    def test_get_missing_returns_none(self, repo):
        assert repo.get("missing") is None

    def test_require_missing_raises(self, repo):
        with pytest.raises(ProjectNotFoundError) as exc_info:
            repo.require("missing")
        assert exc_info.value.context == {"project_id": "missing"}

    def test_update_keeps_created_at(self, repo, sample_project, ticking_clock):
        repo.save(sample_project)
        first_update = repo.get("proj-1").updated_at

        sample_project.description = "BAŞLANGIÇ\nBİTİŞ"
        repo.save(sample_project)

        loaded = repo.get("proj-1")
        assert loaded.description == "BAŞLANGIÇ\nBİTİŞ"
        assert loaded.created_at == sample_project.created_at
        assert loaded.updated_at > first_update

    def test_delete(self, repo, sample_project):
        repo.save(sample_project)

        assert repo.delete("proj-1") is True
        assert repo.exists("proj-1") is False
        assert repo.delete("proj-1") is False

    def test_blank_title_is_rejected(self, repo):
        with pytest.raises(ProjectValidationError):
            repo.save(Project(title="   "))

    def test_generated_ids_are_unique(self):
        assert Project(title="a").id != Project(title="b").id


# -----------------------------------------------------------------------------
# Listing
# -----------------------------------------------------------------------------


class TestList:
    def test_most_recent_first(self, repo, ticking_clock):
        for idx in range(3):
            repo.save(Project(id=f"p{idx}", title=f"Project {idx}"))

        assert [p.id for p in repo.list()] == ["p2", "p1", "p0"]

    def test_limit_and_offset(self, repo, ticking_clock):
        for idx in range(4):
            repo.save(Project(id=f"p{idx}", title=f"Project {idx}"))

        assert [p.id for p in repo.list(limit=2)] == ["p3", "p2"]
        assert [p.id for p in repo.list(limit=2, offset=1)] == ["p2", "p1"]
        assert [p.id for p in repo.list(offset=3)] == ["p0"]

    def test_negative_limit_means_no_limit(self, repo, ticking_clock):
        for idx in range(3):
            repo.save(Project(id=f"p{idx}", title=f"Project {idx}"))

        assert [p.id for p in repo.list(limit=-1)] == ["p2", "p1", "p0"]
        assert [p.id for p in repo.list(limit=-1, offset=1)] == ["p1", "p0"]

    def test_summaries_count_non_blank_lines(self, repo, sample_project):
        repo.save(sample_project)

        (summary,) = repo.list()
        assert isinstance(summary, ProjectSummary)
        assert summary.line_count == 6
        assert summary.topic == "doğrulama"


# -----------------------------------------------------------------------------
# SQLite specifics
# -----------------------------------------------------------------------------


def test_sqlite_file_persists_across_instances(tmp_path, sample_project):
    db_path = tmp_path / "projects.sqlite"
    SQLiteProjectRepository(db_path).save(sample_project)

    reopened = SQLiteProjectRepository(db_path)
    assert reopened.exists("proj-1")
    assert reopened.require("proj-1").title == "Veri doğrulama"


def test_in_memory_repository_returns_copies(sample_project):
    repo = InMemoryProjectRepository()
    repo.save(sample_project)

    loaded = repo.get("proj-1")
    loaded.title = "Changed"

    assert repo.get("proj-1").title == "Veri doğrulama"
