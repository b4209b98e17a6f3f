"""Shared test fixtures.

Settings are built explicitly so a developer's `.env` or exported API key
never leaks into a test run.
"""

from typing import Generator

import pytest

from flowsketch.api.app import create_app
from flowsketch.config.settings import Settings
from flowsketch.generation.describe import StaticFlowDescriber
from flowsketch.storage.repository import InMemoryProjectRepository

CANONICAL_TR = """BAŞLANGIÇ
1. İŞLEM: Veri topla
2. KARAR: Geçerli mi?
  * EVET ise devam et
  * HAYIR ise tekrar dene
BİTİŞ
"""


@pytest.fixture
def canonical_text() -> str:
    return CANONICAL_TR


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings isolated from the environment and any `.env` file."""
    for var in ("ANTHROPIC_API_KEY", "FLOWSKETCH_ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None, db_path=":memory:", language="tr")


@pytest.fixture
def memory_repo() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def static_describer(canonical_text: str) -> StaticFlowDescriber:
    return StaticFlowDescriber(canonical_text)


@pytest.fixture
def client(settings, memory_repo, static_describer) -> Generator:
    """Flask test client wired to in-memory collaborators."""
    app = create_app(settings=settings, repository=memory_repo, describer=static_describer)
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
