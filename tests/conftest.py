"""
Test configuration and fixtures.
"""
import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Point storage at a scratch dir and disable the real LLM before importing app
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="restobot-tests-")
os.environ["PERSISTENCE_BACKEND"] = "json"
os.environ["OPENAI_API_KEY"] = ""

from restobot.main import app
from restobot.api.dependencies import get_importer, get_llm, get_store
from restobot.services.persistence import MemoryPersistence
from restobot.services.store import RestaurantStore

from fakes import FakeImporter, FakeLLM


@pytest.fixture
def backend() -> MemoryPersistence:
    return MemoryPersistence()


@pytest.fixture
def store(backend: MemoryPersistence) -> RestaurantStore:
    return RestaurantStore(backend=backend)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_importer() -> FakeImporter:
    return FakeImporter()


@pytest.fixture(scope="function")
def client(
    store: RestaurantStore, fake_llm: FakeLLM, fake_importer: FakeImporter
) -> Generator[TestClient, None, None]:
    """Create test client with store, LLM and importer overrides."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_llm] = lambda: fake_llm
    app.dependency_overrides[get_importer] = lambda: fake_importer

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
