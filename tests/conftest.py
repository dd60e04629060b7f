# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from propath.adapters.memory_repo import InMemoryPortfolioRepository
from propath.api.http import app, get_repo  # ensures imports resolve; run tests from repo root


@pytest.fixture
def repo():
    return InMemoryPortfolioRepository()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()
