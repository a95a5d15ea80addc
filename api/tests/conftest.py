"""Test configuration for API tests."""

import random
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[2]))

from config import Settings  # noqa: E402
from api.app.main import create_app  # noqa: E402
from api.app.repos_memory import InMemoryOrdersRepo  # noqa: E402


@pytest.fixture
def repo():
    """Return an empty store with a seeded random source."""
    return InMemoryOrdersRepo(rng=random.Random(1234))


@pytest.fixture
def settings():
    return Settings(app_env="dev", log_sample_2xx=1.0)


@pytest.fixture
def app(repo, settings):
    return create_app(repo=repo, settings=settings)


@pytest.fixture
def client(app):
    return TestClient(app)
