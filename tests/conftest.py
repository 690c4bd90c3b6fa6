"""Shared fixtures for the catalog tests."""
import pytest
from fastapi.testclient import TestClient

from app.db.memory_repository import InMemoryBookRepository
from app.main import create_app


@pytest.fixture
def repository() -> InMemoryBookRepository:
    return InMemoryBookRepository()


@pytest.fixture
def client(repository: InMemoryBookRepository):
    with TestClient(create_app(repository=repository)) as test_client:
        yield test_client
