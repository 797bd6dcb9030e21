"""
Shared fixtures for the Drug Discovery Dashboard tests
"""
import pytest
from fastapi.testclient import TestClient

from drug_discovery.main import app
from drug_discovery.storage import MemStorage, storage


@pytest.fixture
def store():
    """A private, freshly seeded store"""
    return MemStorage(seed=True)


@pytest.fixture
def client():
    """HTTP client against the app with the shared store reseeded"""
    storage.reset()
    with TestClient(app) as test_client:
        yield test_client
