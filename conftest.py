import pytest
from fastapi.testclient import TestClient

from api import create_app
from bookshelf.id_generator import SequentialIdGenerator
from bookshelf.library import Library

@pytest.fixture
def lib():
    # Deterministic ids so tests can assert exact values
    return Library(id_generator=SequentialIdGenerator())

@pytest.fixture
def client(lib):
    # Each test gets its own application around its own library
    with TestClient(create_app(lib)) as test_client:
        yield test_client
