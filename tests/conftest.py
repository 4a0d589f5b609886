"""Pytest fixtures for the storefront store and API."""

import pytest
from fastapi.testclient import TestClient

from database import Database
from main import create_app


@pytest.fixture
def db() -> Database:
    return Database()


@pytest.fixture
def client(db: Database):
    app = create_app(db=db, seed_demo=False)
    with TestClient(app) as c:
        yield c
