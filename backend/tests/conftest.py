"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL,
et get_current_user pour agir sous un rôle donné sans émettre de token.
"""

import os
import uuid

os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.database import get_db
from app.dependencies import get_current_user
from app.main import app
from app.schemas.user import CurrentUser


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _act_as(role: str) -> CurrentUser:
    user = CurrentUser(id=uuid.uuid4(), name=f"Test {role.lower()}", email=f"{role.lower()}@test.be", role=role)
    app.dependency_overrides[get_current_user] = lambda: user
    return user


@pytest.fixture
def as_admin():
    yield _act_as("ADMIN")
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def as_teacher():
    yield _act_as("TEACHER")
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def as_parent():
    yield _act_as("PARENT")
    app.dependency_overrides.pop(get_current_user, None)
