# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import os

os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from dependencies.auth import get_client
from models.enums import Role
from models.principal import Principal
from tests.fakes import FakeSupabase, seed_admin, seed_tenant


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Empty in-memory Supabase."""
    return FakeSupabase()


@pytest.fixture(scope="function")
def app(fake_db):
    """Create a test FastAPI application wired to the fake store."""
    application = create_app()
    application.dependency_overrides[get_client] = lambda: fake_db
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_user(fake_db):
    return seed_admin(fake_db)


@pytest.fixture
def admin(admin_user) -> Principal:
    return Principal(id=admin_user.id, email=admin_user.email, role=Role.admin)


@pytest.fixture
def tenant_a(fake_db):
    """(user, tenant row) for tenant A in room 101."""
    return seed_tenant(fake_db, "Asha", "101")


@pytest.fixture
def tenant_b(fake_db):
    """(user, tenant row) for tenant B in room 102."""
    return seed_tenant(fake_db, "Bilal", "102")


@pytest.fixture
def principal_a(tenant_a) -> Principal:
    user, row = tenant_a
    return Principal(id=user.id, email=user.email, role=Role.tenant, tenant_id=row["id"])


@pytest.fixture
def principal_b(tenant_b) -> Principal:
    user, row = tenant_b
    return Principal(id=user.id, email=user.email, role=Role.tenant, tenant_id=row["id"])


