# tests/test_identity.py

"""
Tests for resolving an authenticated user to a role and tenant profile.
"""

import pytest

from core.errors import ReauthenticationRequired
from core.identity import resolve_principal
from models.enums import Role


def test_admin_resolves_without_tenant(fake_db, admin_user):
    principal = resolve_principal(fake_db, admin_user.id, admin_user.email)

    assert principal.role == Role.admin
    assert principal.tenant_id is None


def test_tenant_resolves_linked_profile(fake_db, tenant_a):
    user, row = tenant_a

    principal = resolve_principal(fake_db, user.id)

    assert principal.role == Role.tenant
    assert principal.tenant_id == row["id"]


def test_tenant_without_profile_resolves_unlinked(fake_db):
    user = fake_db.add_user("pending@example.com")
    fake_db.tables["user_roles"].append({"id": "r", "user_id": user.id, "role": "tenant"})

    principal = resolve_principal(fake_db, user.id)

    assert principal.role == Role.tenant
    assert principal.tenant_id is None


def test_missing_role_forces_reauthentication(fake_db):
    user = fake_db.add_user("norole@example.com")

    with pytest.raises(ReauthenticationRequired):
        resolve_principal(fake_db, user.id)


def test_multiple_roles_are_rejected(fake_db, admin_user):
    fake_db.tables["user_roles"].append({"id": "extra", "user_id": admin_user.id, "role": "tenant"})

    with pytest.raises(ReauthenticationRequired):
        resolve_principal(fake_db, admin_user.id)


def test_principal_is_immutable(fake_db, admin_user):
    principal = resolve_principal(fake_db, admin_user.id)

    with pytest.raises(Exception):
        principal.role = Role.tenant
