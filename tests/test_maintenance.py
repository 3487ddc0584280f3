# tests/test_maintenance.py

"""
Tests for the maintenance request lifecycle (open → resolved).
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.errors import InvalidTransition, NotFound, Unauthorized, ValidationError
from models.enums import Role
from models.principal import Principal
from services import maintenance
from services.dashboard import count_by_status


@pytest.mark.parametrize("length,accepted", [
    (9, False),
    (10, True),
    (1000, True),
    (1001, False),
])
def test_description_length_bounds(fake_db, principal_a, length, accepted):
    payload = {"issue_description": "x" * length}
    fake_db.calls.clear()

    if accepted:
        created = maintenance.submit_request(fake_db, principal_a, payload)
        assert created["status"] == "open"
        assert created["resolved_at"] is None
    else:
        with pytest.raises(ValidationError):
            maintenance.submit_request(fake_db, principal_a, payload)
        assert fake_db.calls == []


def test_request_copies_room_and_owner(fake_db, principal_a, tenant_a):
    _, row = tenant_a

    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Leaking tap in bathroom"})

    assert created["tenant_id"] == row["id"]
    assert created["room_no"] == "101"


def test_admin_cannot_submit_requests(fake_db, admin):
    with pytest.raises(Unauthorized):
        maintenance.submit_request(fake_db, admin, {"issue_description": "Broken window latch"})


def test_unlinked_tenant_cannot_submit(fake_db):
    principal = Principal(id="uid-x", role=Role.tenant, tenant_id=None)

    with pytest.raises(NotFound):
        maintenance.submit_request(fake_db, principal, {"issue_description": "Broken window latch"})


def test_resolve_sets_resolved_at_once(fake_db, admin, principal_a):
    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Fan not working"})

    resolved = maintenance.resolve_request(fake_db, admin, created["id"])
    assert resolved["status"] == "resolved"
    assert resolved["resolved_at"] is not None
    assert maintenance.parse_timestamp(resolved["resolved_at"]) >= maintenance.parse_timestamp(created["created_at"])

    with pytest.raises(InvalidTransition):
        maintenance.resolve_request(fake_db, admin, created["id"])

    stored = fake_db.tables["maintenance_requests"][0]
    assert stored["status"] == "resolved"
    assert stored["resolved_at"] == resolved["resolved_at"]


def test_resolved_at_never_precedes_created_at(fake_db, admin, principal_a):
    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Fan not working"})
    skewed_clock = datetime.now(timezone.utc) - timedelta(days=1)

    resolved = maintenance.resolve_request(fake_db, admin, created["id"], now=skewed_clock)

    assert maintenance.parse_timestamp(resolved["resolved_at"]) == maintenance.parse_timestamp(created["created_at"])


def test_tenant_cannot_resolve(fake_db, principal_a):
    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Fan not working"})

    with pytest.raises(Unauthorized):
        maintenance.resolve_request(fake_db, principal_a, created["id"])


@pytest.mark.parametrize("request_id", ["no-such-request", str(uuid.uuid4())])
def test_resolve_missing_request(fake_db, admin, request_id):
    with pytest.raises(NotFound):
        maintenance.resolve_request(fake_db, admin, request_id)


def test_resolve_loses_race_to_concurrent_resolve(fake_db, admin, principal_a, monkeypatch):
    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Fan not working"})
    real_get = maintenance.policy_get

    def get_then_resolve_elsewhere(client, principal, entity, row_id):
        row = real_get(client, principal, entity, row_id)
        stored = fake_db.tables["maintenance_requests"][0]
        stored.update({"status": "resolved", "resolved_at": "2024-03-01T10:00:00+00:00"})
        return row

    monkeypatch.setattr(maintenance, "policy_get", get_then_resolve_elsewhere)

    with pytest.raises(InvalidTransition):
        maintenance.resolve_request(fake_db, admin, created["id"])

    assert fake_db.tables["maintenance_requests"][0]["resolved_at"] == "2024-03-01T10:00:00+00:00"


@pytest.mark.parametrize("value", [
    "2024-03-01T10:00:00.12345+00:00",
    "2024-03-01T10:00:00.1+00:00",
    "2024-03-01T10:00:00Z",
])
def test_parse_timestamp_accepts_trimmed_fractions(value):
    parsed = maintenance.parse_timestamp(value)

    assert parsed.tzinfo is not None
    assert parsed.replace(microsecond=0) == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_resolve_request_with_trimmed_created_at(fake_db, admin, principal_a):
    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Fan not working"})
    fake_db.tables["maintenance_requests"][0]["created_at"] = "2024-03-01T10:00:00.12345+00:00"

    resolved = maintenance.resolve_request(fake_db, admin, created["id"])

    assert resolved["status"] == "resolved"


def test_tenant_sees_only_own_requests(fake_db, principal_a, principal_b, admin):
    maintenance.submit_request(fake_db, principal_a, {"issue_description": "Door lock is stuck"})
    maintenance.submit_request(fake_db, principal_b, {"issue_description": "No hot water since Monday"})

    own = maintenance.list_requests(fake_db, principal_a)

    assert [r["tenant_id"] for r in own] == [principal_a.tenant_id]
    assert len(maintenance.list_requests(fake_db, admin)) == 2


def test_scenario_open_then_resolved_counts(fake_db, admin, principal_a):
    before = count_by_status(maintenance.list_requests(fake_db, admin))

    created = maintenance.submit_request(fake_db, principal_a, {"issue_description": "0123456789"})
    opened = count_by_status(maintenance.list_requests(fake_db, admin))
    assert opened["open"] == before["open"] + 1

    resolved = maintenance.resolve_request(fake_db, admin, created["id"])
    after = count_by_status(maintenance.list_requests(fake_db, admin))

    assert after["open"] == opened["open"] - 1
    assert after["resolved"] == opened["resolved"] + 1
    assert resolved["resolved_at"] is not None


def test_status_filter(fake_db, admin, principal_a):
    first = maintenance.submit_request(fake_db, principal_a, {"issue_description": "Door lock is stuck"})
    maintenance.submit_request(fake_db, principal_a, {"issue_description": "Window does not close"})
    maintenance.resolve_request(fake_db, admin, first["id"])

    assert [r["id"] for r in maintenance.list_requests(fake_db, admin, "resolved")] == [first["id"]]
    assert len(maintenance.list_requests(fake_db, admin, "open")) == 1
