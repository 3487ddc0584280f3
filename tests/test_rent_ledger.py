# tests/test_rent_ledger.py

"""
Tests for recording and reading rent payments.
"""

import uuid

import pytest

from core.errors import DuplicatePayment, NotFound, Unauthorized, ValidationError
from services import rent_ledger
from services.dashboard import summarize_period


def _payment(tenant_id, month=3, year=2024, amount=5000, paid_on="2024-03-05"):
    return {
        "tenant_id": tenant_id,
        "month": month,
        "year": year,
        "amount": amount,
        "paid_on": paid_on,
    }


def test_record_payment_once_then_duplicate(fake_db, admin, tenant_a):
    _, row = tenant_a

    first = rent_ledger.record_payment(fake_db, admin, _payment(row["id"]))
    assert first["tenant_id"] == row["id"]
    assert first["paid_on"] == "2024-03-05"

    with pytest.raises(DuplicatePayment):
        rent_ledger.record_payment(fake_db, admin, _payment(row["id"], amount=6000))

    stored = fake_db.tables["rent_payments"]
    assert len(stored) == 1
    assert stored[0]["amount"] == 5000


def test_same_tenant_different_month_is_allowed(fake_db, admin, tenant_a):
    _, row = tenant_a

    rent_ledger.record_payment(fake_db, admin, _payment(row["id"], month=3))
    rent_ledger.record_payment(fake_db, admin, _payment(row["id"], month=4))

    assert len(fake_db.tables["rent_payments"]) == 2


@pytest.mark.parametrize("field,value", [
    ("month", 0),
    ("month", 13),
    ("year", 1999),
    ("year", 2101),
    ("amount", -1),
])
def test_out_of_range_fields_fail_before_any_call(fake_db, admin, tenant_a, field, value):
    _, row = tenant_a
    payload = _payment(row["id"])
    payload[field] = value
    fake_db.calls.clear()

    with pytest.raises(ValidationError) as excinfo:
        rent_ledger.record_payment(fake_db, admin, payload)

    assert excinfo.value.field == field
    assert fake_db.calls == []


def test_boundary_values_are_accepted(fake_db, admin, tenant_a):
    _, row = tenant_a

    rent_ledger.record_payment(fake_db, admin, _payment(row["id"], month=1, year=2000, amount=0))
    rent_ledger.record_payment(fake_db, admin, _payment(row["id"], month=12, year=2100))

    assert len(fake_db.tables["rent_payments"]) == 2


def test_unknown_tenant_is_not_found(fake_db, admin):
    with pytest.raises(NotFound):
        rent_ledger.record_payment(fake_db, admin, _payment(str(uuid.uuid4())))


def test_malformed_tenant_id_fails_before_any_call(fake_db, admin):
    fake_db.calls.clear()

    with pytest.raises(ValidationError) as excinfo:
        rent_ledger.record_payment(fake_db, admin, _payment("missing-tenant"))

    assert excinfo.value.field == "tenant_id"
    assert fake_db.calls == []


def test_tenant_cannot_record_payment(fake_db, principal_a):
    with pytest.raises(Unauthorized):
        rent_ledger.record_payment(fake_db, principal_a, _payment(principal_a.tenant_id))

    assert fake_db.tables["rent_payments"] == []


def test_tenant_sees_only_own_payments(fake_db, admin, tenant_a, tenant_b, principal_a):
    _, row_a = tenant_a
    _, row_b = tenant_b
    rent_ledger.record_payment(fake_db, admin, _payment(row_a["id"]))
    rent_ledger.record_payment(fake_db, admin, _payment(row_b["id"]))

    history = rent_ledger.list_payment_history(fake_db, principal_a)
    assert [p["tenant_id"] for p in history] == [row_a["id"]]

    # asking for another tenant's rows yields nothing, not an error
    assert rent_ledger.list_payment_history(fake_db, principal_a, tenant_id=row_b["id"]) == []
    assert len(rent_ledger.list_period_payments(fake_db, principal_a, 3, 2024)) == 1


def test_history_is_latest_period_first(fake_db, admin, tenant_a, principal_a):
    _, row = tenant_a
    for month, year in [(11, 2023), (2, 2024), (12, 2023)]:
        rent_ledger.record_payment(fake_db, admin, _payment(row["id"], month=month, year=year))

    history = rent_ledger.list_payment_history(fake_db, principal_a)

    assert [(p["year"], p["month"]) for p in history] == [(2024, 2), (2023, 12), (2023, 11)]


def test_period_payments_embed_tenant(fake_db, admin, tenant_a):
    _, row = tenant_a
    rent_ledger.record_payment(fake_db, admin, _payment(row["id"]))

    payments = rent_ledger.list_period_payments(fake_db, admin, 3, 2024)

    assert payments[0]["tenants"] == {"id": row["id"], "name": "Asha", "room_no": "101"}


def test_scenario_paid_and_due_for_period(fake_db, admin, tenant_a, tenant_b):
    _, row_a = tenant_a
    _, row_b = tenant_b

    rent_ledger.record_payment(fake_db, admin, _payment(row_a["id"], month=3, year=2024, amount=5000))

    payments = rent_ledger.list_period_payments(fake_db, admin, 3, 2024)
    summary = summarize_period(fake_db.tables["tenants"], payments, [], 3, 2024)

    assert summary.paid_tenant_ids == [row_a["id"]]
    assert [t.id for t in summary.due_tenants] == [row_b["id"]]
    assert [t["id"] for t in rent_ledger.list_unpaid_tenants(fake_db, admin, 3, 2024)] == [row_b["id"]]
