# services/rent_ledger.py

from typing import List, Optional

from supabase import Client

from core.errors import DuplicatePayment
from core.logging_config import logger
from core.permission_helpers import require_write
from core.permissions import Action, Entity
from core.supabase_helpers import policy_get, policy_insert, policy_select
from core.validation import validate_payload
from models.principal import Principal
from models.rent_payment import RentPaymentCreate
from services.dashboard import due_tenants, paid_tenant_ids


PERIOD_COLUMNS = "*, tenants(id, name, room_no)"


def record_payment(client: Client, principal: Principal, payload) -> dict:
    """
    Append one payment to the ledger.

    (tenant_id, month, year) is unique in the store; a second insert for
    the same period raises DuplicatePayment and never overwrites.
    """
    data = validate_payload(RentPaymentCreate, payload)
    tenant_id = str(data.tenant_id)
    row = {
        "tenant_id": tenant_id,
        "month": data.month,
        "year": data.year,
        "amount": data.amount,
        "paid_on": data.paid_on.isoformat(),
    }
    require_write(principal, Entity.rent_payments, row, Action.insert)

    # NotFound when the tenant doesn't exist
    policy_get(client, principal, Entity.tenants, tenant_id)

    payment = policy_insert(
        client,
        principal,
        Entity.rent_payments,
        row,
        conflict_error=DuplicatePayment(),
    )
    logger.info(
        f"Recorded rent payment for tenant {tenant_id} "
        f"{data.month:02d}/{data.year} amount={data.amount} by {principal.id}"
    )
    return payment


def list_period_payments(client: Client, principal: Principal, month: int, year: int) -> List[dict]:
    """Payments for one period, newest paid_on first, tenant embedded."""
    return policy_select(
        client,
        principal,
        Entity.rent_payments,
        {"month": month, "year": year},
        columns=PERIOD_COLUMNS,
        order=[("paid_on", True)],
    )


def list_payment_history(client: Client, principal: Principal, tenant_id: Optional[str] = None) -> List[dict]:
    """All visible payments, latest period first."""
    filters = {"tenant_id": tenant_id} if tenant_id else None
    return policy_select(
        client,
        principal,
        Entity.rent_payments,
        filters,
        order=[("year", True), ("month", True)],
    )


def list_unpaid_tenants(client: Client, principal: Principal, month: int, year: int) -> List[dict]:
    """Tenants (by room) with no payment recorded for the period."""
    tenants = policy_select(client, principal, Entity.tenants, order=[("room_no", False)])
    payments = policy_select(
        client,
        principal,
        Entity.rent_payments,
        {"month": month, "year": year},
        columns="tenant_id, month, year",
    )
    return due_tenants(tenants, paid_tenant_ids(payments, month, year))
