# services/dashboard.py

from datetime import date
from typing import Iterable, List, Optional

from supabase import Client

from core.config import settings
from core.permissions import Entity
from core.supabase_helpers import policy_select
from models.dashboard import AdminDashboard, PeriodSummary, TenantDashboard
from models.enums import RequestStatus
from models.principal import Principal
from services.maintenance import list_requests


# ============================================================
# Pure aggregation over already-fetched rows
# ============================================================

def paid_tenant_ids(payments: Iterable[dict], month: int, year: int) -> set:
    return {
        str(p["tenant_id"])
        for p in payments
        if int(p["month"]) == month and int(p["year"]) == year
    }


def due_tenants(tenants: Iterable[dict], paid_ids: set) -> List[dict]:
    return [t for t in tenants if str(t["id"]) not in paid_ids]


def count_by_status(requests: Iterable[dict]) -> dict:
    counts = {status.value: 0 for status in RequestStatus}
    for r in requests:
        status = r.get("status")
        if status in counts:
            counts[status] += 1
    return counts


def summarize_period(
    tenants: Iterable[dict],
    payments: Iterable[dict],
    requests: Iterable[dict],
    month: int,
    year: int,
) -> PeriodSummary:
    """
    Derive due/paid/open/resolved for (month, year).

    Input order doesn't matter and empty collections give zero counts.
    Payments outside the period are ignored.
    """
    tenants = list(tenants or [])
    payments = list(payments or [])

    paid_ids = paid_tenant_ids(payments, month, year)
    counts = count_by_status(requests or [])
    collected = sum(
        float(p.get("amount") or 0)
        for p in payments
        if int(p["month"]) == month and int(p["year"]) == year
    )

    return PeriodSummary(
        month=month,
        year=year,
        total_tenants=len(tenants),
        paid_tenant_ids=sorted(paid_ids),
        due_tenants=due_tenants(tenants, paid_ids),
        collected_amount=collected,
        open_request_count=counts[RequestStatus.open.value],
        resolved_request_count=counts[RequestStatus.resolved.value],
    )


# ============================================================
# Fetch + aggregate per view
# ============================================================

def current_period(today: Optional[date] = None):
    today = today or date.today()
    return today.month, today.year


def admin_dashboard(client: Client, principal: Principal, month: int, year: int) -> AdminDashboard:
    tenants = policy_select(client, principal, Entity.tenants, order=[("room_no", False)])
    payments = policy_select(
        client,
        principal,
        Entity.rent_payments,
        {"month": month, "year": year},
        columns="tenant_id, month, year, amount",
    )
    requests = policy_select(
        client,
        principal,
        Entity.maintenance_requests,
        columns="id, tenant_id, status",
    )

    summary = summarize_period(tenants, payments, requests, month, year)
    recent = list_requests(
        client,
        principal,
        RequestStatus.open,
        limit=settings.DASHBOARD_RECENT_REQUESTS,
    )
    return AdminDashboard(**summary.model_dump(), recent_open_requests=recent)


def tenant_dashboard(client: Client, principal: Principal) -> TenantDashboard:
    requests = list_requests(client, principal)
    counts = count_by_status(requests)
    return TenantDashboard(
        open_requests=[r for r in requests if r.get("status") == RequestStatus.open.value],
        open_request_count=counts[RequestStatus.open.value],
        resolved_request_count=counts[RequestStatus.resolved.value],
    )
