# models/dashboard.py

from typing import List
from pydantic import BaseModel

from models.maintenance_request import MaintenanceRequestRead
from models.tenant import TenantRead


class PeriodSummary(BaseModel):
    """Counts derived for one (month, year) period."""

    month: int
    year: int
    total_tenants: int
    paid_tenant_ids: List[str]
    due_tenants: List[TenantRead]
    collected_amount: float
    open_request_count: int
    resolved_request_count: int


class AdminDashboard(PeriodSummary):
    recent_open_requests: List[MaintenanceRequestRead]


class TenantDashboard(BaseModel):
    open_requests: List[MaintenanceRequestRead]
    open_request_count: int
    resolved_request_count: int
