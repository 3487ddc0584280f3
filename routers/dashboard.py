# routers/dashboard.py

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from supabase import Client

from dependencies.auth import get_client, get_current_principal
from models.dashboard import AdminDashboard, TenantDashboard
from models.principal import Principal
from models.rent_payment import MONTH_MAX, MONTH_MIN, YEAR_MAX, YEAR_MIN
from services import dashboard


router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("", response_model=Union[AdminDashboard, TenantDashboard])
def read_dashboard(
    month: Optional[int] = Query(None, ge=MONTH_MIN, le=MONTH_MAX),
    year: Optional[int] = Query(None, ge=YEAR_MIN, le=YEAR_MAX),
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    """
    Admins get the period overview (defaults to the current month);
    tenants get their own open requests.
    """
    if not principal.is_admin:
        return dashboard.tenant_dashboard(client, principal)

    current_month, current_year = dashboard.current_period()
    return dashboard.admin_dashboard(
        client,
        principal,
        month or current_month,
        year or current_year,
    )
