# routers/rent.py

from typing import List

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from dependencies.auth import get_client, get_current_principal, require_admin
from models.principal import Principal
from models.rent_payment import (
    MONTH_MAX,
    MONTH_MIN,
    YEAR_MAX,
    YEAR_MIN,
    RentPaymentCreate,
    RentPaymentRead,
)
from models.tenant import TenantRead
from services import rent_ledger


router = APIRouter(
    prefix="/rent",
    tags=["Rent"],
)


@router.get("/payments", response_model=List[RentPaymentRead])
def list_period_payments(
    month: int = Query(..., ge=MONTH_MIN, le=MONTH_MAX),
    year: int = Query(..., ge=YEAR_MIN, le=YEAR_MAX),
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    """Payments recorded for one month, most recent first."""
    return rent_ledger.list_period_payments(client, principal, month, year)


@router.post("/payments", response_model=RentPaymentRead, status_code=status.HTTP_201_CREATED)
def record_payment(
    payload: RentPaymentCreate,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    """
    Record a rent payment.

    Returns 409 `duplicate_payment` when the tenant already has a payment
    for that month and year.
    """
    return rent_ledger.record_payment(client, principal, payload)


@router.get("/history", response_model=List[RentPaymentRead])
def payment_history(
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    """Tenants get their own history; admins get the whole ledger."""
    return rent_ledger.list_payment_history(client, principal)


@router.get("/unpaid", response_model=List[TenantRead])
def unpaid_tenants(
    month: int = Query(..., ge=MONTH_MIN, le=MONTH_MAX),
    year: int = Query(..., ge=YEAR_MIN, le=YEAR_MAX),
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return rent_ledger.list_unpaid_tenants(client, principal, month, year)
