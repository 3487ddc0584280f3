# models/rent_payment.py

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


MONTH_MIN, MONTH_MAX = 1, 12
YEAR_MIN, YEAR_MAX = 2000, 2100


class RentPaymentCreate(BaseModel):
    """One payment per (tenant_id, month, year)."""

    tenant_id: UUID
    month: int = Field(..., ge=MONTH_MIN, le=MONTH_MAX)
    year: int = Field(..., ge=YEAR_MIN, le=YEAR_MAX)
    amount: float = Field(..., ge=0)
    paid_on: date


class TenantSummary(BaseModel):
    id: str
    name: str
    room_no: str


class RentPaymentRead(BaseModel):
    id: str
    tenant_id: str
    month: int
    year: int
    amount: float
    paid_on: date
    created_at: Optional[datetime] = None

    # embedded for admin period views
    tenants: Optional[TenantSummary] = None
