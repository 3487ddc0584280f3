# models/tenant.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from core.config import settings


# -------------------------------------------------
# Shared fields
# -------------------------------------------------
class TenantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    room_no: str = Field(..., min_length=1, max_length=10)
    contact: str = Field(..., min_length=10, max_length=15)
    deposit_amount: float = Field(0, ge=0)


# -------------------------------------------------
# Provision (admin creates login + profile + role)
# -------------------------------------------------
class TenantProvision(TenantBase):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        minimum = settings.TENANT_PASSWORD_MIN_LENGTH
        if len(v) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters")
        return v


# -------------------------------------------------
# Read (Supabase → API response)
# -------------------------------------------------
class TenantRead(BaseModel):
    id: str
    name: str
    room_no: str
    contact: str
    deposit_amount: float
    auth_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# -------------------------------------------------
# Update (PATCH)
# -------------------------------------------------
class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    room_no: Optional[str] = Field(None, min_length=1, max_length=10)
    contact: Optional[str] = Field(None, min_length=10, max_length=15)
    deposit_amount: Optional[float] = Field(None, ge=0)
