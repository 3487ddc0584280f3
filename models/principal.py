# models/principal.py

from typing import Optional
from pydantic import BaseModel, ConfigDict

from models.enums import Role


class Principal(BaseModel):
    """
    The resolved caller. Built once per request by the identity resolver
    and passed explicitly into every service call.
    """

    model_config = ConfigDict(frozen=True)

    id: str                           # Supabase Auth UID
    email: Optional[str] = None
    role: Role
    tenant_id: Optional[str] = None   # only set for tenants with a linked profile

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin

    @property
    def is_tenant(self) -> bool:
        return self.role == Role.tenant
