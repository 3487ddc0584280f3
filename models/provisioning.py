# models/provisioning.py

from typing import List, Optional
from pydantic import BaseModel


class OrphanedPrincipal(BaseModel):
    principal_id: str
    email: Optional[str] = None
    has_role: bool
    has_profile: bool
    tenant_id: Optional[str] = None
    reason: str


class ProvisioningReport(BaseModel):
    """Result of reconciling auth users against roles and tenant profiles."""

    orphans: List[OrphanedPrincipal]
    checked_principals: int
