# services/tenant_directory.py

from typing import List

from supabase import Client

from core.errors import NotFound, ValidationError
from core.logging_config import logger
from core.permissions import Entity
from core.supabase_helpers import policy_delete, policy_get, policy_select, policy_update
from core.validation import validate_payload
from models.principal import Principal
from models.tenant import TenantUpdate


def list_tenants(client: Client, principal: Principal) -> List[dict]:
    """Admins see every tenant, tenants see their own profile. Ordered by room."""
    return policy_select(client, principal, Entity.tenants, order=[("room_no", False)])


def get_tenant(client: Client, principal: Principal, tenant_id: str) -> dict:
    return policy_get(client, principal, Entity.tenants, tenant_id)


def get_own_tenant(client: Client, principal: Principal) -> dict:
    if principal.tenant_id is None:
        raise NotFound("Tenant information not found")
    return policy_get(client, principal, Entity.tenants, principal.tenant_id)


def update_tenant(client: Client, principal: Principal, tenant_id: str, payload) -> dict:
    data = validate_payload(TenantUpdate, payload)
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("No fields to update")

    updated = policy_update(client, principal, Entity.tenants, tenant_id, changes)
    if updated is None:
        raise NotFound(f"tenants record {tenant_id} not found")

    logger.info(f"Tenant {tenant_id} updated by {principal.id}: {sorted(changes)}")
    return updated


def delete_tenant(client: Client, principal: Principal, tenant_id: str) -> dict:
    """
    Remove a tenant profile. Its payments and maintenance requests are
    deleted by the store's cascade; the linked login is left in place.
    """
    removed = policy_delete(client, principal, Entity.tenants, tenant_id)
    logger.info(f"Tenant {tenant_id} ({removed.get('name')}) deleted by {principal.id}")
    return removed
