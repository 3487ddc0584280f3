# services/maintenance.py

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import TypeAdapter
from supabase import Client

from core.errors import InvalidTransition, NotFound, Unauthorized
from core.logging_config import logger
from core.permission_helpers import is_admin, require_write
from core.permissions import Action, Entity
from core.supabase_helpers import policy_get, policy_insert, policy_select, policy_update
from core.validation import validate_payload
from models.enums import RequestStatus
from models.maintenance_request import MaintenanceRequestCreate
from models.principal import Principal


# -------------------------------------------------------------
# Timestamp helpers
# -------------------------------------------------------------
_timestamp = TypeAdapter(datetime)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    # Postgres trims trailing zeros from the fraction
    parsed = _timestamp.validate_python(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# -------------------------------------------------------------
# Create (tenant, own profile only)
# -------------------------------------------------------------
def submit_request(client: Client, principal: Principal, payload) -> dict:
    """
    Open a maintenance request for the caller's own room.

    The description length is checked before anything is sent.
    """
    data = validate_payload(MaintenanceRequestCreate, payload)

    if not principal.is_tenant:
        raise Unauthorized("Only tenants can submit maintenance requests")
    if principal.tenant_id is None:
        raise NotFound("Tenant information not found")

    tenant = policy_get(client, principal, Entity.tenants, principal.tenant_id)

    row = {
        "tenant_id": principal.tenant_id,
        "room_no": tenant["room_no"],
        "issue_description": data.issue_description,
        "status": RequestStatus.open.value,
    }
    request = policy_insert(client, principal, Entity.maintenance_requests, row)

    logger.info(f"Tenant {principal.tenant_id} opened maintenance request {request.get('id')}")
    return request


# -------------------------------------------------------------
# Transition open → resolved (admin)
# -------------------------------------------------------------
def resolve_request(client: Client, principal: Principal, request_id: str, now: Optional[datetime] = None) -> dict:
    """
    Mark an open request resolved. Resolved is terminal: a second call
    raises InvalidTransition and leaves resolved_at untouched.
    """
    if not is_admin(principal):
        raise Unauthorized("Only admins can resolve maintenance requests")

    existing = policy_get(client, principal, Entity.maintenance_requests, request_id)
    require_write(principal, Entity.maintenance_requests, existing, Action.update)

    if existing.get("status") == RequestStatus.resolved.value:
        raise InvalidTransition(f"Maintenance request {request_id} is already resolved")

    resolved_at = now or utcnow()
    if resolved_at.tzinfo is None:
        resolved_at = resolved_at.replace(tzinfo=timezone.utc)
    created_at = parse_timestamp(existing.get("created_at"))
    if created_at is not None and resolved_at < created_at:
        resolved_at = created_at

    updated = policy_update(
        client,
        principal,
        Entity.maintenance_requests,
        request_id,
        {"status": RequestStatus.resolved.value, "resolved_at": resolved_at.isoformat()},
        match={"status": RequestStatus.open.value},
    )
    if updated is None:
        # resolved concurrently between read and write
        raise InvalidTransition(f"Maintenance request {request_id} is already resolved")

    logger.info(f"Maintenance request {request_id} resolved by {principal.id}")
    return updated


# -------------------------------------------------------------
# Read
# -------------------------------------------------------------
def list_requests(
    client: Client,
    principal: Principal,
    status: Optional[RequestStatus] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    """Visible requests, newest first, optionally filtered by status."""
    filters = {"status": RequestStatus(status).value} if status else None
    return policy_select(
        client,
        principal,
        Entity.maintenance_requests,
        filters,
        order=[("created_at", True)],
        limit=limit,
    )
