# core/identity.py

from typing import Optional
from supabase import Client

from core.errors import ReauthenticationRequired, handle_supabase_error
from core.logging_config import logger
from models.enums import Role
from models.principal import Principal


# ============================================================
# Identity & Role Resolver
# ============================================================
# Pure read: user_roles → role, tenants.auth_user_id → tenant_id.
# Never defaults a role; an unresolvable principal must sign in again.
# ============================================================

def fetch_roles(client: Client, user_id: str) -> set:
    try:
        result = (
            client.table("user_roles")
            .select("role")
            .eq("user_id", user_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load user role") from e

    return {row["role"] for row in (result.data or [])}


def fetch_linked_tenant_id(client: Client, user_id: str) -> Optional[str]:
    try:
        result = (
            client.table("tenants")
            .select("id")
            .eq("auth_user_id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load tenant profile") from e

    rows = result.data or []
    return str(rows[0]["id"]) if rows else None


def resolve_principal(client: Client, user_id: str, email: Optional[str] = None) -> Principal:
    """
    Resolve an authenticated user id to {role, tenant_id}.

    Raises ReauthenticationRequired when the user has no role record,
    an unknown role, or more than one role.
    """
    roles = fetch_roles(client, user_id)

    if not roles:
        logger.warning(f"Principal {user_id} has no role record")
        raise ReauthenticationRequired()

    if len(roles) > 1:
        logger.error(f"Principal {user_id} has multiple roles {sorted(roles)}; refusing to pick one")
        raise ReauthenticationRequired()

    raw_role = roles.pop()
    try:
        role = Role(raw_role)
    except ValueError:
        logger.warning(f"Principal {user_id} has unknown role {raw_role!r}")
        raise ReauthenticationRequired()

    tenant_id = None
    if role == Role.tenant:
        tenant_id = fetch_linked_tenant_id(client, user_id)
        if tenant_id is None:
            logger.warning(f"Tenant principal {user_id} has no linked tenant profile")

    return Principal(id=user_id, email=email, role=role, tenant_id=tenant_id)
