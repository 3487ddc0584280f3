# services/provisioning.py

from typing import Callable, List, Optional, Tuple

from supabase import Client

from core.errors import (
    CredentialConflict,
    InvalidTransition,
    NotFound,
    PartialProvisioningFailure,
    StoreError,
    Unauthorized,
    extract_supabase_error,
    handle_supabase_error,
    is_email_conflict,
)
from core.logging_config import logger
from core.permission_helpers import is_admin, require_write
from core.permissions import Action, Entity
from core.supabase_helpers import policy_insert
from core.validation import validate_payload
from models.enums import Role
from models.principal import Principal
from models.provisioning import OrphanedPrincipal, ProvisioningReport
from models.tenant import TenantProvision


STEP_CREATE_PRINCIPAL = "create_principal"
STEP_CREATE_PROFILE = "create_profile"
STEP_ASSIGN_ROLE = "assign_role"

LIST_USERS_PAGE_SIZE = 1000


# ============================================================
# Compensation log
# ============================================================
class _Saga:
    """Undo actions recorded as each provisioning step succeeds."""

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        self._undo: List[Tuple[str, Callable[[], None]]] = []

    def on_rollback(self, description: str, action: Callable[[], None]):
        self._undo.append((description, action))

    def rollback(self) -> bool:
        completed = True
        for description, action in reversed(self._undo):
            try:
                action()
                logger.info(f"Provisioning rollback: {description} ({self.principal_id})")
            except Exception as e:
                completed = False
                logger.error(
                    f"Provisioning rollback failed: {description} ({self.principal_id}): "
                    f"{extract_supabase_error(e)}"
                )
        return completed

    def fail(self, step: str, error: Exception) -> PartialProvisioningFailure:
        cause = extract_supabase_error(error)
        logger.error(f"Tenant provisioning failed at {step} for {self.principal_id}: {cause}")
        compensated = self.rollback()
        return PartialProvisioningFailure(
            failed_step=step,
            principal_id=self.principal_id,
            compensated=compensated,
            cause=cause,
        )


def _require_admin(principal: Principal, action: str):
    if not is_admin(principal):
        logger.warning(f"Denied {action} for {principal.role.value} {principal.id}")
        raise Unauthorized(f"Only admins can {action}")


# ============================================================
# Provision: principal → profile → role
# ============================================================
def provision_tenant(client: Client, principal: Principal, payload) -> dict:
    """
    Create a tenant login, its profile and its role as one unit.

    Field and credential checks run before any network call. A failure
    after the login exists is rolled back in reverse order and raised
    as PartialProvisioningFailure.
    """
    data = validate_payload(TenantProvision, payload)

    profile = {
        "name": data.name,
        "room_no": data.room_no,
        "contact": data.contact,
        "deposit_amount": data.deposit_amount,
    }
    require_write(principal, Entity.tenants, profile, Action.insert)
    _require_admin(principal, "provision tenants")

    if client is None:
        raise StoreError("Supabase client not configured")

    # ---------------------------------------------------------
    # 1. Principal
    # ---------------------------------------------------------
    try:
        response = client.auth.admin.create_user(
            {
                "email": str(data.email),
                "password": data.password,
                "email_confirm": True,
                "user_metadata": {"full_name": data.name},
            }
        )
    except Exception as e:
        if is_email_conflict(e):
            logger.info(f"Provisioning rejected, email already registered: {data.email}")
            raise CredentialConflict() from e
        raise handle_supabase_error(e, "Failed to create tenant login") from e

    user = getattr(response, "user", None)
    if user is None:
        raise StoreError("Failed to create tenant login")

    principal_id = str(user.id)
    saga = _Saga(principal_id)
    saga.on_rollback(
        "delete principal",
        lambda: client.auth.admin.delete_user(principal_id),
    )

    # ---------------------------------------------------------
    # 2. Profile
    # ---------------------------------------------------------
    try:
        tenant = policy_insert(
            client, principal, Entity.tenants, {**profile, "auth_user_id": principal_id}
        )
    except Exception as e:
        raise saga.fail(STEP_CREATE_PROFILE, e) from e

    tenant_id = str(tenant["id"])
    saga.on_rollback(
        "delete tenant profile",
        lambda: client.table("tenants").delete().eq("id", tenant_id).execute(),
    )

    # ---------------------------------------------------------
    # 3. Role
    # ---------------------------------------------------------
    try:
        client.table("user_roles").insert(
            {"user_id": principal_id, "role": Role.tenant.value}
        ).execute()
    except Exception as e:
        raise saga.fail(STEP_ASSIGN_ROLE, e) from e

    logger.info(f"Provisioned tenant {tenant_id} ({data.name}, room {data.room_no}) by {principal.id}")
    return tenant


# ============================================================
# Reconciliation
# ============================================================
def _list_all_users(client: Client) -> list:
    users = []
    page = 1
    while True:
        batch = client.auth.admin.list_users(page=page, per_page=LIST_USERS_PAGE_SIZE) or []
        users.extend(batch)
        if len(batch) < LIST_USERS_PAGE_SIZE:
            return users
        page += 1


def find_orphaned_principals(client: Client, principal: Principal) -> ProvisioningReport:
    """
    Report logins left inconsistent by an interrupted provisioning:
    no role, a profile without a role, or a tenant role without a profile.
    """
    _require_admin(principal, "reconcile provisioning")
    if client is None:
        raise StoreError("Supabase client not configured")

    try:
        users = _list_all_users(client)
        role_rows = client.table("user_roles").select("user_id, role").execute().data or []
        tenant_rows = (
            client.table("tenants").select("id, auth_user_id").execute().data or []
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load provisioning state") from e

    roles = {}
    for row in role_rows:
        roles.setdefault(str(row["user_id"]), set()).add(row["role"])
    profiles = {
        str(row["auth_user_id"]): str(row["id"])
        for row in tenant_rows
        if row.get("auth_user_id")
    }

    orphans = []
    for user in users:
        user_id = str(user.id)
        user_roles = roles.get(user_id, set())
        tenant_id = profiles.get(user_id)

        reason: Optional[str] = None
        if not user_roles and tenant_id is None:
            reason = "no role and no tenant profile"
        elif not user_roles:
            reason = "tenant profile without role"
        elif user_roles == {Role.tenant.value} and tenant_id is None:
            reason = "tenant role without tenant profile"

        if reason:
            orphans.append(
                OrphanedPrincipal(
                    principal_id=user_id,
                    email=getattr(user, "email", None),
                    has_role=bool(user_roles),
                    has_profile=tenant_id is not None,
                    tenant_id=tenant_id,
                    reason=reason,
                )
            )

    if orphans:
        logger.warning(f"Provisioning reconciliation found {len(orphans)} orphaned principal(s)")

    return ProvisioningReport(orphans=orphans, checked_principals=len(users))


def remove_orphaned_principal(client: Client, principal: Principal, principal_id: str) -> dict:
    """
    Delete a login that has no tenant profile and no admin role.
    Role rows go with it (cascade on auth.users).
    """
    _require_admin(principal, "remove orphaned principals")
    if client is None:
        raise StoreError("Supabase client not configured")

    if principal_id == principal.id:
        raise InvalidTransition("You cannot remove your own account")

    try:
        response = client.auth.admin.get_user_by_id(principal_id)
    except Exception as e:
        raise NotFound(f"Principal {principal_id} not found") from e
    if getattr(response, "user", None) is None:
        raise NotFound(f"Principal {principal_id} not found")

    try:
        profile_rows = (
            client.table("tenants").select("id").eq("auth_user_id", principal_id).limit(1).execute().data
        )
        role_rows = (
            client.table("user_roles").select("role").eq("user_id", principal_id).execute().data
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load provisioning state") from e

    if profile_rows:
        raise InvalidTransition(f"Principal {principal_id} is linked to a tenant profile")
    if any(row["role"] == Role.admin.value for row in (role_rows or [])):
        raise InvalidTransition(f"Principal {principal_id} is an admin")

    try:
        client.auth.admin.delete_user(principal_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete orphaned principal") from e

    logger.info(f"Removed orphaned principal {principal_id} by {principal.id}")
    return {"success": True, "principal_id": principal_id}
