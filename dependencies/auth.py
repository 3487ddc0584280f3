from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from core.errors import ReauthenticationRequired, StoreError, Unauthorized
from core.identity import resolve_principal
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.enums import Role
from models.principal import Principal


bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# Supabase client dependency
# ============================================================
def get_client() -> Client:
    client = get_supabase_client()
    if client is None:
        raise StoreError("Supabase client not configured")
    return client


# ============================================================
# AUTH DECODING (Supabase: validates JWT, then resolves role)
# ============================================================
def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    client: Client = Depends(get_client),
) -> Principal:

    if credentials is None or not credentials.credentials:
        raise ReauthenticationRequired("Missing authentication token")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(credentials.credentials)
    except Exception as e:
        logger.warning(f"Token validation failed: {type(e).__name__}")
        raise ReauthenticationRequired("Invalid or expired authentication token") from e

    auth_user = getattr(auth_resp, "user", None)
    if auth_user is None:
        raise ReauthenticationRequired("Invalid or expired authentication token")

    return resolve_principal(client, str(auth_user.id), getattr(auth_user, "email", None))


# ============================================================
# ROLE CHECKER (route gate; the policy layer is the real check)
# ============================================================
def requires_role(*allowed_roles: Role):
    allowed = {Role(r) for r in allowed_roles}

    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise Unauthorized(f"Requires one of: {sorted(r.value for r in allowed)}")
        return principal

    return checker


require_admin = requires_role(Role.admin)
require_tenant = requires_role(Role.tenant)
