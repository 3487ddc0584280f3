# core/supabase_helpers.py

from typing import Iterable, List, Optional, Tuple

from supabase import Client

from core.errors import (
    AppError,
    NotFound,
    StoreError,
    handle_supabase_error,
    is_invalid_identifier,
    is_unique_violation,
)
from core.permission_helpers import filter_readable, require_write, scope_query
from core.permissions import Action, Entity
from models.principal import Principal


# =================================================================
#  POLICY-ENFORCED SELECT / INSERT / UPDATE / DELETE
# =================================================================
# The service-role client bypasses row-level security, so these are
# the only way services touch the tenants, rent_payments and
# maintenance_requests tables. Each call takes the principal
# explicitly; reads are narrowed to visible rows, writes are checked
# against the row before anything is sent.
# =================================================================

Ordering = Iterable[Tuple[str, bool]]   # (column, descending)


def _require_client(client: Client) -> Client:
    if client is None:
        raise StoreError("Supabase client not configured")
    return client


def policy_select(
    client: Client,
    principal: Principal,
    entity: Entity,
    filters: dict = None,
    *,
    columns: str = "*",
    order: Ordering = (),
    limit: Optional[int] = None,
) -> List[dict]:
    """SELECT visible rows. Rows owned by someone else are never returned."""
    client = _require_client(client)
    entity = Entity(entity)

    query = scope_query(principal, entity, client.table(entity.value).select(columns))
    if query is None:
        return []

    for key, val in (filters or {}).items():
        query = query.eq(key, val)
    for column, desc in order:
        query = query.order(column, desc=desc)
    if limit is not None:
        query = query.limit(limit)

    try:
        result = query.execute()
    except Exception as e:
        if is_invalid_identifier(e):
            # a malformed uuid cannot name any row
            return []
        raise handle_supabase_error(e, f"Failed to fetch from {entity.value}") from e

    return filter_readable(principal, entity, result.data or [])


def policy_get(client: Client, principal: Principal, entity: Entity, row_id: str) -> dict:
    """Fetch one visible row by id or raise NotFound."""
    rows = policy_select(client, principal, entity, {"id": row_id}, limit=1)
    if not rows:
        raise NotFound(f"{Entity(entity).value} record {row_id} not found")
    return rows[0]


def policy_insert(
    client: Client,
    principal: Principal,
    entity: Entity,
    data: dict,
    *,
    conflict_error: Optional[AppError] = None,
) -> dict:
    """
    INSERT one row after checking the principal may create it.
    A uniqueness violation is raised as `conflict_error` when given.
    """
    client = _require_client(client)
    entity = Entity(entity)
    require_write(principal, entity, data, Action.insert)

    try:
        result = client.table(entity.value).insert(data).execute()
    except Exception as e:
        if conflict_error is not None and is_unique_violation(e):
            raise conflict_error from e
        raise handle_supabase_error(e, f"Failed to insert into {entity.value}") from e

    if not result.data:
        raise StoreError(f"Insert into {entity.value} returned no row")
    return result.data[0]


def policy_update(
    client: Client,
    principal: Principal,
    entity: Entity,
    row_id: str,
    data: dict,
    *,
    match: dict = None,
) -> Optional[dict]:
    """
    UPDATE one row by id. Extra `match` filters make the write
    conditional; returns None when the row no longer matches them.
    """
    client = _require_client(client)
    entity = Entity(entity)

    existing = policy_get(client, principal, entity, row_id)
    require_write(principal, entity, existing, Action.update)

    query = client.table(entity.value).update(data).eq("id", row_id)
    for key, val in (match or {}).items():
        query = query.eq(key, val)

    try:
        result = query.execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to update {entity.value}") from e

    return result.data[0] if result.data else None


def policy_delete(client: Client, principal: Principal, entity: Entity, row_id: str) -> dict:
    """DELETE one row by id; returns the row as it was."""
    client = _require_client(client)
    entity = Entity(entity)

    existing = policy_get(client, principal, entity, row_id)
    require_write(principal, entity, existing, Action.delete)

    try:
        client.table(entity.value).delete().eq("id", row_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to delete from {entity.value}") from e

    return existing
