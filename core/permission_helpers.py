from typing import Iterable, List, Optional

from core.errors import Unauthorized
from core.logging_config import logger
from core.permissions import ENTITY_POLICIES, UNSCOPED_ROLES, Action, Entity
from models.principal import Principal


# -----------------------------------------------------
# Role grants
# -----------------------------------------------------
def allowed_actions(principal: Principal, entity: Entity) -> frozenset:
    return ENTITY_POLICIES.get(Entity(entity), {}).get(principal.role, frozenset())


def is_admin(principal: Principal) -> bool:
    return principal.role in UNSCOPED_ROLES


# -----------------------------------------------------
# Ownership
# -----------------------------------------------------
def owns_row(principal: Principal, entity: Entity, row: dict) -> bool:
    """Does this row belong to the principal's own tenant profile?"""
    if row is None:
        return False

    if Entity(entity) == Entity.tenants:
        linked = row.get("auth_user_id")
        return linked is not None and str(linked) == principal.id

    if principal.tenant_id is None:
        return False
    tenant_id = row.get("tenant_id")
    return tenant_id is not None and str(tenant_id) == principal.tenant_id


# -----------------------------------------------------
# Predicates
# -----------------------------------------------------
def can_read(principal: Principal, entity: Entity, row: dict) -> bool:
    if Action.read not in allowed_actions(principal, entity):
        return False
    if is_admin(principal):
        return True
    return owns_row(principal, entity, row)


def can_write(principal: Principal, entity: Entity, row: dict, action: Action) -> bool:
    """
    `row` is the row as it will exist after an insert, or the existing
    row for update/delete.
    """
    action = Action(action)
    if action == Action.read:
        raise ValueError("can_write() does not evaluate reads")

    if action not in allowed_actions(principal, entity):
        return False
    if is_admin(principal):
        return True
    return owns_row(principal, entity, row)


def require_write(principal: Principal, entity: Entity, row: dict, action: Action):
    """Raise Unauthorized unless the principal may perform `action` on `row`."""
    if not can_write(principal, entity, row, action):
        logger.warning(
            f"Denied {Action(action).value} on {Entity(entity).value} "
            f"for {principal.role.value} {principal.id}"
        )
        raise Unauthorized(f"You are not allowed to {Action(action).value} {Entity(entity).value}")


def filter_readable(principal: Principal, entity: Entity, rows: Iterable[dict]) -> List[dict]:
    return [row for row in rows if can_read(principal, entity, row)]


# -----------------------------------------------------
# Query push-down
# -----------------------------------------------------
def scope_query(principal: Principal, entity: Entity, query) -> Optional[object]:
    """
    Narrow a PostgREST select to the rows the principal may read.

    Returns None when the principal can read no row at all, so the
    caller can skip the round-trip and return an empty result.
    """
    if Action.read not in allowed_actions(principal, entity):
        return None
    if is_admin(principal):
        return query

    if Entity(entity) == Entity.tenants:
        return query.eq("auth_user_id", principal.id)

    if principal.tenant_id is None:
        return None
    return query.eq("tenant_id", principal.tenant_id)
