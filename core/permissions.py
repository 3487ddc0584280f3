# ============================================
# CENTRALIZED ENTITY → ROLE → ACTIONS MAP
# ============================================
# Mirrors the row-level policies on the managed database. Ownership
# (which rows a tenant may touch) is checked in core.permission_helpers.

from models.enums import BaseStrEnum, Role


class Entity(BaseStrEnum):
    tenants = "tenants"
    rent_payments = "rent_payments"
    maintenance_requests = "maintenance_requests"


class Action(BaseStrEnum):
    read = "read"
    insert = "insert"
    update = "update"
    delete = "delete"


ALL_ACTIONS = frozenset(Action)


ENTITY_POLICIES = {

    # =====================================================
    # TENANT PROFILES — admins manage, tenants see own row
    # =====================================================
    Entity.tenants: {
        Role.admin: ALL_ACTIONS,
        Role.tenant: frozenset({Action.read}),
    },

    # =====================================================
    # RENT LEDGER — admins record, tenants read own history
    # =====================================================
    Entity.rent_payments: {
        Role.admin: ALL_ACTIONS,
        Role.tenant: frozenset({Action.read}),
    },

    # =====================================================
    # MAINTENANCE — tenants may also open requests for themselves
    # =====================================================
    Entity.maintenance_requests: {
        Role.admin: ALL_ACTIONS,
        Role.tenant: frozenset({Action.read, Action.insert}),
    },
}


# Roles whose grants are not restricted to owned rows
UNSCOPED_ROLES = frozenset({Role.admin})
