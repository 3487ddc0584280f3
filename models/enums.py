from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string.
    """

    def __str__(self):
        return str(self.value)


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Mirrors the app_role enum in the user_roles table."""

    admin = "admin"
    tenant = "tenant"


# -----------------------------------------------------
# MAINTENANCE REQUEST STATUS
# -----------------------------------------------------
class RequestStatus(BaseStrEnum):
    """open → resolved; resolved is terminal."""

    open = "open"
    resolved = "resolved"
