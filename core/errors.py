# core/errors.py

from typing import Optional


# ============================================================
# Application error taxonomy
# ============================================================
# Every failure is scoped to the operation that raised it. Routers
# never catch these; main.py maps them to JSON responses.
# ============================================================

class AppError(Exception):
    """Base class for errors surfaced to the caller with a stable code."""

    status_code: int = 500
    code: str = "error"
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(AppError):
    """A field constraint was violated before any write was attempted."""

    status_code = 422
    code = "validation_error"
    default_message = "Invalid input"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class DuplicatePayment(AppError):
    status_code = 409
    code = "duplicate_payment"
    default_message = "Payment already recorded for this tenant and month"


class CredentialConflict(AppError):
    status_code = 409
    code = "credential_conflict"
    default_message = "A user with this email is already registered"


class PartialProvisioningFailure(AppError):
    """
    Tenant provisioning failed after the principal was created.

    `compensated` tells the operator whether the saga rolled back
    cleanly (safe to retry) or left an orphaned principal behind.
    """

    status_code = 500
    code = "partial_provisioning_failure"

    def __init__(
        self,
        failed_step: str,
        principal_id: str,
        compensated: bool,
        cause: Optional[str] = None,
    ):
        self.failed_step = failed_step
        self.principal_id = principal_id
        self.compensated = compensated
        self.cause = cause

        if compensated:
            message = (
                f"Tenant provisioning failed at step '{failed_step}'; "
                f"created account was rolled back and the operation can be retried"
            )
        else:
            message = (
                f"Tenant provisioning failed at step '{failed_step}' and rollback "
                f"did not complete; principal {principal_id} needs cleanup"
            )
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "failed_step": self.failed_step,
            "principal_id": self.principal_id,
            "compensated": self.compensated,
        })
        return data


class Unauthorized(AppError):
    status_code = 403
    code = "unauthorized"
    default_message = "You do not have access to this resource"


class ReauthenticationRequired(Unauthorized):
    """The principal cannot be resolved to a role; the client must sign in again."""

    status_code = 401
    code = "reauthentication_required"
    default_message = "Session is not linked to a valid role, please sign in again"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class InvalidTransition(AppError):
    status_code = 409
    code = "invalid_transition"
    default_message = "Request is already resolved"


class StoreError(AppError):
    status_code = 500
    code = "store_error"
    default_message = "Database operation failed"


# ============================================================
# Supabase error inspection
# ============================================================

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 — PostgREST APIError / GoTrue AuthApiError
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2 — errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or type(error).__name__


def is_unique_violation(error: Exception) -> bool:
    """True when the store rejected an insert on a uniqueness constraint."""
    if str(getattr(error, "code", "") or "") == UNIQUE_VIOLATION:
        return True

    detail = extract_supabase_error(error).lower()
    return UNIQUE_VIOLATION in detail or "duplicate key" in detail or "unique constraint" in detail


def is_invalid_identifier(error: Exception) -> bool:
    """True when the store could not parse a filter value, e.g. a malformed uuid."""
    return str(getattr(error, "code", "") or "") == INVALID_TEXT_REPRESENTATION


def is_email_conflict(error: Exception) -> bool:
    """True when GoTrue refused to create a user because the email exists."""
    code = str(getattr(error, "code", "") or "").lower()
    if code in ("email_exists", "user_already_exists"):
        return True

    detail = extract_supabase_error(error).lower()
    return "already registered" in detail or "already been registered" in detail or "already exists" in detail


def handle_supabase_error(error: Exception, operation: str = "Database operation failed") -> StoreError:
    """
    Log a Supabase failure and wrap it as a StoreError.
    Returns (doesn't raise) so the caller can `raise ... from error`.
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    return StoreError(operation)
