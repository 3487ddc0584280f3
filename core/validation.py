# core/validation.py

from typing import Any, Type, TypeVar
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def _first_error(exc: PydanticValidationError) -> ValidationError:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or None
    message = err.get("msg", "Invalid input")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if field:
        message = f"{field}: {message}"
    return ValidationError(message, field=field)


def validate_payload(model_cls: Type[M], data: Any) -> M:
    """
    Validate `data` against `model_cls` before any network call.

    Accepts a dict or an already-built model (re-validated, since
    model_construct() skips checks). Raises core.errors.ValidationError
    carrying the first failing field.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()

    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise _first_error(exc) from exc
