"""
Helpers for validating write payloads against pydantic schemas.

Only the first failing field is reported, mirroring what the HTTP layer
returns for malformed request bodies.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from portfolio.domain.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def first_error(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic error into the domain error for its first failure."""
    errors = exc.errors()
    if not errors:
        return ValidationError(None, "Validation failed")
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    field = ".".join(loc) or None
    message = str(err.get("msg", "Invalid value"))
    if field:
        message = f"{field}: {message}"
    return ValidationError(field, message)


def parse_model(schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise first_error(e) from e
