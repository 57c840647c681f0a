"""Lightweight validation helpers for handler input."""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from support_routing.utils.error_handling import ForbiddenError, ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def ensure_hour(value: int, field: str) -> int:
    """Coverage hours are whole UTC hours in [0, 23]."""
    if not 0 <= value <= 23:
        raise ValueError(f"{field} must be between 0 and 23")
    return value


def get_caller_id(event: Dict[str, Any]) -> str:
    """Read the signed-in user's id from the API Gateway JWT authorizer claims."""
    claims = (
        event.get("requestContext", {})
        .get("authorizer", {})
        .get("jwt", {})
        .get("claims", {})
    )
    caller_id = claims.get("sub")
    if not caller_id:
        raise ForbiddenError("Not signed in")
    return caller_id


def validation_messages(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into plain messages safe for a JSON body."""
    return [error["msg"] for error in exc.errors()]
