"""
Team administration handler for POST /admin/teams.

The body names an ``action`` plus its fields, e.g.
``{"action": "create_team", "name": "Billing", "focus_area": "billing"}``.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from support_routing.models.directory import (
    EmployeeSkillRequest,
    SkillCreateRequest,
    TeamCreateRequest,
    TeamMemberRequest,
)
from support_routing.utils.error_handling import AppError, ValidationError, to_response
from support_routing.utils.logging_config import get_logger
from support_routing.utils.validators import (
    ensure_present,
    get_caller_id,
    validation_messages,
)

logger = get_logger(__name__)

_team_service: Optional["TeamAdminService"] = None

# action -> (payload model or None, service method name)
ACTIONS: Dict[str, Tuple[Optional[Type[BaseModel]], str]] = {
    "list_teams": (None, "list_teams"),
    "create_team": (TeamCreateRequest, "create_team"),
    "delete_team": (None, "delete_team"),
    "add_team_member": (TeamMemberRequest, "add_team_member"),
    "remove_team_member": (TeamMemberRequest, "remove_team_member"),
    "list_skills": (None, "list_skills"),
    "create_skill": (SkillCreateRequest, "create_skill"),
    "add_employee_skill": (EmployeeSkillRequest, "add_employee_skill"),
    "remove_employee_skill": (EmployeeSkillRequest, "remove_employee_skill"),
}


def _get_team_service():
    """Lazy-load TeamAdminService."""
    global _team_service
    if _team_service is None:
        from support_routing.services.factory import build_team_admin_service, get_engine
        _team_service = build_team_admin_service(get_engine())
    return _team_service


def _response(status: int, body: Dict) -> Dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _serialize(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_serialize(item) for item in result]
    return result


def lambda_handler(event, context):
    """Dispatch an admin action to TeamAdminService."""
    correlation_id = str(uuid.uuid4())
    try:
        caller_id = get_caller_id(event)
        payload = json.loads(event.get("body") or "{}")
        if not isinstance(payload, dict):
            raise ValidationError("Body must be a JSON object")
        action = payload.pop("action", None)
        if action not in ACTIONS:
            raise ValidationError(f"Unknown action: {action}")

        model, method_name = ACTIONS[action]
        method: Callable = getattr(_get_team_service(), method_name)
        if model is not None:
            result = method(caller_id, model.model_validate(payload))
        elif action == "delete_team":
            ensure_present(payload.get("team_id"), "team_id")
            result = method(caller_id, payload["team_id"])
        else:
            result = method(caller_id)
    except PydanticValidationError as exc:
        return _response(
            422,
            {
                "message": "Invalid request",
                "errors": validation_messages(exc),
                "correlation_id": correlation_id,
            },
        )
    except json.JSONDecodeError:
        return _response(400, {"message": "Body must be JSON", "correlation_id": correlation_id})
    except AppError as exc:
        logger.warning(
            "Team admin action rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception("Team admin action failed", extra={"correlation_id": correlation_id})
        return _response(500, {"message": "Internal server error", "correlation_id": correlation_id})

    logger.info("Team admin action applied", extra={"correlation_id": correlation_id, "action": action})
    return _response(
        200,
        {"status": "ok", "data": _serialize(result), "correlation_id": correlation_id},
    )
