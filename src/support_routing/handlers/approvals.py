"""
User approval handlers for GET /admin/approvals and
POST /admin/approvals/{id}.

Newly registered employees and customers cannot open or work tickets until an
administrator of the same company approves them.
"""

from __future__ import annotations

import json
import uuid
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from support_routing.models.profile import UserApprovalRequest
from support_routing.utils.error_handling import AppError, to_response
from support_routing.utils.logging_config import get_logger
from support_routing.utils.validators import get_caller_id, validation_messages

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_approval_service: Optional["UserApprovalService"] = None


def _get_approval_service():
    """Lazy-load UserApprovalService."""
    global _approval_service
    if _approval_service is None:
        from support_routing.services.factory import build_approval_service, get_engine
        _approval_service = build_approval_service(get_engine())
    return _approval_service


def _response(status: int, body: Dict) -> Dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def list_handler(event, context):
    """Handle GET /admin/approvals."""
    correlation_id = str(uuid.uuid4())
    try:
        caller_id = get_caller_id(event)
        pending = _get_approval_service().list_pending(caller_id)
    except AppError as exc:
        logger.warning(
            "Pending user listing rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception("Pending user listing failed", extra={"correlation_id": correlation_id})
        return _response(500, {"message": "Internal server error", "correlation_id": correlation_id})

    return _response(
        200,
        {
            "pending_users": [profile.model_dump(mode="json") for profile in pending],
            "correlation_id": correlation_id,
        },
    )


def approve_handler(event, context):
    """Handle POST /admin/approvals/{id}."""
    correlation_id = str(uuid.uuid4())
    user_id = (event.get("pathParameters") or {}).get("id")
    try:
        caller_id = get_caller_id(event)
        request = UserApprovalRequest.model_validate({"user_id": user_id or ""})
        profile = _get_approval_service().approve_user(caller_id, request)
    except PydanticValidationError as exc:
        return _response(
            422,
            {
                "message": "Invalid request",
                "errors": validation_messages(exc),
                "correlation_id": correlation_id,
            },
        )
    except AppError as exc:
        logger.warning(
            "User approval rejected",
            extra={"correlation_id": correlation_id, "user_id": user_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception(
            "User approval failed",
            extra={"correlation_id": correlation_id, "user_id": user_id},
        )
        return _response(500, {"message": "Internal server error", "correlation_id": correlation_id})

    return _response(
        200,
        {"user": profile.model_dump(mode="json"), "correlation_id": correlation_id},
    )
