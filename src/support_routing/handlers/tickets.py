"""
Ticket handlers for POST /tickets and POST /tickets/{id}/claim.

New tickets are auto-assigned inline; a ticket that routing could not place is
still created and returned with ``assigned_to`` unset.
"""

from __future__ import annotations

import json
import uuid
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from support_routing.models.ticket import TicketCreateRequest
from support_routing.utils.error_handling import AppError, to_response
from support_routing.utils.logging_config import get_logger
from support_routing.utils.validators import (
    ensure_present,
    get_caller_id,
    validation_messages,
)

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_ticket_service: Optional["TicketService"] = None


def _get_ticket_service():
    """Lazy-load TicketService."""
    global _ticket_service
    if _ticket_service is None:
        from support_routing.services.factory import build_ticket_service, get_engine
        _ticket_service = build_ticket_service(get_engine())
    return _ticket_service


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def create_handler(event, context):
    """Handle POST /tickets."""
    correlation_id = str(uuid.uuid4())
    try:
        caller_id = get_caller_id(event)
        payload = json.loads(event.get("body") or "{}")
        request = TicketCreateRequest.model_validate(payload)
        result = _get_ticket_service().create_ticket(caller_id, request)
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
            "Ticket creation rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception("Ticket creation failed", extra={"correlation_id": correlation_id})
        return _response(500, {"message": "Internal server error", "correlation_id": correlation_id})

    logger.info(
        "Ticket created",
        extra={"correlation_id": correlation_id, "ticket_id": result.ticket.id},
    )
    return _response(
        201,
        {
            "ticket": result.ticket.model_dump(mode="json"),
            "routing": result.routing.model_dump(mode="json") if result.routing else None,
            "routing_error": result.routing_error,
            "correlation_id": correlation_id,
        },
    )


def claim_handler(event, context):
    """Handle POST /tickets/{id}/claim."""
    correlation_id = str(uuid.uuid4())
    ticket_id = (event.get("pathParameters") or {}).get("id")
    try:
        caller_id = get_caller_id(event)
        ensure_present(ticket_id, "ticket id")
        ticket = _get_ticket_service().claim_ticket(caller_id, ticket_id)
    except AppError as exc:
        logger.warning(
            "Ticket claim rejected",
            extra={"correlation_id": correlation_id, "ticket_id": ticket_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception(
            "Ticket claim failed",
            extra={"correlation_id": correlation_id, "ticket_id": ticket_id},
        )
        return _response(500, {"message": "Internal server error", "correlation_id": correlation_id})

    return _response(
        200,
        {"ticket": ticket.model_dump(mode="json"), "correlation_id": correlation_id},
    )
