"""
Auto-assignment handler.

Invoked when a ticket is created: directly with ``{"ticket_id": ...}``, from
an EventBridge rule (``detail.ticket_id``), from API Gateway
(``POST /tickets/{id}/route``), or from an SQS queue in batches. Routing is
idempotent while a ticket is unassigned, so failed SQS records are handed back
for retry through ``batchItemFailures``.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Optional

from support_routing.utils.error_handling import AppError, StoreUnavailableError, to_response
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded router to avoid import-time DB connections
_router: Optional["TicketRouter"] = None


def _get_router():
    """Lazy-load TicketRouter."""
    global _router
    if _router is None:
        from support_routing.services.factory import build_router, get_engine
        _router = build_router(get_engine())
    return _router


def _ticket_id_from_event(event: Dict[str, Any]) -> Optional[str]:
    path_params = event.get("pathParameters") or {}
    detail = event.get("detail") or {}
    return event.get("ticket_id") or detail.get("ticket_id") or path_params.get("id")


def lambda_handler(event, context):
    """Route a single ticket, or every ticket in an SQS batch."""
    if "Records" in event:
        return _handle_batch(event["Records"])

    correlation_id = str(uuid.uuid4())
    ticket_id = _ticket_id_from_event(event)
    if not ticket_id:
        return {
            "statusCode": 400,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(
                {"message": "ticket_id is required", "correlation_id": correlation_id}
            ),
        }

    try:
        outcome = _get_router().route_ticket(ticket_id)
    except AppError as exc:
        logger.exception(
            "Routing failed",
            extra={"correlation_id": correlation_id, "ticket_id": ticket_id},
        )
        return to_response(exc, correlation_id)
    except Exception:
        logger.exception(
            "Routing failed unexpectedly",
            extra={"correlation_id": correlation_id, "ticket_id": ticket_id},
        )
        return {
            "statusCode": 500,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(
                {"message": "Internal server error", "correlation_id": correlation_id}
            ),
        }

    logger.info(
        "Ticket routed",
        extra={
            "correlation_id": correlation_id,
            "ticket_id": ticket_id,
            "status": outcome.status.value,
        },
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": outcome.model_dump_json(),
    }


def _handle_batch(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Route each SQS record independently.

    Store outages and unexpected errors hand only that record back for retry;
    the queue's redrive policy parks it once retries run out.
    """
    failures: List[Dict[str, str]] = []
    for record in records:
        message_id = record.get("messageId", "")
        try:
            body = json.loads(record.get("body") or "{}")
        except json.JSONDecodeError:
            logger.warning("Discarding malformed routing message", extra={"message_id": message_id})
            continue

        ticket_id = body.get("ticket_id") if isinstance(body, dict) else None
        if not ticket_id:
            logger.warning("Routing message without ticket_id", extra={"message_id": message_id})
            continue

        try:
            outcome = _get_router().route_ticket(ticket_id)
        except StoreUnavailableError:
            logger.exception(
                "Routing failed; message will be retried",
                extra={"message_id": message_id, "ticket_id": ticket_id},
            )
            failures.append({"itemIdentifier": message_id})
            continue
        except AppError as exc:
            logger.warning(
                "Routing gave up on ticket",
                extra={"message_id": message_id, "ticket_id": ticket_id, "error": str(exc)},
            )
            continue
        except Exception:
            logger.exception(
                "Routing failed unexpectedly; message will be retried",
                extra={"message_id": message_id, "ticket_id": ticket_id},
            )
            failures.append({"itemIdentifier": message_id})
            continue

        logger.info(
            "Ticket routed",
            extra={"ticket_id": ticket_id, "status": outcome.status.value},
        )

    return {"batchItemFailures": failures}
