"""Ticket store backed by the tickets table."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from support_routing.models.ticket import (
    OPEN_STATUSES,
    Ticket,
    TicketCreateRequest,
    TicketStatus,
)
from support_routing.repositories.postgres_repo import PostgresRepository
from support_routing.utils.error_handling import NotFoundError

_TICKET_COLUMNS = (
    "id, user_id, title, description, priority, status, tags, assigned_to, created_at"
)

_COUNT_OPEN = text(
    """
    SELECT COUNT(*) FROM tickets
    WHERE assigned_to = :agent_id AND status IN :statuses
    """
).bindparams(bindparam("statuses", expanding=True))


class SqlTicketStore:
    """Reads and writes ticket rows."""

    def __init__(self, engine: Engine):
        self.db = PostgresRepository(engine)

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        row = self.db.fetch_one(
            f"SELECT {_TICKET_COLUMNS} FROM tickets WHERE id = :ticket_id",
            {"ticket_id": ticket_id},
        )
        return _row_to_ticket(row) if row else None

    def update_ticket_assignee(self, ticket_id: str, agent_id: str) -> None:
        updated = self.db.execute(
            "UPDATE tickets SET assigned_to = :agent_id WHERE id = :ticket_id",
            {"agent_id": agent_id, "ticket_id": ticket_id},
        )
        if not updated:
            raise NotFoundError(f"Ticket {ticket_id} not found")

    def count_open_tickets_for_assignee(self, agent_id: str) -> int:
        count = self.db.scalar(
            _COUNT_OPEN,
            {
                "agent_id": agent_id,
                "statuses": sorted(status.value for status in OPEN_STATUSES),
            },
        )
        return int(count or 0)

    def create_ticket(self, user_id: str, request: TicketCreateRequest) -> Ticket:
        row = self.db.execute_returning(
            f"""
            INSERT INTO tickets (user_id, title, description, priority, status, tags)
            VALUES (:user_id, :title, :description, :priority, :status, :tags)
            RETURNING {_TICKET_COLUMNS}
            """,
            {
                "user_id": user_id,
                "title": request.title,
                "description": request.description,
                "priority": request.priority.value,
                "status": TicketStatus.OPEN.value,
                "tags": request.tags,
            },
        )
        return _row_to_ticket(row)

    def claim_ticket(self, ticket_id: str, agent_id: str) -> None:
        updated = self.db.execute(
            """
            UPDATE tickets SET assigned_to = :agent_id, status = :status
            WHERE id = :ticket_id
            """,
            {
                "agent_id": agent_id,
                "status": TicketStatus.IN_PROGRESS.value,
                "ticket_id": ticket_id,
            },
        )
        if not updated:
            raise NotFoundError(f"Ticket {ticket_id} not found")


def _row_to_ticket(row: dict) -> Ticket:
    return Ticket(
        id=str(row["id"]),
        user_id=str(row["user_id"]) if row.get("user_id") else None,
        title=row.get("title") or "",
        description=row.get("description") or "",
        priority=row.get("priority"),
        status=row.get("status"),
        tags=row.get("tags"),
        assigned_to=str(row["assigned_to"]) if row.get("assigned_to") else None,
        created_at=row.get("created_at"),
    )
