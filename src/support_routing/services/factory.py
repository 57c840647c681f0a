"""Wire SQL stores into services for the Lambda handlers."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Engine

from support_routing.config.settings import Settings
from support_routing.repositories.directory_repo import SqlDirectoryStore
from support_routing.repositories.engine import create_db_engine
from support_routing.repositories.profile_repo import SqlProfileStore
from support_routing.repositories.ticket_repo import SqlTicketStore
from support_routing.services.approval_service import UserApprovalService
from support_routing.services.routing_service import TicketRouter
from support_routing.services.team_service import TeamAdminService
from support_routing.services.ticket_service import TicketService
from support_routing.utils.error_handling import StoreUnavailableError

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the pooled engine for this container."""
    global _engine
    if _engine is None:
        _engine = create_db_engine(Settings.from_environment())
        if _engine is None:
            raise StoreUnavailableError("Database is not configured", "connect")
    return _engine


def build_router(engine: Engine) -> TicketRouter:
    return TicketRouter(SqlTicketStore(engine), SqlDirectoryStore(engine))


def build_ticket_service(engine: Engine) -> TicketService:
    tickets = SqlTicketStore(engine)
    return TicketService(
        tickets,
        SqlProfileStore(engine),
        TicketRouter(tickets, SqlDirectoryStore(engine)),
    )


def build_team_admin_service(engine: Engine) -> TeamAdminService:
    return TeamAdminService(SqlDirectoryStore(engine), SqlProfileStore(engine))


def build_approval_service(engine: Engine) -> UserApprovalService:
    return UserApprovalService(SqlProfileStore(engine))
