"""PostgreSQL repository using SQLAlchemy Core."""

from typing import Any, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from support_routing.utils.error_handling import StoreUnavailableError
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


class PostgresRepository:
    """Thin wrapper to keep SQL organized and parameterized.

    Every driver or query failure surfaces as StoreUnavailableError so callers
    never depend on SQLAlchemy exception types.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def fetch_one(self, query: Any, params: dict) -> Optional[dict]:
        """Execute a SELECT and return one row as dict."""
        stmt = self._statement(query)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt, params).fetchone()
                return dict(row._mapping) if row else None
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, "fetch_one") from exc

    def fetch_all(self, query: Any, params: dict) -> List[dict]:
        """Execute a SELECT and return every row as a dict."""
        stmt = self._statement(query)
        try:
            with self.engine.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt, params)]
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, "fetch_all") from exc

    def scalar(self, query: Any, params: dict) -> Any:
        """Execute a SELECT returning a single value."""
        stmt = self._statement(query)
        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt, params).scalar()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, "scalar") from exc

    def execute(self, query: Any, params: dict) -> int:
        """Execute a parameterized statement in its own transaction; returns rowcount."""
        stmt = self._statement(query)
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt, params).rowcount
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, "execute") from exc

    def execute_returning(self, query: Any, params: dict) -> Optional[dict]:
        """Execute an INSERT/UPDATE ... RETURNING and return the first row."""
        stmt = self._statement(query)
        try:
            with self.engine.begin() as conn:
                row = conn.execute(stmt, params).fetchone()
                return dict(row._mapping) if row else None
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, "execute_returning") from exc

    @staticmethod
    def _statement(query: Any):
        return text(query) if isinstance(query, str) else query

    @staticmethod
    def _unavailable(exc: Exception, operation: str) -> StoreUnavailableError:
        logger.error(
            "Database operation failed",
            extra={"operation": operation, "error": str(exc)},
        )
        return StoreUnavailableError(f"Database operation failed: {operation}", operation)
