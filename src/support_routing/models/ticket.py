"""Ticket models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator

from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


class TicketPriority(str, Enum):
    """Priority levels accepted on ticket intake."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def from_value(cls, raw: Optional[str]) -> Optional["TicketPriority"]:
        """Parse the stored string case-insensitively; unset or unknown gives None."""
        if raw is None or not str(raw).strip():
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown ticket priority", extra={"priority": raw})
            return None


class TicketStatus(str, Enum):
    """Ticket lifecycle states stored in the tickets table."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    OTHER = "other"

    @classmethod
    def from_value(cls, raw: Optional[str]) -> "TicketStatus":
        """Unset means open; any status outside the known lifecycle becomes OTHER."""
        if raw is None or not str(raw).strip():
            return cls.OPEN
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown ticket status", extra={"status": raw})
            return cls.OTHER


# Statuses that count towards an agent's workload.
OPEN_STATUSES: FrozenSet[TicketStatus] = frozenset(
    {TicketStatus.OPEN, TicketStatus.IN_PROGRESS}
)


class Ticket(BaseModel):
    """Ticket row as seen by routing and intake."""

    id: str
    user_id: Optional[str] = None
    title: str = ""
    description: str = ""
    priority: Optional[TicketPriority] = None
    status: TicketStatus = TicketStatus.OPEN
    tags: List[str] = Field(default_factory=list)
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value):
        if isinstance(value, TicketPriority) or value is None:
            return value
        return TicketPriority.from_value(value)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value):
        if isinstance(value, TicketStatus):
            return value
        return TicketStatus.from_value(value)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        """The tags column is nullable; routing treats NULL as no tags."""
        return list(value or [])

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)


class TicketCreateRequest(BaseModel):
    """Inbound payload for POST /tickets."""

    title: str
    description: str
    priority: TicketPriority
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if len(cleaned) < 3:
            raise ValueError("Title must be at least 3 characters")
        return cleaned

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if len(cleaned) < 5:
            raise ValueError("Description must be at least 5 characters")
        return cleaned

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value):
        parsed = TicketPriority.from_value(value) if isinstance(value, str) else value
        if parsed is None:
            raise ValueError("Priority is required")
        return parsed

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, value):
        return [str(tag).strip() for tag in (value or []) if str(tag).strip()]
