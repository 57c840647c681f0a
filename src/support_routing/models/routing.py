"""Routing result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Outcome of an auxiliary store read.

    Keeps "nothing matched" apart from "the store failed" even though routing
    treats both as no match.
    """

    status: LookupStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "Lookup[T]":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def store_error(cls, error: Exception) -> "Lookup[T]":
        return cls(LookupStatus.STORE_ERROR, error=str(error))

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND


class RoutingStatus(str, Enum):
    """Why routing ended where it did."""

    ASSIGNED = "assigned"
    TICKET_NOT_FOUND = "ticket_not_found"
    ALREADY_ASSIGNED = "already_assigned"
    NO_TEAM = "no_team"
    NO_CANDIDATES = "no_candidates"
    NO_SKILLED_CANDIDATES = "no_skilled_candidates"


class RoutingOutcome(BaseModel):
    """Record of a single route_ticket call, returned to callers and logged."""

    ticket_id: str
    status: RoutingStatus
    team_id: Optional[str] = None
    required_skill_id: Optional[str] = None
    candidate_ids: List[str] = Field(default_factory=list)
    workloads: Dict[str, int] = Field(default_factory=dict)
    agent_id: Optional[str] = None
    within_coverage: Optional[bool] = None
    reason: str = ""

    @property
    def assigned(self) -> bool:
        return self.status is RoutingStatus.ASSIGNED
