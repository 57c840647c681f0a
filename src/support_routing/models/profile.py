"""User profile and role models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


class UserRole(str, Enum):
    ADMINISTRATOR = "administrator"
    EMPLOYEE = "employee"
    CUSTOMER = "customer"

    @classmethod
    def from_value(cls, raw: Optional[str]) -> "UserRole":
        """Unset or unknown roles fall back to customer, the least privileged role."""
        if raw is None or not str(raw).strip():
            return cls.CUSTOMER
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown user role", extra={"role": raw})
            return cls.CUSTOMER


class Profile(BaseModel):
    """Role, company and approval flags for a signed-in user."""

    id: str
    role: UserRole = UserRole.CUSTOMER
    company_name: Optional[str] = None
    employee_approved: bool = False
    customer_approved: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, value):
        if isinstance(value, UserRole):
            return value
        return UserRole.from_value(value)

    @field_validator("employee_approved", "customer_approved", mode="before")
    @classmethod
    def null_is_false(cls, value):
        return bool(value)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMINISTRATOR

    @property
    def is_approved(self) -> bool:
        """Administrators need no approval; employees and customers do."""
        if self.role is UserRole.EMPLOYEE:
            return self.employee_approved
        if self.role is UserRole.CUSTOMER:
            return self.customer_approved
        return True

    @property
    def can_work_tickets(self) -> bool:
        """Administrators and approved employees may claim and be assigned tickets."""
        return self.is_admin or (
            self.role is UserRole.EMPLOYEE and self.employee_approved
        )

    @property
    def can_open_tickets(self) -> bool:
        return self.is_approved


class UserApprovalRequest(BaseModel):
    """Inbound payload for approving a pending employee or customer."""

    user_id: str = Field(min_length=1)
