"""Administrator approval of newly registered employees and customers."""

from __future__ import annotations

from typing import List

from support_routing.models.profile import Profile, UserApprovalRequest, UserRole
from support_routing.repositories.base import ProfileStore
from support_routing.utils.error_handling import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


class UserApprovalService:
    """Administrators approve pending users of their own company only."""

    def __init__(self, profiles: ProfileStore):
        self.profiles = profiles

    def list_pending(self, admin_id: str) -> List[Profile]:
        admin = self._require_admin(admin_id)
        if not admin.company_name:
            return []
        return self.profiles.list_pending_profiles(admin.company_name)

    def approve_user(self, admin_id: str, request: UserApprovalRequest) -> Profile:
        """
        Set the approval flag matching the target's role.

        Raises NotFoundError for an unknown user, ForbiddenError when the user
        belongs to another company, ValidationError for administrators and
        ConflictError when the user is already approved.
        """
        admin = self._require_admin(admin_id)
        target = self.profiles.get_profile(request.user_id)
        if target is None:
            raise NotFoundError("User not found")
        if not admin.company_name or target.company_name != admin.company_name:
            raise ForbiddenError("This user is not in your company")
        if target.role is UserRole.ADMINISTRATOR:
            raise ValidationError("User is not an employee or customer")
        if target.is_approved:
            raise ConflictError("User is already approved")

        if not self.profiles.approve_profile(target.id, target.role):
            raise NotFoundError("User not found")

        logger.info(
            "User approved",
            extra={"user_id": target.id, "role": target.role.value, "admin_id": admin_id},
        )
        flag = "employee_approved" if target.role is UserRole.EMPLOYEE else "customer_approved"
        return target.model_copy(update={flag: True})

    def _require_admin(self, user_id: str) -> Profile:
        profile = self.profiles.get_profile(user_id)
        if profile is None or not profile.is_admin:
            raise ForbiddenError("Only administrators can approve users.")
        return profile
