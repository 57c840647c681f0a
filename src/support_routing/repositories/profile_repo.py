"""Profile lookups for role checks and user approval."""

from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine

from support_routing.models.profile import Profile, UserRole
from support_routing.repositories.postgres_repo import PostgresRepository

_PROFILE_COLUMNS = "id, role, company_name, employee_approved, customer_approved"

# Approval flag written for each role that needs approving.
APPROVAL_FLAGS = {
    UserRole.EMPLOYEE: "employee_approved",
    UserRole.CUSTOMER: "customer_approved",
}


def _row_to_profile(row: Dict[str, Any]) -> Profile:
    return Profile(
        id=str(row["id"]),
        role=row.get("role"),
        company_name=row.get("company_name"),
        employee_approved=row.get("employee_approved"),
        customer_approved=row.get("customer_approved"),
    )


class SqlProfileStore:
    def __init__(self, engine: Engine):
        self.db = PostgresRepository(engine)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        row = self.db.fetch_one(
            f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id = :user_id",
            {"user_id": user_id},
        )
        return _row_to_profile(row) if row else None

    def list_pending_profiles(self, company_name: str) -> List[Profile]:
        """Employees and customers of one company still awaiting approval."""
        rows = self.db.fetch_all(
            f"""
            SELECT {_PROFILE_COLUMNS}
            FROM profiles
            WHERE company_name = :company_name
              AND (
                (role = 'employee' AND COALESCE(employee_approved, FALSE) = FALSE)
                OR (role = 'customer' AND COALESCE(customer_approved, FALSE) = FALSE)
              )
            ORDER BY id ASC
            """,
            {"company_name": company_name},
        )
        return [_row_to_profile(row) for row in rows]

    def approve_profile(self, user_id: str, role: UserRole) -> bool:
        flag = APPROVAL_FLAGS[role]
        updated = self.db.execute(
            f"UPDATE profiles SET {flag} = TRUE WHERE id = :user_id",
            {"user_id": user_id},
        )
        return updated > 0
