"""Teams, memberships and skills."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from support_routing.models.directory import (
    CoverageWindow,
    Skill,
    Team,
    TeamCreateRequest,
)
from support_routing.repositories.postgres_repo import PostgresRepository

_TEAM_COLUMNS = (
    "id, name, focus_area, coverage_start_time_utc, coverage_end_time_utc, created_at"
)

_SKILLED_USERS = text(
    """
    SELECT DISTINCT user_id FROM employee_skills
    WHERE skill_id = :skill_id AND user_id IN :user_ids
    """
).bindparams(bindparam("user_ids", expanding=True))


class SqlDirectoryStore:
    """Directory lookups used by routing and team administration."""

    def __init__(self, engine: Engine):
        self.db = PostgresRepository(engine)

    # ---- Routing lookups ----

    def find_team_by_focus_area(self, focus_area: str) -> Optional[Team]:
        """Case-insensitive exact match; oldest team wins when several share a focus."""
        row = self.db.fetch_one(
            f"""
            SELECT {_TEAM_COLUMNS} FROM teams
            WHERE lower(focus_area) = lower(:focus_area)
            ORDER BY created_at ASC NULLS LAST, id ASC
            LIMIT 1
            """,
            {"focus_area": focus_area},
        )
        return _row_to_team(row) if row else None

    def find_skill_by_name(self, skill_name: str) -> Optional[Skill]:
        row = self.db.fetch_one(
            """
            SELECT id, skill_name FROM skills
            WHERE lower(skill_name) = lower(:skill_name)
            ORDER BY id ASC
            LIMIT 1
            """,
            {"skill_name": skill_name},
        )
        return _row_to_skill(row) if row else None

    def list_team_members(self, team_id: str) -> List[str]:
        rows = self.db.fetch_all(
            """
            SELECT DISTINCT user_id FROM team_members
            WHERE team_id = :team_id
            ORDER BY user_id ASC
            """,
            {"team_id": team_id},
        )
        return [str(row["user_id"]) for row in rows]

    def list_skilled_users(self, skill_id: str, candidates: Iterable[str]) -> Set[str]:
        user_ids = list(candidates)
        if not user_ids:
            return set()
        rows = self.db.fetch_all(
            _SKILLED_USERS, {"skill_id": skill_id, "user_ids": user_ids}
        )
        return {str(row["user_id"]) for row in rows}

    def get_team_coverage(self, team_id: str) -> Optional[CoverageWindow]:
        team = self._get_team(team_id)
        return team.coverage if team else None

    # ---- Administration ----

    def list_teams(self) -> List[Team]:
        rows = self.db.fetch_all(
            f"SELECT {_TEAM_COLUMNS} FROM teams ORDER BY created_at DESC", {}
        )
        return [_row_to_team(row) for row in rows]

    def create_team(self, request: TeamCreateRequest) -> Team:
        row = self.db.execute_returning(
            f"""
            INSERT INTO teams (name, focus_area, coverage_start_time_utc, coverage_end_time_utc)
            VALUES (:name, :focus_area, :coverage_start, :coverage_end)
            RETURNING {_TEAM_COLUMNS}
            """,
            {
                "name": request.name,
                "focus_area": request.focus_area,
                "coverage_start": request.coverage_start_time_utc,
                "coverage_end": request.coverage_end_time_utc,
            },
        )
        return _row_to_team(row)

    def delete_team(self, team_id: str) -> bool:
        return self.db.execute(
            "DELETE FROM teams WHERE id = :team_id", {"team_id": team_id}
        ) > 0

    def add_team_member(self, team_id: str, user_id: str) -> None:
        self.db.execute(
            """
            INSERT INTO team_members (team_id, user_id)
            VALUES (:team_id, :user_id)
            ON CONFLICT DO NOTHING
            """,
            {"team_id": team_id, "user_id": user_id},
        )

    def remove_team_member(self, team_id: str, user_id: str) -> bool:
        return self.db.execute(
            "DELETE FROM team_members WHERE team_id = :team_id AND user_id = :user_id",
            {"team_id": team_id, "user_id": user_id},
        ) > 0

    def list_skills(self) -> List[Skill]:
        rows = self.db.fetch_all("SELECT id, skill_name FROM skills ORDER BY skill_name", {})
        return [_row_to_skill(row) for row in rows]

    def create_skill(self, skill_name: str) -> Skill:
        row = self.db.execute_returning(
            "INSERT INTO skills (skill_name) VALUES (:skill_name) RETURNING id, skill_name",
            {"skill_name": skill_name},
        )
        return _row_to_skill(row)

    def add_employee_skill(self, user_id: str, skill_id: str) -> None:
        self.db.execute(
            """
            INSERT INTO employee_skills (user_id, skill_id)
            VALUES (:user_id, :skill_id)
            ON CONFLICT DO NOTHING
            """,
            {"user_id": user_id, "skill_id": skill_id},
        )

    def remove_employee_skill(self, user_id: str, skill_id: str) -> bool:
        return self.db.execute(
            "DELETE FROM employee_skills WHERE user_id = :user_id AND skill_id = :skill_id",
            {"user_id": user_id, "skill_id": skill_id},
        ) > 0

    def _get_team(self, team_id: str) -> Optional[Team]:
        row = self.db.fetch_one(
            f"SELECT {_TEAM_COLUMNS} FROM teams WHERE id = :team_id",
            {"team_id": team_id},
        )
        return _row_to_team(row) if row else None


def _row_to_team(row: dict) -> Team:
    return Team(
        id=str(row["id"]),
        name=row["name"],
        focus_area=row.get("focus_area") or "general",
        coverage_start_time_utc=row.get("coverage_start_time_utc"),
        coverage_end_time_utc=row.get("coverage_end_time_utc"),
        created_at=row.get("created_at"),
    )


def _row_to_skill(row: dict) -> Skill:
    return Skill(id=str(row["id"]), skill_name=row["skill_name"])
