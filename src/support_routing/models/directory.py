"""Team, skill and coverage models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from support_routing.utils.validators import ensure_hour

DEFAULT_COVERAGE_START = 0
DEFAULT_COVERAGE_END = 23


class CoverageWindow(BaseModel):
    """UTC hours a team is nominally staffed, as a half-open interval [start, end)."""

    start_hour: int = DEFAULT_COVERAGE_START
    end_hour: int = DEFAULT_COVERAGE_END

    def contains(self, hour: int) -> bool:
        # Windows that wrap past midnight (end <= start) are never satisfied.
        return self.start_hour <= hour < self.end_hour


class Team(BaseModel):
    """Support team; focus_area drives rule-based routing."""

    id: str
    name: str
    focus_area: str = "general"
    coverage_start_time_utc: Optional[int] = None
    coverage_end_time_utc: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def coverage(self) -> CoverageWindow:
        return CoverageWindow(
            start_hour=(
                DEFAULT_COVERAGE_START
                if self.coverage_start_time_utc is None
                else self.coverage_start_time_utc
            ),
            end_hour=(
                DEFAULT_COVERAGE_END
                if self.coverage_end_time_utc is None
                else self.coverage_end_time_utc
            ),
        )


class Skill(BaseModel):
    id: str
    skill_name: str


class TeamCreateRequest(BaseModel):
    """Admin payload for creating a team."""

    name: str
    focus_area: str = "general"
    coverage_start_time_utc: int = DEFAULT_COVERAGE_START
    coverage_end_time_utc: int = DEFAULT_COVERAGE_END

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if len(cleaned) < 2:
            raise ValueError("Team name too short")
        return cleaned

    @field_validator("focus_area", mode="before")
    @classmethod
    def default_focus_area(cls, value):
        cleaned = (value or "").strip() if isinstance(value, str) else value
        return cleaned or "general"

    @field_validator("coverage_start_time_utc")
    @classmethod
    def validate_start(cls, value: int) -> int:
        return ensure_hour(value, "coverage_start_time_utc")

    @field_validator("coverage_end_time_utc")
    @classmethod
    def validate_end(cls, value: int) -> int:
        return ensure_hour(value, "coverage_end_time_utc")


class TeamMemberRequest(BaseModel):
    team_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class SkillCreateRequest(BaseModel):
    skill_name: str

    @field_validator("skill_name")
    @classmethod
    def validate_skill_name(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("Skill name is required")
        return cleaned


class EmployeeSkillRequest(BaseModel):
    user_id: str = Field(min_length=1)
    skill_id: str = Field(min_length=1)
