"""User and preference models for TaskOrbit."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskorbit.enums import Permission, ProjectView, UserRole
from taskorbit.permissions import permissions_for
from taskorbit.utils.dates import as_utc, new_id, utcnow


class UserPreferences(BaseModel):
    """Per-user settings bundle."""

    enable_notifications: bool = True
    enable_dark_mode: bool = False
    default_project_view: ProjectView = ProjectView.LIST
    auto_assign_tasks: bool = False
    show_budget_warnings: bool = True
    preferred_currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    working_hours_start: int = Field(default=9, ge=0, le=23)
    working_hours_end: int = Field(default=17, ge=0, le=23)

    @field_validator("preferred_currency", mode="before")
    @classmethod
    def _upper_currency(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v


class User(BaseModel):
    """A team member with gamification counters."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    profile_image_url: str | None = None
    role: UserRole = UserRole.MEMBER
    coins_earned: int = Field(default=0, ge=0)
    tasks_completed: int = Field(default=0, ge=0)
    projects_owned: int = Field(default=0, ge=0)
    joined_at: datetime = Field(default_factory=utcnow)
    is_active: bool = True
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    @field_validator("joined_at")
    @classmethod
    def _normalize_joined_at(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def initials(self) -> str:
        letters = [part[0] for part in self.name.split() if part]
        return "".join(letters[:2]).upper()

    @property
    def productivity_score(self) -> float:
        """Weighted composite: 10 per completed task, 1 per coin, 50 per owned project."""
        return float(self.tasks_completed * 10 + self.coins_earned + self.projects_owned * 50)

    @property
    def permissions(self) -> frozenset[Permission]:
        return permissions_for(self.role)
