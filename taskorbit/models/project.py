"""Project model for TaskOrbit."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskorbit.enums import ProjectStatus
from taskorbit.utils.dates import as_utc, new_id, utcnow

DEFAULT_PROJECT_COLOR = "#FF3C00"


class Project(BaseModel):
    """A project groups tasks under a budget and a team."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    budget: float | None = Field(default=None, ge=0)
    actual_cost: float = Field(default=0.0, ge=0)
    start_date: datetime = Field(default_factory=utcnow)
    end_date: datetime | None = None
    owner_id: str
    member_ids: list[str] = Field(default_factory=list)
    task_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    color: str = Field(default=DEFAULT_PROJECT_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("start_date", "end_date", "created_at")
    @classmethod
    def _normalize_timestamps(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @property
    def total_budget(self) -> float:
        return self.budget or 0.0

    @property
    def is_over_budget(self) -> bool:
        return self.budget is not None and self.actual_cost > self.budget

    @property
    def budget_utilization(self) -> float:
        if not self.budget or self.budget <= 0:
            return 0.0
        return self.actual_cost / self.budget * 100

    @property
    def profit_margin(self) -> float:
        if not self.budget or self.budget <= 0:
            return 0.0
        return (self.budget - self.actual_cost) / self.budget * 100

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.COMPLETED

    @property
    def all_member_ids(self) -> list[str]:
        """Owner first, then members; the owner always counts as a member."""
        ids = [self.owner_id]
        ids.extend(m for m in self.member_ids if m not in ids)
        return ids

    def has_member(self, user_id: str) -> bool:
        return user_id == self.owner_id or user_id in self.member_ids
