"""Task and comment models for TaskOrbit."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskorbit.enums import Priority
from taskorbit.utils.dates import as_utc, new_id, utcnow


class TaskComment(BaseModel):
    """A comment left on a task, with the author's name denormalized."""

    id: str = Field(default_factory=new_id)
    text: str = Field(..., min_length=1)
    author_id: str
    author_name: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class Task(BaseModel):
    """
    A unit of work, optionally tied to a project and an assignee.

    ``completed_at`` is set exactly when ``is_completed`` is true. Use
    ``with_completion`` to flip the flag so both fields move together.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    is_completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    budget: float | None = Field(default=None, ge=0)
    actual_cost: float = Field(default=0.0, ge=0)
    project_id: str | None = None
    assigned_user_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None
    comments: list[TaskComment] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("due_date", "created_at", "completed_at")
    @classmethod
    def _normalize_timestamps(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @model_validator(mode="after")
    def _check_completion(self) -> Task:
        if self.is_completed != (self.completed_at is not None):
            raise ValueError("completed_at must be set if and only if is_completed is true")
        return self

    def with_completion(self, completed: bool, at: datetime | None = None) -> Task:
        """Return a copy marked complete (stamped with ``at``) or incomplete."""
        if completed:
            stamp = as_utc(at) if at is not None else utcnow()
            return self.model_copy(update={"is_completed": True, "completed_at": stamp})
        return self.model_copy(update={"is_completed": False, "completed_at": None})

    @property
    def is_over_budget(self) -> bool:
        return self.budget is not None and self.actual_cost > self.budget

    @property
    def budget_variance(self) -> float:
        if self.budget is None:
            return 0.0
        return self.actual_cost - self.budget

    @property
    def profit_margin(self) -> float:
        if not self.budget or self.budget <= 0:
            return 0.0
        return (self.budget - self.actual_cost) / self.budget * 100
