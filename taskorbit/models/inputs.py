"""Input models for TaskOrbit tools."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskorbit.enums import Priority, ProjectStatus, ResponseFormat, TaskSortKey, UserRole

# ============================================================================
# Task Tool Input Models
# ============================================================================


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    search: str = Field(default="", description="Text to look for in title, description or tags")
    priority: Priority | None = Field(default=None, description="Only tasks with this priority")
    include_completed: bool = Field(default=True, description="Include completed tasks")
    project_id: str | None = Field(default=None, description="Only tasks of this project")
    sort_by: TaskSortKey = Field(
        default=TaskSortKey.DUE_DATE,
        description="Sort order: due_date, priority, title, created or budget",
    )
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to retrieve", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (required)", min_length=1, max_length=500)
    description: str = Field(default="", description="Longer task description", max_length=5000)
    priority: Priority = Field(default=Priority.MEDIUM, description="low, medium, high or urgent")
    due_date: datetime | None = Field(default=None, description="Due date (ISO 8601)")
    budget: float | None = Field(default=None, description="Budget for the task", ge=0)
    actual_cost: float = Field(default=0.0, description="Cost spent so far", ge=0)
    project_id: str | None = Field(default=None, description="Project the task belongs to")
    assigned_user_id: str | None = Field(default=None, description="Assignee; defaults to the current user")
    tags: list[str] | None = Field(default=None, description="Free-text tags", max_length=20)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class UpdateTaskInput(BaseModel):
    """Input model for modifying a task. Fields left as None are unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to modify", min_length=1)
    title: str | None = Field(default=None, description="New title", min_length=1, max_length=500)
    description: str | None = Field(default=None, description="New description")
    priority: Priority | None = Field(default=None, description="New priority")
    due_date: datetime | None = Field(default=None, description="New due date")
    clear_due_date: bool = Field(default=False, description="Remove the due date")
    budget: float | None = Field(default=None, description="New budget", ge=0)
    clear_budget: bool = Field(default=False, description="Remove the budget")
    actual_cost: float | None = Field(default=None, description="New actual cost", ge=0)
    project_id: str | None = Field(default=None, description="Move the task to this project")
    assigned_user_id: str | None = Field(default=None, description="Reassign the task")
    add_tags: list[str] | None = Field(default=None, description="Tags to add")
    remove_tags: list[str] | None = Field(default=None, description="Tags to remove")

    @model_validator(mode="after")
    def validate_clears(self) -> "UpdateTaskInput":
        if self.clear_due_date and self.due_date is not None:
            raise ValueError("Cannot set and clear due_date at the same time")
        if self.clear_budget and self.budget is not None:
            raise ValueError("Cannot set and clear budget at the same time")
        return self


class CompleteTaskInput(BaseModel):
    """Input model for completing or reopening a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to complete", min_length=1)
    completed: bool = Field(default=True, description="False reopens a completed task")


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to delete", min_length=1)


class AddCommentInput(BaseModel):
    """Input model for commenting on a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to comment on", min_length=1)
    text: str = Field(..., description="Comment text", min_length=1, max_length=2000)


# ============================================================================
# Project and Team Input Models
# ============================================================================


class ListProjectsInput(BaseModel):
    """Input model for listing projects."""

    model_config = ConfigDict(str_strip_whitespace=True)

    search: str = Field(default="", description="Text to look for in name or description")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddProjectInput(BaseModel):
    """Input model for creating a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Project name", min_length=1, max_length=200)
    description: str = Field(default="", description="Project description")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE, description="Initial status")
    budget: float | None = Field(default=None, description="Project budget", ge=0)
    end_date: datetime | None = Field(default=None, description="Planned end date")
    color: str = Field(default="#FF3C00", description="Display color as #RRGGBB", pattern=r"^#[0-9A-Fa-f]{6}$")
    member_ids: list[str] | None = Field(default=None, description="Initial team members")


class DeleteProjectInput(BaseModel):
    """Input model for deleting a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID to delete (its tasks are deleted too)", min_length=1)


class ProjectMemberInput(BaseModel):
    """Input model for managing a project's team."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    action: Literal["add", "remove", "invite"] = Field(default="add", description="add, remove or invite")
    user_id: str | None = Field(default=None, description="User to add or remove")
    email: str | None = Field(default=None, description="Email to invite")
    role: UserRole = Field(default=UserRole.MEMBER, description="Role for newly invited users")

    @model_validator(mode="after")
    def validate_target(self) -> "ProjectMemberInput":
        if self.action == "invite" and not self.email:
            raise ValueError("email is required to invite")
        if self.action in ("add", "remove") and not self.user_id:
            raise ValueError(f"user_id is required to {self.action} a member")
        return self


class ListUsersInput(BaseModel):
    """Input model for listing users."""

    model_config = ConfigDict(str_strip_whitespace=True)

    search: str = Field(default="", description="Text to look for in name or email")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddUserInput(BaseModel):
    """Input model for adding a user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="", description="Display name")
    email: str = Field(..., description="Email address", min_length=3)
    role: UserRole = Field(default=UserRole.MEMBER, description="admin, project_manager, member or viewer")


class DeleteUserInput(BaseModel):
    """Input model for removing a user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(..., description="User ID to remove", min_length=1)


# ============================================================================
# Analytics Input Models
# ============================================================================


class ProjectAnalyticsInput(BaseModel):
    """Input model for per-project analytics."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str | None = Field(default=None, description="Project to analyse, or None for all projects")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ProductivityInput(BaseModel):
    """Input model for user productivity."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str | None = Field(default=None, description="User to analyse, or None for the current user")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class FinancialSummaryInput(BaseModel):
    """Input model for the financial summary."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class TeamProductivityInput(BaseModel):
    """Input model for team productivity on a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project whose team to analyse", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


# ============================================================================
# Backup Input Models
# ============================================================================


class ExportInput(BaseModel):
    """Input model for exporting all data."""

    model_config = ConfigDict(str_strip_whitespace=True)
    # No parameters needed - export covers every collection


class ImportInput(BaseModel):
    """Input model for importing a previously exported bundle."""

    payload: str = Field(..., description="JSON document produced by taskorbit_export", min_length=2)
