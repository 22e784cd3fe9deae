"""Filter and sort criteria accepted by the query engine."""

from pydantic import BaseModel, ConfigDict, Field

from taskorbit.enums import Priority, TaskSortKey


class TaskCriteria(BaseModel):
    """Filter and sort parameters for a task list."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    search: str = Field(default="", description="Case-insensitive text matched against title, description and tags")
    priority: Priority | None = Field(default=None, description="Only tasks with exactly this priority")
    include_completed: bool = Field(default=True, description="Keep completed tasks in the result")
    project_id: str | None = Field(default=None, description="Only tasks belonging to this project")
    sort_by: TaskSortKey | None = Field(default=None, description="Sort order; None keeps insertion order")


class ProjectCriteria(BaseModel):
    """Filter parameters for a project list."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    search: str = Field(default="", description="Case-insensitive text matched against name and description")


class UserCriteria(BaseModel):
    """Filter parameters for a user list."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    search: str = Field(default="", description="Case-insensitive text matched against name and email")
