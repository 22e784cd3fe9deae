"""Serialization bundle grouping every persisted collection."""

from pydantic import BaseModel, Field

from taskorbit.models.project import Project
from taskorbit.models.task import Task
from taskorbit.models.user import User


class DataBundle(BaseModel):
    """All entities plus the current user, as written by export and read by import."""

    tasks: list[Task] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
    current_user: User
