"""Pydantic models for TaskOrbit."""

from taskorbit.models.analytics import (
    CompletionTrendPoint,
    FinancialSummarySnapshot,
    MemberProductivity,
    MonthlySpending,
    ProjectAnalyticsSnapshot,
    TeamProductivitySnapshot,
    UserProductivitySnapshot,
)
from taskorbit.models.bundle import DataBundle
from taskorbit.models.criteria import ProjectCriteria, TaskCriteria, UserCriteria
from taskorbit.models.inputs import (
    AddCommentInput,
    AddProjectInput,
    AddTaskInput,
    AddUserInput,
    CompleteTaskInput,
    DeleteProjectInput,
    DeleteTaskInput,
    DeleteUserInput,
    ExportInput,
    FinancialSummaryInput,
    GetTaskInput,
    ImportInput,
    ListProjectsInput,
    ListTasksInput,
    ListUsersInput,
    ProductivityInput,
    ProjectAnalyticsInput,
    ProjectMemberInput,
    TeamProductivityInput,
    UpdateTaskInput,
)
from taskorbit.models.project import Project
from taskorbit.models.task import Task, TaskComment
from taskorbit.models.user import User, UserPreferences

__all__ = [
    # Entities
    "Task",
    "TaskComment",
    "Project",
    "User",
    "UserPreferences",
    "DataBundle",
    # Query criteria
    "TaskCriteria",
    "ProjectCriteria",
    "UserCriteria",
    # Analytics snapshots
    "CompletionTrendPoint",
    "MonthlySpending",
    "ProjectAnalyticsSnapshot",
    "UserProductivitySnapshot",
    "FinancialSummarySnapshot",
    "MemberProductivity",
    "TeamProductivitySnapshot",
    # Tool input models
    "ListTasksInput",
    "GetTaskInput",
    "AddTaskInput",
    "UpdateTaskInput",
    "CompleteTaskInput",
    "DeleteTaskInput",
    "AddCommentInput",
    "ListProjectsInput",
    "AddProjectInput",
    "DeleteProjectInput",
    "ProjectMemberInput",
    "ListUsersInput",
    "AddUserInput",
    "DeleteUserInput",
    "ProjectAnalyticsInput",
    "ProductivityInput",
    "FinancialSummaryInput",
    "TeamProductivityInput",
    "ExportInput",
    "ImportInput",
]
