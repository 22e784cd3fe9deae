"""
MCP Server for TaskOrbit.

TaskOrbit is a personal and team task manager with budgets, projects, roles
and light gamification. This package holds the domain models, the query and
analytics engines, the persistent data store, and the MCP tools that expose
them.
"""

# Re-export enums
from taskorbit.enums import Permission, Priority, ProjectStatus, ResponseFormat, TaskSortKey, UserRole

# Re-export errors
from taskorbit.errors import InvalidArgumentError, NotFoundError

# Re-export models
from taskorbit.models import (
    AddCommentInput,
    AddProjectInput,
    AddTaskInput,
    AddUserInput,
    CompleteTaskInput,
    DataBundle,
    DeleteProjectInput,
    DeleteTaskInput,
    DeleteUserInput,
    ExportInput,
    FinancialSummaryInput,
    FinancialSummarySnapshot,
    GetTaskInput,
    ImportInput,
    ListProjectsInput,
    ListTasksInput,
    ListUsersInput,
    ProductivityInput,
    Project,
    ProjectAnalyticsInput,
    ProjectAnalyticsSnapshot,
    ProjectCriteria,
    ProjectMemberInput,
    Task,
    TaskComment,
    TaskCriteria,
    TeamProductivityInput,
    TeamProductivitySnapshot,
    UpdateTaskInput,
    User,
    UserCriteria,
    UserPreferences,
    UserProductivitySnapshot,
)

# Re-export the store and its backends
from taskorbit.storage import JsonDirectoryBlobStore, MemoryBlobStore
from taskorbit.store import DataStore, StoreEvent

# Re-export MCP server instance
from taskorbit.server import mcp

# Re-export tools
from taskorbit.tools import (
    taskorbit_add_comment,
    taskorbit_add_project,
    taskorbit_add_task,
    taskorbit_add_user,
    taskorbit_complete_task,
    taskorbit_delete_project,
    taskorbit_delete_task,
    taskorbit_delete_user,
    taskorbit_export,
    taskorbit_financial_summary,
    taskorbit_get_task,
    taskorbit_import,
    taskorbit_list_projects,
    taskorbit_list_tasks,
    taskorbit_list_users,
    taskorbit_productivity,
    taskorbit_project_analytics,
    taskorbit_project_members,
    taskorbit_team_productivity,
    taskorbit_update_task,
)

# Re-export formatters (private, used by tests)
from taskorbit.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)

__all__ = [
    # Enums
    "Permission",
    "Priority",
    "ProjectStatus",
    "ResponseFormat",
    "TaskSortKey",
    "UserRole",
    # Errors
    "InvalidArgumentError",
    "NotFoundError",
    # Entities and snapshots
    "Task",
    "TaskComment",
    "Project",
    "User",
    "UserPreferences",
    "DataBundle",
    "TaskCriteria",
    "ProjectCriteria",
    "UserCriteria",
    "ProjectAnalyticsSnapshot",
    "UserProductivitySnapshot",
    "FinancialSummarySnapshot",
    "TeamProductivitySnapshot",
    # Input models
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
    # Store
    "DataStore",
    "StoreEvent",
    "MemoryBlobStore",
    "JsonDirectoryBlobStore",
    # Utility functions
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    # Tools
    "taskorbit_list_tasks",
    "taskorbit_get_task",
    "taskorbit_add_task",
    "taskorbit_update_task",
    "taskorbit_complete_task",
    "taskorbit_delete_task",
    "taskorbit_add_comment",
    "taskorbit_list_projects",
    "taskorbit_add_project",
    "taskorbit_delete_project",
    "taskorbit_project_members",
    "taskorbit_list_users",
    "taskorbit_add_user",
    "taskorbit_delete_user",
    "taskorbit_export",
    "taskorbit_import",
    "taskorbit_project_analytics",
    "taskorbit_productivity",
    "taskorbit_financial_summary",
    "taskorbit_team_productivity",
    # MCP server instance
    "mcp",
]
