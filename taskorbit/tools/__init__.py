"""MCP tool definitions for TaskOrbit."""

# Import all tools to register them with the MCP server
from taskorbit.tools.analytics import (
    taskorbit_financial_summary,
    taskorbit_productivity,
    taskorbit_project_analytics,
    taskorbit_team_productivity,
)
from taskorbit.tools.core import (
    taskorbit_add_comment,
    taskorbit_add_project,
    taskorbit_add_task,
    taskorbit_add_user,
    taskorbit_complete_task,
    taskorbit_delete_project,
    taskorbit_delete_task,
    taskorbit_delete_user,
    taskorbit_export,
    taskorbit_get_task,
    taskorbit_import,
    taskorbit_list_projects,
    taskorbit_list_tasks,
    taskorbit_list_users,
    taskorbit_project_members,
    taskorbit_update_task,
)

__all__ = [
    # Task tools
    "taskorbit_list_tasks",
    "taskorbit_get_task",
    "taskorbit_add_task",
    "taskorbit_update_task",
    "taskorbit_complete_task",
    "taskorbit_delete_task",
    "taskorbit_add_comment",
    # Project and team tools
    "taskorbit_list_projects",
    "taskorbit_add_project",
    "taskorbit_delete_project",
    "taskorbit_project_members",
    "taskorbit_list_users",
    "taskorbit_add_user",
    "taskorbit_delete_user",
    # Backup tools
    "taskorbit_export",
    "taskorbit_import",
    # Analytics tools
    "taskorbit_project_analytics",
    "taskorbit_productivity",
    "taskorbit_financial_summary",
    "taskorbit_team_productivity",
]
