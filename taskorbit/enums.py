"""Enums for TaskOrbit."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # One line per item
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class Priority(str, Enum):
    """Task priority levels, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(str, Enum):
    """Team roles."""

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    MEMBER = "member"
    VIEWER = "viewer"


class Permission(str, Enum):
    """Capabilities granted by a role."""

    CREATE_PROJECT = "create_project"
    EDIT_PROJECT = "edit_project"
    DELETE_PROJECT = "delete_project"
    CREATE_TASK = "create_task"
    EDIT_OWN_TASKS = "edit_own_tasks"
    EDIT_ALL_TASKS = "edit_all_tasks"
    ASSIGN_TASKS = "assign_tasks"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_TEAM = "manage_team"
    COMMENT = "comment"
    VIEW_PROJECTS = "view_projects"


class ProjectView(str, Enum):
    """Preferred layout for project lists."""

    LIST = "list"
    GRID = "grid"
    KANBAN = "kanban"


class TaskSortKey(str, Enum):
    """Sort orders available to the task query."""

    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"
    CREATED = "created"
    BUDGET = "budget"


class StoreTopic(str, Enum):
    """Kinds of change notifications emitted by the data store."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    CURRENT_USER_UPDATED = "current_user_updated"
    COINS_AWARDED = "coins_awarded"
    DATA_RESET = "data_reset"
    DATA_IMPORTED = "data_imported"
