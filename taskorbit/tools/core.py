"""Core MCP tool definitions for TaskOrbit: tasks, projects, team and backups."""

import json

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from taskorbit.analytics import project_progress
from taskorbit.context import context_from_request
from taskorbit.enums import Permission, ResponseFormat
from taskorbit.errors import InvalidArgumentError, NotFoundError
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
    GetTaskInput,
    ImportInput,
    ListProjectsInput,
    ListTasksInput,
    ListUsersInput,
    ProjectMemberInput,
    UpdateTaskInput,
)
from taskorbit.models.task import Task
from taskorbit.permissions import can_edit_task, can_invite_users, can_manage_project, has_permission
from taskorbit.query import query_projects, query_tasks, query_users
from taskorbit.server import mcp
from taskorbit.utils.formatters import (
    _format_projects_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _format_users_markdown,
)


def _error(message: str, tip: str) -> str:
    return f"Error: {message}\nTip: {tip}"


def _not_found(e: NotFoundError) -> str:
    list_tool = {
        "Task": "taskorbit_list_tasks",
        "Project": "taskorbit_list_projects",
        "User": "taskorbit_list_users",
    }.get(e.kind, "the list tools")
    return _error(f"{e}.", f"Use {list_tool} to find valid IDs.")


def _invalid(e: ValidationError | InvalidArgumentError) -> str:
    return _error(f"Invalid input - {e}", "Check the field values and try again.")


def _denied(action: str) -> str:
    return _error(f"You do not have permission to {action}.", "Ask a project owner or an admin.")


# ============================================================================
# Tasks
# ============================================================================


@mcp.tool(
    name="taskorbit_list_tasks",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_list_tasks(params: ListTasksInput, ctx: Context) -> str:
    """
    Search, filter and sort tasks.

    USE THIS WHEN:
    - Looking for tasks by text, priority or project
    - Reviewing what is still open (include_completed=False)
    - Finding task IDs for other tools

    DO NOT USE WHEN:
    - You already have a task ID → use taskorbit_get_task instead

    SORT ORDERS:
    - due_date: dated tasks earliest first, then undated tasks newest first
    - priority: urgent, high, medium, low
    - title: alphabetical, case-insensitive
    - created: newest first
    - budget: largest first, tasks without a budget last

    Args:
        params: ListTasksInput containing filters, sort order, limit and response_format

    Returns:
        Formatted list of tasks (markdown, concise or JSON)
    """
    store = context_from_request(ctx).store
    criteria = TaskCriteria(
        search=params.search,
        priority=params.priority,
        include_completed=params.include_completed,
        project_id=params.project_id,
        sort_by=params.sort_by,
    )
    try:
        tasks = query_tasks(store.list_tasks(), criteria)
    except InvalidArgumentError as e:
        return _invalid(e)

    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    title = "Tasks"
    if params.search:
        title = f"Tasks matching '{params.search}'"

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, f"search:{params.search}" if params.search else None)

    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="taskorbit_get_task",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_get_task(params: GetTaskInput, ctx: Context) -> str:
    """
    Retrieve full details for a single task, including its comments.

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        Detailed task information (markdown, concise or JSON)
    """
    store = context_from_request(ctx).store
    try:
        task = store.get_task(params.task_id)
    except NotFoundError as e:
        return _not_found(e)

    if params.response_format == ResponseFormat.JSON:
        return task.model_dump_json(indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)
    return _format_task_markdown(task)


@mcp.tool(
    name="taskorbit_add_task",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskorbit_add_task(params: AddTaskInput, ctx: Context) -> str:
    """
    Create a new task. Earns the current user 10 coins.

    USE THIS WHEN:
    - Adding a new piece of work to track
    - Creating a task inside a project, with a budget or due date

    DO NOT USE WHEN:
    - Changing an existing task → use taskorbit_update_task instead
    - Adding a note to a task → use taskorbit_add_comment instead

    Args:
        params: AddTaskInput containing the title and optional attributes

    Returns:
        Confirmation message with the created task ID

    Examples:
        - Simple task: params with title="Draft proposal"
        - Budgeted task: params with title="Ad campaign", budget=500, project_id="..."
    """
    store = context_from_request(ctx).store
    try:
        task = store.create_task(
            title=params.title,
            description=params.description,
            priority=params.priority,
            due_date=params.due_date,
            budget=params.budget,
            actual_cost=params.actual_cost,
            project_id=params.project_id,
            assigned_user_id=params.assigned_user_id,
            tags=params.tags,
        )
    except NotFoundError as e:
        return _not_found(e)
    except ValidationError as e:
        return _invalid(e)
    return f"Task created successfully.\n{_format_task_concise(task)}\nID: {task.id}"


@mcp.tool(
    name="taskorbit_update_task",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_update_task(params: UpdateTaskInput, ctx: Context) -> str:
    """
    Change attributes of an existing task.

    Only the fields you pass are changed. Use clear_due_date or clear_budget to
    remove those values. Completion is handled by taskorbit_complete_task.

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message with the updated task
    """
    store = context_from_request(ctx).store
    try:
        task = store.get_task(params.task_id)
        project = store.get_project(task.project_id) if task.project_id else None
    except NotFoundError as e:
        return _not_found(e)

    if not can_edit_task(store.get_current_user(), task, project):
        return _denied("edit this task")

    update = params.model_dump(
        include={"title", "description", "priority", "due_date", "budget", "actual_cost", "project_id",
                 "assigned_user_id"},
        exclude_none=True,
    )
    if params.clear_due_date:
        update["due_date"] = None
    if params.clear_budget:
        update["budget"] = None

    if params.add_tags or params.remove_tags:
        removed = set(params.remove_tags or [])
        tags = [*task.tags, *(params.add_tags or [])]
        update["tags"] = [t for t in tags if t not in removed]

    if not update:
        return _error("No changes given.", "Pass at least one field to change.")

    try:
        changed = Task.model_validate({**task.model_dump(), **update})
        if changed.assigned_user_id is not None:
            store.get_user(changed.assigned_user_id)
        updated = store.update_task(changed)
    except NotFoundError as e:
        return _not_found(e)
    except ValidationError as e:
        return _invalid(e)
    return f"Task updated successfully.\n{_format_task_concise(updated)}"


@mcp.tool(
    name="taskorbit_complete_task",
    annotations=ToolAnnotations(
        title="Complete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_complete_task(params: CompleteTaskInput, ctx: Context) -> str:
    """
    Mark a task as completed, or reopen it with completed=False.

    Completing an open task earns the current user 25 coins. Completing an
    already-completed task changes nothing.

    Args:
        params: CompleteTaskInput containing task_id and completed flag

    Returns:
        Confirmation message
    """
    store = context_from_request(ctx).store
    try:
        task = store.set_task_completion(params.task_id, params.completed)
    except NotFoundError as e:
        return _not_found(e)

    if task.is_completed:
        return f"Task '{task.title}' marked as completed."
    return f"Task '{task.title}' reopened."


@mcp.tool(
    name="taskorbit_delete_task",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_delete_task(params: DeleteTaskInput, ctx: Context) -> str:
    """Permanently delete a task."""
    store = context_from_request(ctx).store
    try:
        task = store.get_task(params.task_id)
        project = store.get_project(task.project_id) if task.project_id else None
    except NotFoundError as e:
        return _not_found(e)

    if not can_edit_task(store.get_current_user(), task, project):
        return _denied("delete this task")

    store.delete_task(task.id)
    return f"Task '{task.title}' deleted."


@mcp.tool(
    name="taskorbit_add_comment",
    annotations=ToolAnnotations(
        title="Comment on Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskorbit_add_comment(params: AddCommentInput, ctx: Context) -> str:
    """
    Add a comment to a task as the current user. Earns 5 coins.

    Args:
        params: AddCommentInput containing task_id and text

    Returns:
        Confirmation message
    """
    store = context_from_request(ctx).store
    if not has_permission(store.get_current_user(), Permission.COMMENT):
        return _denied("comment")
    try:
        comment = store.add_comment(params.task_id, params.text)
    except NotFoundError as e:
        return _not_found(e)
    return f"Comment added to task {params.task_id} by {comment.author_name}."


# ============================================================================
# Projects
# ============================================================================


@mcp.tool(
    name="taskorbit_list_projects",
    annotations=ToolAnnotations(
        title="List Projects",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_list_projects(params: ListProjectsInput, ctx: Context) -> str:
    """
    List projects with their status, team size, budget and progress.

    Args:
        params: ListProjectsInput containing an optional search term

    Returns:
        Formatted list of projects
    """
    store = context_from_request(ctx).store
    projects = query_projects(store.list_projects(), ProjectCriteria(search=params.search))
    tasks = store.list_tasks()
    progress = {p.id: project_progress(p, tasks) for p in projects}

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            [{**p.model_dump(mode="json"), "progress": progress[p.id]} for p in projects],
            indent=2,
        )
    if params.response_format == ResponseFormat.CONCISE:
        if not projects:
            return "0 projects"
        lines = [f"{len(projects)} project(s)"]
        lines.extend(f"#{p.id[:8]}: {p.name} ({p.status.value}, {progress[p.id] * 100:.0f}%)" for p in projects)
        return "\n".join(lines)
    return _format_projects_markdown(projects, progress)


@mcp.tool(
    name="taskorbit_add_project",
    annotations=ToolAnnotations(
        title="Add Project",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskorbit_add_project(params: AddProjectInput, ctx: Context) -> str:
    """
    Create a project owned by the current user. Earns 50 coins.

    Args:
        params: AddProjectInput containing name and optional attributes

    Returns:
        Confirmation message with the project ID
    """
    store = context_from_request(ctx).store
    if not has_permission(store.get_current_user(), Permission.CREATE_PROJECT):
        return _denied("create projects")
    try:
        project = store.create_project(
            name=params.name,
            description=params.description,
            budget=params.budget,
            status=params.status,
            end_date=params.end_date,
            member_ids=params.member_ids,
            color=params.color,
        )
    except NotFoundError as e:
        return _not_found(e)
    except ValidationError as e:
        return _invalid(e)
    return f"Project '{project.name}' created.\nID: {project.id}"


@mcp.tool(
    name="taskorbit_delete_project",
    annotations=ToolAnnotations(
        title="Delete Project",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_delete_project(params: DeleteProjectInput, ctx: Context) -> str:
    """
    Delete a project and every task that belongs to it.

    Only the owner, an admin, or a project manager on the team may do this.
    """
    store = context_from_request(ctx).store
    try:
        project = store.get_project(params.project_id)
    except NotFoundError as e:
        return _not_found(e)

    if not can_manage_project(store.get_current_user(), project):
        return _denied("delete this project")

    task_count = len(store.get_tasks_for_project(project.id))
    store.delete_project(project.id)
    return f"Project '{project.name}' deleted along with {task_count} task(s)."


@mcp.tool(
    name="taskorbit_project_members",
    annotations=ToolAnnotations(
        title="Manage Project Team",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_project_members(params: ProjectMemberInput, ctx: Context) -> str:
    """
    Add, remove or invite members of a project team.

    ACTIONS:
    - add: put an existing user (user_id) on the team
    - remove: take a user (user_id) off the team; the owner cannot be removed
    - invite: add a user by email, creating them with the given role if new

    Args:
        params: ProjectMemberInput containing project_id, action and target

    Returns:
        Confirmation message with the team size
    """
    store = context_from_request(ctx).store
    try:
        project = store.get_project(params.project_id)
    except NotFoundError as e:
        return _not_found(e)

    if not can_invite_users(store.get_current_user(), project):
        return _denied("manage this team")

    try:
        if params.action == "invite":
            user = store.invite_user(params.email, project.id, params.role)
            project = store.get_project(project.id)
            return f"Invited {user.email} to '{project.name}'. Team size: {len(project.all_member_ids)}."
        if params.action == "remove":
            if params.user_id == project.owner_id:
                return _error("The project owner cannot be removed.", "Delete the project instead.")
            project = store.remove_project_member(project.id, params.user_id)
            return f"Removed {params.user_id} from '{project.name}'. Team size: {len(project.all_member_ids)}."
        project = store.add_project_member(project.id, params.user_id)
    except NotFoundError as e:
        return _not_found(e)
    except ValidationError as e:
        return _invalid(e)
    return f"Added {params.user_id} to '{project.name}'. Team size: {len(project.all_member_ids)}."


# ============================================================================
# Team
# ============================================================================


@mcp.tool(
    name="taskorbit_list_users",
    annotations=ToolAnnotations(
        title="List Users",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_list_users(params: ListUsersInput, ctx: Context) -> str:
    """List the current user followed by every team member."""
    store = context_from_request(ctx).store
    current = store.get_current_user()
    users = query_users([current, *store.list_users()], UserCriteria(search=params.search))

    if params.response_format == ResponseFormat.JSON:
        return json.dumps([u.model_dump(mode="json") for u in users], indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        lines = [f"{len(users)} user(s)"]
        lines.extend(f"#{u.id[:8]}: {u.display_name} ({u.role.value})" for u in users)
        return "\n".join(lines)
    return _format_users_markdown(users, current.id)


@mcp.tool(
    name="taskorbit_add_user",
    annotations=ToolAnnotations(
        title="Add User",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskorbit_add_user(params: AddUserInput, ctx: Context) -> str:
    """Add a team member. Requires the manage-team permission."""
    store = context_from_request(ctx).store
    if not has_permission(store.get_current_user(), Permission.MANAGE_TEAM):
        return _denied("manage the team")
    try:
        user = store.create_user(name=params.name, email=params.email, role=params.role)
    except ValidationError as e:
        return _invalid(e)
    return f"User '{user.display_name}' added.\nID: {user.id}"


@mcp.tool(
    name="taskorbit_delete_user",
    annotations=ToolAnnotations(
        title="Delete User",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_delete_user(params: DeleteUserInput, ctx: Context) -> str:
    """
    Remove a team member.

    Their tasks become unassigned and they are dropped from every project
    team. The current user cannot be removed.
    """
    store = context_from_request(ctx).store
    current = store.get_current_user()
    if not has_permission(current, Permission.MANAGE_TEAM):
        return _denied("manage the team")
    if params.user_id == current.id:
        return _error("The current user cannot be removed.", "Pick another user ID from taskorbit_list_users.")
    try:
        user = store.get_user(params.user_id)
        store.delete_user(user.id)
    except NotFoundError as e:
        return _not_found(e)
    return f"User '{user.display_name}' removed."


# ============================================================================
# Backup
# ============================================================================


@mcp.tool(
    name="taskorbit_export",
    annotations=ToolAnnotations(
        title="Export Data",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_export(params: ExportInput, ctx: Context) -> str:
    """
    Export every task, project and user plus the current user as one JSON document.

    The output can be passed unchanged to taskorbit_import.
    """
    return context_from_request(ctx).store.export_data()


@mcp.tool(
    name="taskorbit_import",
    annotations=ToolAnnotations(
        title="Import Data",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_import(params: ImportInput, ctx: Context) -> str:
    """
    Replace all data with a document produced by taskorbit_export.

    A payload that cannot be decoded is rejected and nothing changes.
    """
    store = context_from_request(ctx).store
    if not store.import_data(params.payload):
        return _error("Could not decode the import payload.", "Pass the unmodified output of taskorbit_export.")
    return (
        f"Import complete: {len(store.list_tasks())} task(s), {len(store.list_projects())} project(s), "
        f"{len(store.list_users())} user(s)."
    )
