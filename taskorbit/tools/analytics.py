"""Analytics MCP tools: project metrics, productivity and finances."""

import json

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations

from taskorbit.analytics import (
    compute_all_project_analytics,
    compute_financial_summary,
    compute_project_analytics,
    compute_team_productivity,
    compute_user_productivity,
)
from taskorbit.context import context_from_request
from taskorbit.enums import Permission, ResponseFormat
from taskorbit.errors import NotFoundError
from taskorbit.models.inputs import (
    FinancialSummaryInput,
    ProductivityInput,
    ProjectAnalyticsInput,
    TeamProductivityInput,
)
from taskorbit.permissions import has_permission
from taskorbit.server import mcp
from taskorbit.tools.core import _denied, _not_found
from taskorbit.utils.formatters import (
    _format_financial_markdown,
    _format_productivity_markdown,
    _format_project_analytics_markdown,
    _format_team_markdown,
)


@mcp.tool(
    name="taskorbit_project_analytics",
    annotations=ToolAnnotations(
        title="Project Analytics",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_project_analytics(params: ProjectAnalyticsInput, ctx: Context) -> str:
    """
    Progress, budget and completion trend for one project or for all of them.

    Budget figures here are summed over the project's tasks only. For totals
    that include project-level budgets use taskorbit_financial_summary.

    Args:
        params: ProjectAnalyticsInput with an optional project_id

    Returns:
        One analytics section per project (markdown or JSON)
    """
    store = context_from_request(ctx).store
    if not has_permission(store.get_current_user(), Permission.VIEW_ANALYTICS):
        return _denied("view analytics")

    tasks = store.list_tasks()
    if params.project_id:
        try:
            project = store.get_project(params.project_id)
        except NotFoundError as e:
            return _not_found(e)
        snapshots = [compute_project_analytics(project, tasks, store.now())]
    else:
        snapshots = compute_all_project_analytics(store.list_projects(), tasks, store.now())

    if params.response_format == ResponseFormat.JSON:
        return json.dumps([s.model_dump(mode="json") for s in snapshots], indent=2)
    if not snapshots:
        return "# Project Analytics\n\nNo projects found."
    return "\n\n".join(["# Project Analytics", *(_format_project_analytics_markdown(s) for s in snapshots)])


@mcp.tool(
    name="taskorbit_productivity",
    annotations=ToolAnnotations(
        title="User Productivity",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_productivity(params: ProductivityInput, ctx: Context) -> str:
    """
    Completion counts, streak, coins and score for a user.

    Defaults to the current user. Week and month counts follow the calendar
    (ISO week, calendar month) in UTC.
    """
    store = context_from_request(ctx).store
    try:
        user = store.get_user(params.user_id) if params.user_id else store.get_current_user()
    except NotFoundError as e:
        return _not_found(e)

    snapshot = compute_user_productivity(user, store.get_tasks_for_user(user.id), store.now())
    if params.response_format == ResponseFormat.JSON:
        return snapshot.model_dump_json(indent=2)
    return _format_productivity_markdown(snapshot, user)


@mcp.tool(
    name="taskorbit_financial_summary",
    annotations=ToolAnnotations(
        title="Financial Summary",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_financial_summary(params: FinancialSummaryInput, ctx: Context) -> str:
    """Budget, spend, profit and six months of spending across all tasks and projects."""
    store = context_from_request(ctx).store
    if not has_permission(store.get_current_user(), Permission.VIEW_ANALYTICS):
        return _denied("view analytics")

    snapshot = compute_financial_summary(store.list_tasks(), store.list_projects(), store.now())
    if params.response_format == ResponseFormat.JSON:
        return snapshot.model_dump_json(indent=2)
    return _format_financial_markdown(snapshot)


@mcp.tool(
    name="taskorbit_team_productivity",
    annotations=ToolAnnotations(
        title="Team Productivity",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskorbit_team_productivity(params: TeamProductivityInput, ctx: Context) -> str:
    """Per-member completion rate and average task cost for a project's team."""
    store = context_from_request(ctx).store
    try:
        project = store.get_project(params.project_id)
    except NotFoundError as e:
        return _not_found(e)

    users = [store.get_current_user(), *store.list_users()]
    snapshot = compute_team_productivity(project, store.list_tasks(), users)
    if params.response_format == ResponseFormat.JSON:
        return snapshot.model_dump_json(indent=2)
    return _format_team_markdown(snapshot)
