"""Formatting utilities for tool output."""

from taskorbit.models.analytics import (
    FinancialSummarySnapshot,
    ProjectAnalyticsSnapshot,
    TeamProductivitySnapshot,
    UserProductivitySnapshot,
)
from taskorbit.models.project import Project
from taskorbit.models.task import Task
from taskorbit.models.user import User

_PRIORITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High", "urgent": "Urgent"}


def _money(amount: float | None) -> str:
    if amount is None:
        return "-"
    return f"${amount:,.2f}"


def _short_id(entity_id: str) -> str:
    return entity_id[:8]


def _format_task_concise(task: Task) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#1a2b3c4d: Title (high, due:2024-12-31, $450.00/$500.00)"
    """
    title = task.title[:50]

    meta = [task.priority.value]
    if task.is_completed:
        meta.append("done")
    if task.due_date:
        meta.append(f"due:{task.due_date.date().isoformat()}")
    if task.budget is not None:
        meta.append(f"{_money(task.actual_cost)}/{_money(task.budget)}")

    return f"#{_short_id(task.id)}: {title} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[Task], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | search:report
    #1a2b3c4d: Task one (high, due:2024-12-31)
    #5e6f7a8b: Task two (medium)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"
    return "\n".join([header, *(_format_task_concise(task) for task in tasks)])


def _format_task_markdown(task: Task) -> str:
    """Format a single task as markdown."""
    icon = "[x]" if task.is_completed else "[ ]"
    lines = [f"### {icon} {task.title}", f"`{task.id}`"]

    details = [f"**Priority**: {_PRIORITY_LABELS.get(task.priority.value, task.priority.value)}"]
    if task.due_date:
        details.append(f"**Due**: {task.due_date.date().isoformat()}")
    if task.project_id:
        details.append(f"**Project**: {_short_id(task.project_id)}")
    if task.budget is not None:
        details.append(f"**Budget**: {_money(task.budget)}")
    if task.actual_cost:
        details.append(f"**Spent**: {_money(task.actual_cost)}")
    if task.tags:
        details.append(f"**Tags**: {', '.join(task.tags)}")
    lines.append(" | ".join(details))

    if task.is_over_budget:
        lines.append(f"Over budget by {_money(task.budget_variance)}")
    if task.description:
        lines.append(task.description)

    if task.comments:
        lines.append("**Comments:**")
        for comment in task.comments:
            lines.append(f"  - [{comment.created_at.date().isoformat()}] {comment.author_name}: {comment.text}")

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[Task], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]
    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")
    return "\n".join(lines)


def _format_project_markdown(project: Project, progress: float | None = None) -> str:
    lines = [f"### {project.name}", f"`{project.id}`"]
    details = [f"**Status**: {project.status.value}", f"**Team**: {len(project.all_member_ids)}"]
    if progress is not None:
        details.append(f"**Progress**: {progress * 100:.0f}%")
    if project.budget is not None:
        details.append(f"**Budget**: {_money(project.budget)}")
        details.append(f"**Spent**: {_money(project.actual_cost)}")
    if project.end_date:
        details.append(f"**Ends**: {project.end_date.date().isoformat()}")
    lines.append(" | ".join(details))
    if project.description:
        lines.append(project.description)
    return "\n".join(lines)


def _format_projects_markdown(projects: list[Project], progress: dict[str, float] | None = None) -> str:
    if not projects:
        return "# Projects\n\nNo projects found."

    progress = progress or {}
    lines = ["# Projects", f"*{len(projects)} project(s)*", ""]
    for project in projects:
        lines.append(_format_project_markdown(project, progress.get(project.id)))
        lines.append("")
    return "\n".join(lines)


def _format_users_markdown(users: list[User], current_user_id: str | None = None) -> str:
    if not users:
        return "# Team\n\nNo users found."

    lines = ["# Team", f"*{len(users)} user(s)*", ""]
    for user in users:
        marker = " (you)" if user.id == current_user_id else ""
        lines.append(
            f"- **{user.display_name}**{marker} <{user.email}> | {user.role.value} | "
            f"{user.coins_earned} coins | `{user.id}`"
        )
    return "\n".join(lines)


def _format_project_analytics_markdown(snapshot: ProjectAnalyticsSnapshot) -> str:
    """Format per-project analytics, including the 7-day completion trend."""
    lines = [
        f"## {snapshot.project_name}",
        f"- **Progress**: {snapshot.completed_tasks}/{snapshot.total_tasks} tasks ({snapshot.progress * 100:.0f}%)",
        f"- **Budget**: {_money(snapshot.total_budget)} | **Spent**: {_money(snapshot.actual_cost)}",
        f"- **Profit margin**: {snapshot.profit_margin:.2f}% | "
        f"**Utilization**: {snapshot.budget_utilization:.2f}%",
    ]
    by_priority = ", ".join(f"{k}: {v}" for k, v in snapshot.tasks_by_priority.items())
    lines.append(f"- **By priority**: {by_priority}")
    trend = " ".join(str(point.completed_tasks) for point in snapshot.completion_trend)
    lines.append(f"- **Completed, last {len(snapshot.completion_trend)} days**: {trend}")
    return "\n".join(lines)


def _format_productivity_markdown(snapshot: UserProductivitySnapshot, user: User | None = None) -> str:
    name = user.display_name if user else (snapshot.user_id or "Unknown user")
    return "\n".join(
        [
            f"# Productivity: {name}",
            f"- **Completed**: {snapshot.total_tasks_completed} "
            f"(this week: {snapshot.tasks_this_week}, this month: {snapshot.tasks_this_month})",
            f"- **Completion rate**: {snapshot.completion_rate:.1f}%",
            f"- **Average per day**: {snapshot.average_tasks_per_day:.2f}",
            f"- **Streak**: {snapshot.streak_days} day(s)",
            f"- **Coins**: {snapshot.coins_earned} | **Score**: {snapshot.productivity_score:.0f}",
        ]
    )


def _format_financial_markdown(snapshot: FinancialSummarySnapshot) -> str:
    lines = [
        "# Financial Summary",
        f"- **Total budget**: {_money(snapshot.total_budget)}",
        f"- **Total spent**: {_money(snapshot.total_actual_cost)}",
        f"- **Profit**: {_money(snapshot.total_profit)} ({snapshot.profit_margin:.2f}%)",
        f"- **Budget utilization**: {snapshot.budget_utilization:.2f}%",
        f"- **Over-budget items**: {snapshot.over_budget_items}",
        f"- **Average cost per task**: {_money(snapshot.average_cost_per_task)}",
        "",
        "## Monthly spending",
    ]
    for month in snapshot.monthly_spending:
        lines.append(f"- {month.label} {month.year}: {_money(month.amount)}")
    return "\n".join(lines)


def _format_team_markdown(snapshot: TeamProductivitySnapshot) -> str:
    lines = [
        f"# Team: {snapshot.project_name}",
        f"*{snapshot.total_members} member(s), {snapshot.completed_tasks}/{snapshot.total_tasks} tasks done "
        f"({snapshot.overall_progress:.0f}%)*",
        "",
    ]
    if not snapshot.member_productivity:
        lines.append("No team members found.")
    for member in snapshot.member_productivity:
        lines.append(
            f"- **{member.display_name}**: {member.completed_tasks}/{member.total_tasks} "
            f"({member.completion_rate:.0f}%), avg cost {_money(member.average_task_cost)}"
        )
    return "\n".join(lines)
