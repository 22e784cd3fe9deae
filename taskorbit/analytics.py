"""
Analytics engine: derived productivity and financial metrics.

All functions are pure and read-only. Trend windows are anchored on ``now``
(defaults to the current UTC time) and use UTC calendar days. Every ratio is
guarded so a zero denominator yields 0.
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from taskorbit.enums import Priority
from taskorbit.models.analytics import (
    CompletionTrendPoint,
    FinancialSummarySnapshot,
    MemberProductivity,
    MonthlySpending,
    ProjectAnalyticsSnapshot,
    TeamProductivitySnapshot,
    UserProductivitySnapshot,
)
from taskorbit.models.project import Project
from taskorbit.models.task import Task
from taskorbit.models.user import User
from taskorbit.utils.dates import as_utc, day_of, shift_month, utcnow

TREND_DAYS = 7
STREAK_WINDOW_DAYS = 30
SPENDING_MONTHS = 6


# ============================================================================
# Ratio helpers
# ============================================================================


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def profit_margin(budget: float, actual_cost: float) -> float:
    """(budget - actual) / budget as a percentage; 0 when budget <= 0."""
    return _ratio(budget - actual_cost, budget) * 100


def budget_utilization(budget: float, actual_cost: float) -> float:
    """actual / budget as a percentage; 0 when budget <= 0."""
    return _ratio(actual_cost, budget) * 100


def project_progress(project: Project, tasks: Iterable[Task]) -> float:
    """Fraction (0..1) of the project's tasks that are completed."""
    project_tasks = [t for t in tasks if t.project_id == project.id]
    done = sum(1 for t in project_tasks if t.is_completed)
    return _ratio(done, len(project_tasks))


def _completion_days(tasks: Iterable[Task]) -> list[date]:
    return [day_of(t.completed_at) for t in tasks if t.is_completed and t.completed_at is not None]


def tasks_by_priority(tasks: Iterable[Task]) -> dict[str, int]:
    """Task counts keyed by priority value, with every priority present."""
    counts = {priority.value: 0 for priority in Priority}
    for task in tasks:
        counts[Priority(task.priority).value] += 1
    return counts


def completion_trend(tasks: Iterable[Task], now: datetime, days: int = TREND_DAYS) -> list[CompletionTrendPoint]:
    """Completed-task counts for the ``days`` calendar days ending today, oldest first."""
    today = day_of(now)
    done_days = _completion_days(tasks)
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(CompletionTrendPoint(day=day, completed_tasks=done_days.count(day)))
    return points


def streak_days(tasks: Iterable[Task], now: datetime, window: int = STREAK_WINDOW_DAYS) -> int:
    """
    Count consecutive days, starting today and walking backwards, with at least
    one completion. A day without completions ends the streak; a gap today
    means a streak of 0. At most ``window`` days are examined.
    """
    today = day_of(now)
    done_days = set(_completion_days(tasks))
    streak = 0
    for offset in range(window):
        if today - timedelta(days=offset) not in done_days:
            break
        streak += 1
    return streak


def average_tasks_per_day(tasks: Sequence[Task]) -> float:
    """Completed count divided by the whole days between first and last completion (min 1)."""
    stamps = sorted(as_utc(t.completed_at) for t in tasks if t.is_completed and t.completed_at is not None)
    if not stamps:
        return 0.0
    span = (stamps[-1] - stamps[0]).days
    return len(stamps) / max(span, 1)


# ============================================================================
# Snapshots
# ============================================================================


def compute_project_analytics(
    project: Project,
    tasks: Iterable[Task],
    now: datetime | None = None,
) -> ProjectAnalyticsSnapshot:
    """
    Derive metrics for one project from the tasks that belong to it.

    Budget and cost are summed over the project's tasks only; the project's own
    budget and actual cost are not part of these totals.

    Args:
        project: The project to analyse
        tasks: Any task collection; tasks of other projects are ignored
        now: Anchor for the completion trend (defaults to now, UTC)
    """
    now = as_utc(now) if now is not None else utcnow()
    project_tasks = [t for t in tasks if t.project_id == project.id]
    completed = [t for t in project_tasks if t.is_completed]

    total_budget = sum(t.budget or 0.0 for t in project_tasks)
    actual_cost = sum(t.actual_cost for t in project_tasks)

    return ProjectAnalyticsSnapshot(
        project_id=project.id,
        project_name=project.name,
        total_tasks=len(project_tasks),
        completed_tasks=len(completed),
        progress=_ratio(len(completed), len(project_tasks)),
        total_budget=total_budget,
        actual_cost=actual_cost,
        profit_margin=profit_margin(total_budget, actual_cost),
        budget_utilization=budget_utilization(total_budget, actual_cost),
        tasks_by_priority=tasks_by_priority(project_tasks),
        completion_trend=completion_trend(completed, now),
    )


def compute_all_project_analytics(
    projects: Iterable[Project],
    tasks: Iterable[Task],
    now: datetime | None = None,
) -> list[ProjectAnalyticsSnapshot]:
    """One snapshot per project, in project order."""
    task_list = list(tasks)
    return [compute_project_analytics(project, task_list, now) for project in projects]


def compute_user_productivity(
    user: User,
    assigned_tasks: Iterable[Task],
    now: datetime | None = None,
) -> UserProductivitySnapshot:
    """
    Summarise how productive ``user`` has been on the tasks assigned to them.

    Week and month counts use calendar containment (same ISO week, same month)
    rather than rolling windows.
    """
    now = as_utc(now) if now is not None else utcnow()
    mine = [t for t in assigned_tasks if t.assigned_user_id == user.id]
    completed = [t for t in mine if t.is_completed]

    this_week = now.isocalendar()[:2]
    this_month = (now.year, now.month)
    done_days = _completion_days(completed)

    return UserProductivitySnapshot(
        user_id=user.id,
        total_tasks_completed=len(completed),
        tasks_this_week=sum(1 for d in done_days if d.isocalendar()[:2] == this_week),
        tasks_this_month=sum(1 for d in done_days if (d.year, d.month) == this_month),
        average_tasks_per_day=average_tasks_per_day(completed),
        coins_earned=user.coins_earned,
        productivity_score=user.productivity_score,
        streak_days=streak_days(completed, now),
        completion_rate=_ratio(len(completed), len(mine)) * 100,
    )


def monthly_spending(
    items: Iterable[tuple[datetime, float]],
    now: datetime,
    months: int = SPENDING_MONTHS,
) -> list[MonthlySpending]:
    """Sum (created_at, cost) pairs per calendar month for the last ``months`` months, oldest first."""
    totals: dict[tuple[int, int], float] = {}
    for created_at, cost in items:
        created_at = as_utc(created_at)
        bucket = (created_at.year, created_at.month)
        totals[bucket] = totals.get(bucket, 0.0) + cost

    series = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        series.append(
            MonthlySpending(
                year=year,
                month=month,
                label=calendar.month_name[month],
                amount=totals.get((year, month), 0.0),
            )
        )
    return series


def compute_financial_summary(
    tasks: Iterable[Task],
    projects: Iterable[Project],
    now: datetime | None = None,
) -> FinancialSummarySnapshot:
    """
    Aggregate budgets and spend across every task and project.

    Unlike per-project analytics, project-level budgets and costs are included
    here alongside task budgets and costs.
    """
    now = as_utc(now) if now is not None else utcnow()
    task_list = list(tasks)
    project_list = list(projects)

    total_budget = sum(t.budget or 0.0 for t in task_list) + sum(p.budget or 0.0 for p in project_list)
    total_cost = sum(t.actual_cost for t in task_list) + sum(p.actual_cost for p in project_list)
    profit = total_budget - total_cost
    over_budget = sum(1 for p in project_list if p.is_over_budget) + sum(1 for t in task_list if t.is_over_budget)

    # Projects count as cost-only items in the month they were created
    spend_items = [(t.created_at, t.actual_cost) for t in task_list]
    spend_items.extend((p.created_at, p.actual_cost) for p in project_list)

    return FinancialSummarySnapshot(
        total_budget=total_budget,
        total_actual_cost=total_cost,
        total_profit=profit,
        profit_margin=_ratio(profit, total_budget) * 100,
        over_budget_items=over_budget,
        average_cost_per_task=_ratio(total_cost, len(task_list)),
        budget_utilization=budget_utilization(total_budget, total_cost),
        monthly_spending=monthly_spending(spend_items, now),
    )


def compute_team_productivity(
    project: Project,
    tasks: Iterable[Task],
    users: Iterable[User],
) -> TeamProductivitySnapshot:
    """Per-member completion figures for a project's team (owner included)."""
    project_tasks = [t for t in tasks if t.project_id == project.id]
    completed = [t for t in project_tasks if t.is_completed]
    member_ids = project.all_member_ids
    users_by_id = {u.id: u for u in users}

    members = []
    for member_id in member_ids:
        user = users_by_id.get(member_id)
        if user is None:
            continue
        theirs = [t for t in project_tasks if t.assigned_user_id == member_id]
        done = sum(1 for t in theirs if t.is_completed)
        members.append(
            MemberProductivity(
                user_id=member_id,
                display_name=user.display_name,
                total_tasks=len(theirs),
                completed_tasks=done,
                completion_rate=_ratio(done, len(theirs)) * 100,
                average_task_cost=_ratio(sum(t.actual_cost for t in theirs), len(theirs)),
            )
        )

    return TeamProductivitySnapshot(
        project_id=project.id,
        project_name=project.name,
        total_members=len(member_ids),
        total_tasks=len(project_tasks),
        completed_tasks=len(completed),
        overall_progress=_ratio(len(completed), len(project_tasks)) * 100,
        member_productivity=members,
    )
