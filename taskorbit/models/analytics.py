"""Read-only snapshot models produced by the analytics engine."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)


class CompletionTrendPoint(_Snapshot):
    """Number of tasks completed on one calendar day."""

    day: date
    completed_tasks: int = 0


class MonthlySpending(_Snapshot):
    """Actual cost of items created within one calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str
    amount: float = 0.0


class ProjectAnalyticsSnapshot(_Snapshot):
    """Derived metrics for a single project, computed from its tasks."""

    project_id: str
    project_name: str
    total_tasks: int = 0
    completed_tasks: int = 0
    progress: float = 0.0
    total_budget: float = 0.0
    actual_cost: float = 0.0
    profit_margin: float = 0.0
    budget_utilization: float = 0.0
    tasks_by_priority: dict[str, int] = Field(default_factory=dict)
    completion_trend: list[CompletionTrendPoint] = Field(default_factory=list)


class UserProductivitySnapshot(_Snapshot):
    """Productivity metrics for one user over their assigned tasks."""

    user_id: str | None = None
    total_tasks_completed: int = 0
    tasks_this_week: int = 0
    tasks_this_month: int = 0
    average_tasks_per_day: float = 0.0
    coins_earned: int = 0
    productivity_score: float = 0.0
    streak_days: int = 0
    completion_rate: float = 0.0


class FinancialSummarySnapshot(_Snapshot):
    """Budget versus spend across every task and project."""

    total_budget: float = 0.0
    total_actual_cost: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0
    over_budget_items: int = 0
    average_cost_per_task: float = 0.0
    budget_utilization: float = 0.0
    monthly_spending: list[MonthlySpending] = Field(default_factory=list)


class MemberProductivity(_Snapshot):
    """One team member's share of a project's work."""

    user_id: str
    display_name: str
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    average_task_cost: float = 0.0


class TeamProductivitySnapshot(_Snapshot):
    """How a project's team is progressing, member by member."""

    project_id: str
    project_name: str
    total_members: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    overall_progress: float = 0.0
    member_productivity: list[MemberProductivity] = Field(default_factory=list)
