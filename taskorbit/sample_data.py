"""Starter dataset loaded on first run or when persisted data cannot be decoded."""

from datetime import datetime, timedelta

from taskorbit.enums import Priority, ProjectStatus, UserRole
from taskorbit.models.bundle import DataBundle
from taskorbit.models.project import Project
from taskorbit.models.task import Task
from taskorbit.models.user import User
from taskorbit.utils.dates import as_utc, shift_month, utcnow


def _months_from(now: datetime, delta: int) -> datetime:
    year, month = shift_month(now.year, now.month, delta)
    # Clamp to the 28th so every month has the day
    return now.replace(year=year, month=month, day=min(now.day, 28))


def sample_current_user() -> User:
    return User(
        name="John Doe",
        email="john.doe@example.com",
        role=UserRole.ADMIN,
        coins_earned=2150,
        tasks_completed=67,
        projects_owned=4,
    )


def sample_users() -> list[User]:
    return [
        User(
            name="Alex Johnson",
            email="alex.johnson@example.com",
            role=UserRole.ADMIN,
            coins_earned=1250,
            tasks_completed=45,
            projects_owned=3,
        ),
        User(
            name="Sarah Chen",
            email="sarah.chen@example.com",
            role=UserRole.PROJECT_MANAGER,
            coins_earned=890,
            tasks_completed=32,
            projects_owned=2,
        ),
        User(
            name="Mike Rodriguez",
            email="mike.rodriguez@example.com",
            role=UserRole.MEMBER,
            coins_earned=650,
            tasks_completed=28,
        ),
        User(
            name="Emma Wilson",
            email="emma.wilson@example.com",
            role=UserRole.MEMBER,
            coins_earned=420,
            tasks_completed=19,
            projects_owned=1,
        ),
    ]


def sample_projects(owner_id: str, now: datetime) -> list[Project]:
    return [
        Project(
            name="TaskOrbit Mobile App",
            description="Develop a comprehensive task management app with financial tracking",
            budget=15000.0,
            actual_cost=8500.0,
            start_date=_months_from(now, -2),
            end_date=_months_from(now, 2),
            owner_id=owner_id,
            color="#FF3C00",
        ),
        Project(
            name="Marketing Campaign",
            description="Launch campaign for app store release",
            status=ProjectStatus.PLANNING,
            budget=5000.0,
            actual_cost=1200.0,
            start_date=now,
            end_date=_months_from(now, 1),
            owner_id=owner_id,
            color="#007AFF",
        ),
        Project(
            name="User Research Study",
            description="Conduct user interviews and usability testing",
            status=ProjectStatus.COMPLETED,
            budget=2000.0,
            actual_cost=1800.0,
            start_date=_months_from(now, -3),
            end_date=_months_from(now, -1),
            owner_id=owner_id,
            color="#34C759",
        ),
    ]


def sample_tasks(project_id: str | None, assignee_id: str | None, now: datetime) -> list[Task]:
    return [
        Task(
            title="Design App Logo",
            description="Create a modern logo that represents productivity and financial tracking",
            priority=Priority.HIGH,
            due_date=now + timedelta(days=7),
            budget=500.0,
            actual_cost=450.0,
            project_id=project_id,
            assigned_user_id=assignee_id,
            created_at=now,
            tags=["design", "branding"],
        ),
        Task(
            title="Implement User Authentication",
            description="Set up secure user login and registration system",
            priority=Priority.URGENT,
            due_date=now + timedelta(days=3),
            budget=1200.0,
            actual_cost=800.0,
            project_id=project_id,
            assigned_user_id=assignee_id,
            created_at=now,
            tags=["development", "security"],
        ),
        Task(
            title="Market Research",
            description="Analyze competitor apps and user preferences",
            is_completed=True,
            priority=Priority.MEDIUM,
            budget=300.0,
            actual_cost=250.0,
            project_id=project_id,
            assigned_user_id=assignee_id,
            created_at=now - timedelta(days=10),
            completed_at=now - timedelta(days=5),
            tags=["research", "marketing"],
        ),
    ]


def build_sample_bundle(now: datetime | None = None) -> DataBundle:
    """Build a fresh, internally consistent sample dataset anchored at ``now``."""
    now = as_utc(now) if now is not None else utcnow()
    current_user = sample_current_user()
    projects = sample_projects(current_user.id, now)
    tasks = sample_tasks(projects[0].id, current_user.id, now)
    projects[0] = projects[0].model_copy(update={"task_ids": [t.id for t in tasks]})
    return DataBundle(tasks=tasks, projects=projects, users=sample_users(), current_user=current_user)
