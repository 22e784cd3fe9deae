"""
Query engine for task, project and user lists.

Every function here is pure: the input collections are never mutated and the
same inputs always produce the same order. Filters run first, then the sort,
which is stable for elements that compare equal under the active key.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from taskorbit.enums import Priority, TaskSortKey
from taskorbit.errors import InvalidArgumentError
from taskorbit.models.criteria import ProjectCriteria, TaskCriteria, UserCriteria
from taskorbit.models.project import Project
from taskorbit.models.task import Task
from taskorbit.models.user import User
from taskorbit.utils.dates import as_utc

CriteriaT = TypeVar("CriteriaT", bound=BaseModel)

# Most severe first; anything not listed sorts after these
PRIORITY_ORDER: tuple[Priority, ...] = (Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW)
_PRIORITY_RANK = {priority: rank for rank, priority in enumerate(PRIORITY_ORDER)}


# ============================================================================
# Criteria handling
# ============================================================================


def _coerce_criteria(
    criteria: CriteriaT | Mapping[str, Any] | None,
    model: type[CriteriaT],
) -> CriteriaT:
    """Validate ``criteria`` into ``model``, raising InvalidArgumentError on bad input."""
    if criteria is None:
        return model()
    if isinstance(criteria, model):
        return criteria
    if isinstance(criteria, Mapping):
        try:
            return model.model_validate(dict(criteria))
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid {model.__name__}: {e}") from e
    raise InvalidArgumentError(f"Expected {model.__name__} or mapping, got {type(criteria).__name__}")


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.casefold()


# ============================================================================
# Task filtering and sorting
# ============================================================================


def task_matches_search(task: Task, term: str) -> bool:
    """True if ``term`` occurs (case-insensitively) in the title, description or any tag."""
    if not term:
        return True
    needle = term.casefold()
    return (
        _contains(task.title, needle)
        or _contains(task.description, needle)
        or any(_contains(tag, needle) for tag in task.tags)
    )


def filter_tasks(tasks: Iterable[Task], criteria: TaskCriteria) -> list[Task]:
    """Apply every active filter in ``criteria``, preserving input order."""
    result: list[Task] = []
    for task in tasks:
        if not criteria.include_completed and task.is_completed:
            continue
        if criteria.priority is not None and task.priority != criteria.priority:
            continue
        if criteria.project_id is not None and task.project_id != criteria.project_id:
            continue
        if not task_matches_search(task, criteria.search):
            continue
        result.append(task)
    return result


def _due_date_key(task: Task) -> tuple:
    # Dated tasks first (ascending), then undated tasks newest-created first
    if task.due_date is not None:
        return (0, task.due_date.timestamp())
    return (1, -task.created_at.timestamp())


def _priority_key(task: Task) -> int:
    return _PRIORITY_RANK.get(task.priority, len(PRIORITY_ORDER))


_SORT_KEYS: dict[TaskSortKey, Callable[[Task], Any]] = {
    TaskSortKey.DUE_DATE: _due_date_key,
    TaskSortKey.PRIORITY: _priority_key,
    TaskSortKey.TITLE: lambda t: t.title.casefold(),
    TaskSortKey.CREATED: lambda t: -t.created_at.timestamp(),
    TaskSortKey.BUDGET: lambda t: -(t.budget or 0.0),
}


def sort_tasks(tasks: Iterable[Task], sort_by: TaskSortKey | str | None) -> list[Task]:
    """
    Return ``tasks`` ordered by ``sort_by``.

    Args:
        tasks: Tasks to order (not modified)
        sort_by: A TaskSortKey (or its value); None keeps insertion order

    Raises:
        InvalidArgumentError: If ``sort_by`` is not a known sort key
    """
    if sort_by is None:
        return list(tasks)
    try:
        key = TaskSortKey(sort_by)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown sort key: {sort_by!r}") from e
    return sorted(tasks, key=_SORT_KEYS[key])


def query_tasks(
    tasks: Iterable[Task],
    criteria: TaskCriteria | Mapping[str, Any] | None = None,
) -> list[Task]:
    """
    Produce a filtered, ordered view of ``tasks``.

    Args:
        tasks: Source collection
        criteria: TaskCriteria, or a mapping validated into one

    Returns:
        New list holding the matching tasks

    Raises:
        InvalidArgumentError: If the criteria are malformed (e.g. unknown priority)
    """
    parsed = _coerce_criteria(criteria, TaskCriteria)
    return sort_tasks(filter_tasks(tasks, parsed), parsed.sort_by)


# ============================================================================
# Projects and users
# ============================================================================


def query_projects(
    projects: Iterable[Project],
    criteria: ProjectCriteria | Mapping[str, Any] | None = None,
) -> list[Project]:
    """Filter projects whose name or description contains the search term."""
    parsed = _coerce_criteria(criteria, ProjectCriteria)
    needle = parsed.search.casefold()
    if not needle:
        return list(projects)
    return [p for p in projects if _contains(p.name, needle) or _contains(p.description, needle)]


def query_users(
    users: Iterable[User],
    criteria: UserCriteria | Mapping[str, Any] | None = None,
) -> list[User]:
    """Filter users whose name or email contains the search term."""
    parsed = _coerce_criteria(criteria, UserCriteria)
    needle = parsed.search.casefold()
    if not needle:
        return list(users)
    return [u for u in users if _contains(u.name, needle) or _contains(u.email, needle)]


# ============================================================================
# Convenience views
# ============================================================================


def tasks_for_project(tasks: Iterable[Task], project_id: str) -> list[Task]:
    return [t for t in tasks if t.project_id == project_id]


def tasks_for_user(tasks: Iterable[Task], user_id: str) -> list[Task]:
    return [t for t in tasks if t.assigned_user_id == user_id]


def projects_for_user(projects: Iterable[Project], user_id: str) -> list[Project]:
    """Projects the user owns or belongs to."""
    return [p for p in projects if p.has_member(user_id)]


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Open tasks whose due date has passed."""
    now = as_utc(now)
    return [t for t in tasks if not t.is_completed and t.due_date is not None and t.due_date < now]


def upcoming_tasks(tasks: Iterable[Task], now: datetime, days: int = 7) -> list[Task]:
    """Open tasks due between now and ``days`` from now, inclusive."""
    now = as_utc(now)
    horizon = now + timedelta(days=days)
    return [
        t for t in tasks if not t.is_completed and t.due_date is not None and now <= t.due_date <= horizon
    ]
