"""
Data store: the authoritative in-memory collections and their persistence.

The store owns every entity collection. Readers get copies; all changes go
through the mutation methods below, each of which persists the affected
collections and then notifies subscribers with a StoreEvent.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from taskorbit.enums import Priority, ProjectStatus, StoreTopic, UserRole
from taskorbit.errors import NotFoundError
from taskorbit.models.bundle import DataBundle
from taskorbit.models.project import DEFAULT_PROJECT_COLOR, Project
from taskorbit.models.task import Task, TaskComment
from taskorbit.models.user import User
from taskorbit.query import projects_for_user, tasks_for_project, tasks_for_user
from taskorbit.sample_data import build_sample_bundle, sample_current_user
from taskorbit.storage import BlobStore, MemoryBlobStore
from taskorbit.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Storage keys
TASKS_KEY = "tasks"
PROJECTS_KEY = "projects"
USERS_KEY = "users"
CURRENT_USER_KEY = "current_user"
ONBOARDING_KEY = "onboarding_completed"
ALL_KEYS = (TASKS_KEY, PROJECTS_KEY, USERS_KEY, CURRENT_USER_KEY, ONBOARDING_KEY)

# Coins credited to the current user
COINS_TASK_CREATED = 10
COINS_TASK_COMPLETED = 25
COINS_PROJECT_CREATED = 50
COINS_COMMENT_ADDED = 5

_TASKS = TypeAdapter(list[Task])
_PROJECTS = TypeAdapter(list[Project])
_USERS = TypeAdapter(list[User])


class StoreEvent(BaseModel):
    """Change notification emitted after every store mutation."""

    topic: StoreTopic
    entity_id: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)


Listener = Callable[[StoreEvent], None]


class DataStore:
    """
    CRUD access to tasks, projects, users and the current user.

    Args:
        backend: Blob store used for persistence (in-memory by default)
        clock: Returns the current time; used for completion stamps and samples
        seed_samples: Fall back to the sample dataset (rather than empty
            collections) when nothing usable is persisted
    """

    def __init__(
        self,
        backend: BlobStore | None = None,
        clock: Callable[[], datetime] | None = None,
        seed_samples: bool = True,
    ):
        self._backend: BlobStore = backend if backend is not None else MemoryBlobStore()
        self._clock = clock or utcnow
        self._seed_samples = seed_samples
        self._listeners: list[Listener] = []

        self._tasks: list[Task] = []
        self._projects: list[Project] = []
        self._users: list[User] = []
        self._current_user: User = sample_current_user()
        self._load()

    # ========================================================================
    # Loading and saving
    # ========================================================================

    def _fallback_bundle(self) -> DataBundle:
        if self._seed_samples:
            return build_sample_bundle(self._clock())
        return DataBundle(current_user=sample_current_user())

    def _decode(self, key: str, decoder: Callable[[str], Any]) -> Any | None:
        try:
            raw = self._backend.get(key)
        except (UnicodeDecodeError, OSError) as e:
            logger.warning("Could not read %r, falling back to defaults: %s", key, e)
            return None
        if raw is None:
            logger.debug("No persisted data under %r", key)
            return None
        try:
            return decoder(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            logger.warning("Could not decode %r, falling back to defaults: %s", key, e)
            return None

    def _load(self) -> None:
        fallback: DataBundle | None = None

        def defaults() -> DataBundle:
            nonlocal fallback
            if fallback is None:
                fallback = self._fallback_bundle()
            return fallback

        tasks = self._decode(TASKS_KEY, _TASKS.validate_json)
        if tasks is None:
            self._tasks = defaults().tasks
            self._save_tasks()
        else:
            self._tasks = tasks

        projects = self._decode(PROJECTS_KEY, _PROJECTS.validate_json)
        if projects is None:
            self._projects = defaults().projects
            self._save_projects()
        else:
            self._projects = projects

        users = self._decode(USERS_KEY, _USERS.validate_json)
        if users is None:
            self._users = defaults().users
            self._save_users()
        else:
            self._users = users

        current = self._decode(CURRENT_USER_KEY, User.model_validate_json)
        if current is None:
            self._current_user = defaults().current_user
            self._save_current_user()
        else:
            self._current_user = current

    def _save_tasks(self) -> None:
        self._backend.set(TASKS_KEY, _TASKS.dump_json(self._tasks).decode("utf-8"))

    def _save_projects(self) -> None:
        self._backend.set(PROJECTS_KEY, _PROJECTS.dump_json(self._projects).decode("utf-8"))

    def _save_users(self) -> None:
        self._backend.set(USERS_KEY, _USERS.dump_json(self._users).decode("utf-8"))

    def _save_current_user(self) -> None:
        self._backend.set(CURRENT_USER_KEY, self._current_user.model_dump_json())

    # ========================================================================
    # Change notification
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener`` for change events.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, topic: StoreTopic, entity_id: str | None = None, **detail: Any) -> None:
        event = StoreEvent(topic=topic, entity_id=entity_id, detail=detail)
        for listener in list(self._listeners):
            listener(event)

    # ========================================================================
    # Reads
    # ========================================================================

    def now(self) -> datetime:
        """Current time according to the store clock."""
        return self._clock()

    def list_tasks(self) -> list[Task]:
        return [t.model_copy(deep=True) for t in self._tasks]

    def list_projects(self) -> list[Project]:
        return [p.model_copy(deep=True) for p in self._projects]

    def list_users(self) -> list[User]:
        return [u.model_copy(deep=True) for u in self._users]

    def get_current_user(self) -> User:
        return self._current_user.model_copy(deep=True)

    def _task_index(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError("Task", task_id)

    def _project_index(self, project_id: str) -> int:
        for i, project in enumerate(self._projects):
            if project.id == project_id:
                return i
        raise NotFoundError("Project", project_id)

    def _user_index(self, user_id: str) -> int:
        for i, user in enumerate(self._users):
            if user.id == user_id:
                return i
        raise NotFoundError("User", user_id)

    def get_task(self, task_id: str) -> Task:
        return self._tasks[self._task_index(task_id)].model_copy(deep=True)

    def get_project(self, project_id: str) -> Project:
        return self._projects[self._project_index(project_id)].model_copy(deep=True)

    def get_user(self, user_id: str) -> User:
        """Look a user up by id; the current user is found too."""
        if user_id == self._current_user.id:
            return self.get_current_user()
        return self._users[self._user_index(user_id)].model_copy(deep=True)

    def get_tasks_for_project(self, project_id: str) -> list[Task]:
        return tasks_for_project(self.list_tasks(), project_id)

    def get_tasks_for_user(self, user_id: str) -> list[Task]:
        return tasks_for_user(self.list_tasks(), user_id)

    def get_projects_for_user(self, user_id: str) -> list[Project]:
        return projects_for_user(self.list_projects(), user_id)

    def _known_user(self, user_id: str) -> bool:
        return user_id == self._current_user.id or any(u.id == user_id for u in self._users)

    # ========================================================================
    # Gamification
    # ========================================================================

    def _award_coins(self, amount: int, reason: str) -> None:
        self._current_user = self._current_user.model_copy(
            update={"coins_earned": self._current_user.coins_earned + amount}
        )
        self._save_current_user()
        logger.debug("Awarded %d coins: %s", amount, reason)
        self._emit(StoreTopic.COINS_AWARDED, self._current_user.id, amount=amount, reason=reason)

    def _bump_current_user(self, **deltas: int) -> None:
        update = {field: max(0, getattr(self._current_user, field) + delta) for field, delta in deltas.items()}
        self._current_user = self._current_user.model_copy(update=update)
        self._save_current_user()

    # ========================================================================
    # Tasks
    # ========================================================================

    def _link_task(self, task_id: str, project_id: str | None) -> None:
        if project_id is None:
            return
        i = self._project_index(project_id)
        project = self._projects[i]
        if task_id not in project.task_ids:
            self._projects[i] = project.model_copy(update={"task_ids": [*project.task_ids, task_id]})

    def _unlink_task(self, task_id: str, project_id: str | None) -> None:
        if project_id is None:
            return
        for i, project in enumerate(self._projects):
            if project.id == project_id and task_id in project.task_ids:
                remaining = [tid for tid in project.task_ids if tid != task_id]
                self._projects[i] = project.model_copy(update={"task_ids": remaining})

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
        budget: float | None = None,
        actual_cost: float = 0.0,
        project_id: str | None = None,
        assigned_user_id: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        """
        Create a task with a fresh id and award the task-created coins.

        The task is assigned to the current user unless ``assigned_user_id``
        names someone else.

        Raises:
            NotFoundError: If the project or assignee does not exist
            pydantic.ValidationError: If a field is out of range
        """
        if project_id is not None:
            self._project_index(project_id)
        assignee = assigned_user_id or self._current_user.id
        if not self._known_user(assignee):
            raise NotFoundError("User", assignee)

        task = Task(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            budget=budget,
            actual_cost=actual_cost,
            project_id=project_id,
            assigned_user_id=assignee,
            created_at=self._clock(),
            tags=tags or [],
        )
        self._tasks.append(task)
        self._link_task(task.id, project_id)
        self._save_tasks()
        if project_id is not None:
            self._save_projects()
        logger.debug("Created task %s", task.id)
        self._emit(StoreTopic.TASK_CREATED, task.id)
        self._award_coins(COINS_TASK_CREATED, "Task Created")
        return task.model_copy(deep=True)

    def update_task(self, task: Task) -> Task:
        """
        Replace the stored task that has ``task.id``.

        A transition from open to completed credits the current user with the
        task-completed coins and bumps their completed-task counter.
        """
        i = self._task_index(task.id)
        previous = self._tasks[i]
        if task.project_id is not None and task.project_id != previous.project_id:
            self._project_index(task.project_id)

        stored = task.model_copy(deep=True)
        self._tasks[i] = stored
        if stored.project_id != previous.project_id:
            self._unlink_task(stored.id, previous.project_id)
            self._link_task(stored.id, stored.project_id)
            self._save_projects()
        self._save_tasks()
        self._emit(StoreTopic.TASK_UPDATED, stored.id)

        if not previous.is_completed and stored.is_completed:
            self._bump_current_user(tasks_completed=1)
            self._award_coins(COINS_TASK_COMPLETED, "Task Completed")
        return stored.model_copy(deep=True)

    def set_task_completion(self, task_id: str, completed: bool) -> Task:
        """Mark a task complete (stamped with the store clock) or reopen it."""
        task = self._tasks[self._task_index(task_id)]
        if task.is_completed == completed:
            return task.model_copy(deep=True)
        return self.update_task(task.with_completion(completed, self._clock()))

    def delete_task(self, task_id: str) -> None:
        task = self._tasks.pop(self._task_index(task_id))
        self._unlink_task(task.id, task.project_id)
        self._save_tasks()
        if task.project_id is not None:
            self._save_projects()
        self._emit(StoreTopic.TASK_DELETED, task.id)

    def add_comment(self, task_id: str, text: str) -> TaskComment:
        """Append a comment by the current user and award the comment coins."""
        i = self._task_index(task_id)
        author = self._current_user
        comment = TaskComment(
            text=text,
            author_id=author.id,
            author_name=author.display_name,
            created_at=self._clock(),
        )
        task = self._tasks[i]
        self._tasks[i] = task.model_copy(update={"comments": [*task.comments, comment]})
        self._save_tasks()
        self._emit(StoreTopic.TASK_UPDATED, task_id, comment_id=comment.id)
        self._award_coins(COINS_COMMENT_ADDED, "Comment Added")
        return comment

    # ========================================================================
    # Projects
    # ========================================================================

    def create_project(
        self,
        name: str,
        description: str = "",
        budget: float | None = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        owner_id: str | None = None,
        member_ids: list[str] | None = None,
        color: str = DEFAULT_PROJECT_COLOR,
    ) -> Project:
        """
        Create a project, owned by the current user unless ``owner_id`` is given.

        When the current user owns it, their owned-project counter goes up and
        they receive the project-created coins.
        """
        owner = owner_id or self._current_user.id
        for user_id in [owner, *(member_ids or [])]:
            if not self._known_user(user_id):
                raise NotFoundError("User", user_id)

        now = self._clock()
        project = Project(
            name=name,
            description=description,
            status=status,
            budget=budget,
            start_date=start_date or now,
            end_date=end_date,
            owner_id=owner,
            member_ids=list(dict.fromkeys(member_ids or [])),
            created_at=now,
            color=color,
        )
        self._projects.append(project)
        self._save_projects()
        logger.debug("Created project %s", project.id)
        self._emit(StoreTopic.PROJECT_CREATED, project.id)

        if owner == self._current_user.id:
            self._bump_current_user(projects_owned=1)
            self._award_coins(COINS_PROJECT_CREATED, "Project Created")
        return project.model_copy(deep=True)

    def update_project(self, project: Project) -> Project:
        i = self._project_index(project.id)
        self._projects[i] = project.model_copy(deep=True)
        self._save_projects()
        self._emit(StoreTopic.PROJECT_UPDATED, project.id)
        return project.model_copy(deep=True)

    def delete_project(self, project_id: str) -> None:
        """Delete a project together with every task that belongs to it."""
        project = self._projects.pop(self._project_index(project_id))
        removed = [t.id for t in self._tasks if t.project_id == project.id]
        self._tasks = [t for t in self._tasks if t.project_id != project.id]
        self._save_tasks()
        self._save_projects()
        logger.debug("Deleted project %s and %d task(s)", project.id, len(removed))

        if project.owner_id == self._current_user.id:
            self._bump_current_user(projects_owned=-1)
        self._emit(StoreTopic.PROJECT_DELETED, project.id, removed_task_ids=removed)

    def add_project_member(self, project_id: str, user_id: str) -> Project:
        i = self._project_index(project_id)
        if not self._known_user(user_id):
            raise NotFoundError("User", user_id)
        project = self._projects[i]
        if project.has_member(user_id):
            return project.model_copy(deep=True)
        return self.update_project(project.model_copy(update={"member_ids": [*project.member_ids, user_id]}))

    def remove_project_member(self, project_id: str, user_id: str) -> Project:
        project = self._projects[self._project_index(project_id)]
        remaining = [m for m in project.member_ids if m != user_id]
        return self.update_project(project.model_copy(update={"member_ids": remaining}))

    # ========================================================================
    # Users
    # ========================================================================

    def create_user(self, name: str, email: str, role: UserRole = UserRole.MEMBER) -> User:
        user = User(name=name, email=email, role=role, joined_at=self._clock())
        self._users.append(user)
        self._save_users()
        self._emit(StoreTopic.USER_CREATED, user.id)
        return user.model_copy(deep=True)

    def invite_user(self, email: str, project_id: str, role: UserRole = UserRole.MEMBER) -> User:
        """
        Add the user with ``email`` to a project, creating them first if needed.

        New users are named after the local part of their email address.
        """
        self._project_index(project_id)
        email = email.strip()
        existing = next((u for u in self._users if u.email.lower() == email.lower()), None)
        if existing is None:
            local = email.split("@", 1)[0]
            existing = self.create_user(name=local.capitalize() or "New User", email=email, role=role)
        self.add_project_member(project_id, existing.id)
        return existing.model_copy(deep=True)

    def update_user(self, user: User) -> User:
        i = self._user_index(user.id)
        self._users[i] = user.model_copy(deep=True)
        self._save_users()
        self._emit(StoreTopic.USER_UPDATED, user.id)
        return user.model_copy(deep=True)

    def delete_user(self, user_id: str) -> None:
        """Remove a user, unassign their tasks and drop them from every project team."""
        user = self._users.pop(self._user_index(user_id))
        self._save_users()

        self._projects = [
            p.model_copy(update={"member_ids": [m for m in p.member_ids if m != user.id]})
            if user.id in p.member_ids
            else p
            for p in self._projects
        ]
        self._save_projects()

        self._tasks = [
            t.model_copy(update={"assigned_user_id": None}) if t.assigned_user_id == user.id else t
            for t in self._tasks
        ]
        self._save_tasks()
        self._emit(StoreTopic.USER_DELETED, user.id)

    def update_current_user(self, user: User) -> User:
        self._current_user = user.model_copy(deep=True)
        self._save_current_user()
        self._emit(StoreTopic.CURRENT_USER_UPDATED, user.id)
        return self.get_current_user()

    # ========================================================================
    # Onboarding, reset, export and import
    # ========================================================================

    @property
    def has_completed_onboarding(self) -> bool:
        return self._backend.get(ONBOARDING_KEY) == "true"

    @has_completed_onboarding.setter
    def has_completed_onboarding(self, value: bool) -> None:
        self._backend.set(ONBOARDING_KEY, "true" if value else "false")

    def reset_all_data(self) -> None:
        """Forget everything persisted and reload the default dataset."""
        for key in ALL_KEYS:
            self._backend.delete(key)
        self._load()
        self._emit(StoreTopic.DATA_RESET)

    def export_data(self) -> str:
        """Serialize every collection and the current user as one JSON document."""
        bundle = DataBundle(
            tasks=self._tasks,
            projects=self._projects,
            users=self._users,
            current_user=self._current_user,
        )
        return bundle.model_dump_json(indent=2)

    def import_data(self, payload: str | bytes) -> bool:
        """
        Replace all data with an exported bundle.

        Returns:
            True on success; False (with state untouched) if the payload
            cannot be decoded
        """
        try:
            bundle = DataBundle.model_validate_json(payload)
        except ValidationError as e:
            logger.warning("Rejected import payload: %s", e)
            return False

        self._tasks = bundle.tasks
        self._projects = bundle.projects
        self._users = bundle.users
        self._current_user = bundle.current_user
        self._save_tasks()
        self._save_projects()
        self._save_users()
        self._save_current_user()
        self._emit(StoreTopic.DATA_IMPORTED)
        return True
