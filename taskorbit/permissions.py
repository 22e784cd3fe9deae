"""Role capabilities and permission checks."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from taskorbit.enums import Permission, UserRole

if TYPE_CHECKING:
    from taskorbit.models.project import Project
    from taskorbit.models.task import Task
    from taskorbit.models.user import User


ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = MappingProxyType(
    {
        UserRole.ADMIN: frozenset(Permission),
        UserRole.PROJECT_MANAGER: frozenset(
            {
                Permission.CREATE_PROJECT,
                Permission.EDIT_PROJECT,
                Permission.ASSIGN_TASKS,
                Permission.VIEW_ANALYTICS,
                Permission.MANAGE_TEAM,
            }
        ),
        UserRole.MEMBER: frozenset(
            {
                Permission.CREATE_TASK,
                Permission.EDIT_OWN_TASKS,
                Permission.COMMENT,
                Permission.VIEW_PROJECTS,
            }
        ),
        UserRole.VIEWER: frozenset({Permission.VIEW_PROJECTS, Permission.COMMENT}),
    }
)


def permissions_for(role: UserRole) -> frozenset[Permission]:
    """Return the immutable capability set granted to ``role``."""
    return ROLE_PERMISSIONS[UserRole(role)]


def has_permission(user: User, permission: Permission) -> bool:
    return permission in permissions_for(user.role)


def can_manage_project(user: User, project: Project) -> bool:
    """Owner, any admin, or a project manager who is on the team."""
    return (
        project.owner_id == user.id
        or user.role == UserRole.ADMIN
        or (user.role == UserRole.PROJECT_MANAGER and user.id in project.member_ids)
    )


def can_edit_project(user: User, project: Project) -> bool:
    return can_manage_project(user, project)


def can_invite_users(user: User, project: Project) -> bool:
    return can_manage_project(user, project)


def can_view_project(user: User, project: Project) -> bool:
    return project.has_member(user.id) or user.role == UserRole.ADMIN


def can_assign_tasks(user: User, project: Project) -> bool:
    return has_permission(user, Permission.ASSIGN_TASKS) and can_manage_project(user, project)


def can_edit_task(user: User, task: Task, project: Project | None = None) -> bool:
    """
    Check whether ``user`` may edit ``task``.

    Assignees and admins always may; a project manager may when they own the
    task's project.
    """
    if task.assigned_user_id == user.id or user.role == UserRole.ADMIN:
        return True
    return (
        user.role == UserRole.PROJECT_MANAGER
        and project is not None
        and project.id == task.project_id
        and project.owner_id == user.id
    )
