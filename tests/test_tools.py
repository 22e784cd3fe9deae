"""Tests for the TaskOrbit MCP tools."""

import json

import pytest
from pydantic import ValidationError

from taskorbit import (
    AddCommentInput,
    AddProjectInput,
    AddTaskInput,
    AddUserInput,
    CompleteTaskInput,
    DeleteProjectInput,
    DeleteTaskInput,
    DeleteUserInput,
    ExportInput,
    FinancialSummaryInput,
    GetTaskInput,
    ImportInput,
    ListProjectsInput,
    ListTasksInput,
    ListUsersInput,
    Priority,
    ProductivityInput,
    ProjectAnalyticsInput,
    ProjectMemberInput,
    ResponseFormat,
    TaskSortKey,
    TeamProductivityInput,
    UpdateTaskInput,
    UserRole,
    taskorbit_add_comment,
    taskorbit_add_project,
    taskorbit_add_task,
    taskorbit_add_user,
    taskorbit_complete_task,
    taskorbit_delete_project,
    taskorbit_delete_task,
    taskorbit_delete_user,
    taskorbit_export,
    taskorbit_financial_summary,
    taskorbit_get_task,
    taskorbit_import,
    taskorbit_list_projects,
    taskorbit_list_tasks,
    taskorbit_list_users,
    taskorbit_productivity,
    taskorbit_project_analytics,
    taskorbit_project_members,
    taskorbit_team_productivity,
    taskorbit_update_task,
)
from taskorbit import _format_task_concise as format_task_concise
from taskorbit import _format_tasks_markdown as format_tasks_markdown
from taskorbit.models.task import Task


def demote_current_user(store, role=UserRole.VIEWER):
    store.update_current_user(store.get_current_user().model_copy(update={"role": role}))


# ============================================================================
# Input Models
# ============================================================================


class TestInputModels:
    """Tests for tool input validation."""

    def test_list_tasks_input_defaults(self):
        params = ListTasksInput()
        assert params.search == ""
        assert params.sort_by == TaskSortKey.DUE_DATE
        assert params.include_completed is True
        assert params.limit == 50
        assert params.response_format == ResponseFormat.MARKDOWN

    def test_list_tasks_input_limit_validation(self):
        with pytest.raises(ValidationError):
            ListTasksInput(limit=0)
        with pytest.raises(ValidationError):
            ListTasksInput(limit=501)

    def test_list_tasks_input_rejects_unknown_priority(self):
        with pytest.raises(ValidationError):
            ListTasksInput(priority="critical")

    def test_add_task_input_strips_whitespace(self):
        assert AddTaskInput(title="  Draft proposal  ").title == "Draft proposal"

    def test_add_task_input_empty_title_fails(self):
        with pytest.raises(ValidationError):
            AddTaskInput(title="   ")

    def test_update_task_input_cannot_set_and_clear(self):
        with pytest.raises(ValidationError):
            UpdateTaskInput(task_id="t", budget=10, clear_budget=True)

    def test_project_member_input_requires_target(self):
        with pytest.raises(ValidationError):
            ProjectMemberInput(project_id="p", action="invite")
        with pytest.raises(ValidationError):
            ProjectMemberInput(project_id="p", action="remove")
        assert ProjectMemberInput(project_id="p", action="invite", email="a@b.co").role == UserRole.MEMBER

    def test_add_project_input_color(self):
        with pytest.raises(ValidationError):
            AddProjectInput(name="P", color="orange")


# ============================================================================
# Formatters
# ============================================================================


class TestFormatters:
    """Tests for task formatting."""

    def test_concise_task(self, now):
        task = Task(title="Design App Logo", priority=Priority.HIGH, due_date=now, budget=500, actual_cost=450)
        line = format_task_concise(task)
        assert line.startswith(f"#{task.id[:8]}: Design App Logo")
        assert "high" in line
        assert "due:2024-06-12" in line
        assert "$450.00/$500.00" in line

    def test_markdown_empty_list(self):
        assert format_tasks_markdown([]) == "# Tasks\n\nNo tasks found."

    def test_markdown_over_budget(self):
        result = format_tasks_markdown([Task(title="Costly", budget=100, actual_cost=150)], title="Work")
        assert result.startswith("# Work")
        assert "Over budget by $50.00" in result


# ============================================================================
# Task tools
# ============================================================================


class TestTaskTools:
    """Tests for the task tools."""

    @pytest.mark.asyncio
    async def test_add_and_get_task(self, ctx, store):
        result = await taskorbit_add_task(AddTaskInput(title="Draft proposal", budget=200, tags=["writing"]), ctx)
        assert "created successfully" in result

        task = store.list_tasks()[0]
        detail = await taskorbit_get_task(GetTaskInput(task_id=task.id), ctx)
        assert "Draft proposal" in detail
        assert "writing" in detail

    @pytest.mark.asyncio
    async def test_add_task_unknown_project(self, ctx):
        result = await taskorbit_add_task(AddTaskInput(title="x", project_id="missing"), ctx)
        assert result.startswith("Error:")
        assert "taskorbit_list_projects" in result

    @pytest.mark.asyncio
    async def test_get_task_not_found(self, ctx):
        result = await taskorbit_get_task(GetTaskInput(task_id="999"), ctx)
        assert "not found" in result.lower()

    @pytest.mark.asyncio
    async def test_get_task_json(self, ctx, store):
        task = store.create_task("JSON me")
        result = await taskorbit_get_task(GetTaskInput(task_id=task.id, response_format=ResponseFormat.JSON), ctx)
        assert json.loads(result)["title"] == "JSON me"

    @pytest.mark.asyncio
    async def test_list_tasks_filters_and_sorts(self, ctx, store):
        store.create_task("low one", priority=Priority.LOW)
        store.create_task("urgent one", priority=Priority.URGENT)
        done = store.create_task("finished", priority=Priority.HIGH)
        store.set_task_completion(done.id, True)

        result = await taskorbit_list_tasks(
            ListTasksInput(
                include_completed=False,
                sort_by=TaskSortKey.PRIORITY,
                response_format=ResponseFormat.JSON,
            ),
            ctx,
        )
        data = json.loads(result)
        assert data["total"] == 2
        assert [t["title"] for t in data["tasks"]] == ["urgent one", "low one"]

    @pytest.mark.asyncio
    async def test_list_tasks_limit(self, ctx, store):
        for i in range(3):
            store.create_task(f"task {i}")
        data = json.loads(
            await taskorbit_list_tasks(ListTasksInput(limit=2, response_format=ResponseFormat.JSON), ctx)
        )
        assert data["total"] == 3
        assert data["count"] == 2

    @pytest.mark.asyncio
    async def test_list_tasks_concise_and_empty(self, ctx, store):
        assert await taskorbit_list_tasks(ListTasksInput(response_format=ResponseFormat.CONCISE), ctx) == "0 tasks"
        store.create_task("Report")
        result = await taskorbit_list_tasks(ListTasksInput(search="rep", response_format=ResponseFormat.CONCISE), ctx)
        assert result.startswith("1 task(s) | search:rep")

    @pytest.mark.asyncio
    async def test_update_task(self, ctx, store, now):
        task = store.create_task("Old", tags=["a", "b"], due_date=now, budget=100)

        result = await taskorbit_update_task(
            UpdateTaskInput(
                task_id=task.id,
                title="New",
                priority=Priority.URGENT,
                clear_due_date=True,
                add_tags=["c"],
                remove_tags=["a"],
            ),
            ctx,
        )

        assert "updated successfully" in result
        updated = store.get_task(task.id)
        assert updated.title == "New"
        assert updated.priority == Priority.URGENT
        assert updated.due_date is None
        assert updated.budget == 100
        assert updated.tags == ["b", "c"]

    @pytest.mark.asyncio
    async def test_update_task_requires_changes(self, ctx, store):
        task = store.create_task("x")
        result = await taskorbit_update_task(UpdateTaskInput(task_id=task.id), ctx)
        assert result.startswith("Error: No changes")

    @pytest.mark.asyncio
    async def test_update_task_unknown_assignee(self, ctx, store):
        task = store.create_task("x")
        result = await taskorbit_update_task(UpdateTaskInput(task_id=task.id, assigned_user_id="ghost"), ctx)
        assert "not found" in result
        assert store.get_task(task.id).assigned_user_id == store.get_current_user().id

    @pytest.mark.asyncio
    async def test_update_task_permission_denied(self, ctx, store):
        other = store.create_user("Other", "other@x.co")
        task = store.create_task("theirs", assigned_user_id=other.id)
        demote_current_user(store, UserRole.MEMBER)

        result = await taskorbit_update_task(UpdateTaskInput(task_id=task.id, title="mine now"), ctx)

        assert "permission" in result
        assert store.get_task(task.id).title == "theirs"

    @pytest.mark.asyncio
    async def test_complete_and_reopen(self, ctx, store):
        task = store.create_task("Ship it")
        coins = store.get_current_user().coins_earned

        result = await taskorbit_complete_task(CompleteTaskInput(task_id=task.id), ctx)
        assert "completed" in result
        assert store.get_current_user().coins_earned == coins + 25

        result = await taskorbit_complete_task(CompleteTaskInput(task_id=task.id, completed=False), ctx)
        assert "reopened" in result
        assert store.get_task(task.id).completed_at is None

    @pytest.mark.asyncio
    async def test_complete_missing_task(self, ctx):
        result = await taskorbit_complete_task(CompleteTaskInput(task_id="nope"), ctx)
        assert "Error" in result

    @pytest.mark.asyncio
    async def test_delete_task(self, ctx, store):
        task = store.create_task("Remove me")
        result = await taskorbit_delete_task(DeleteTaskInput(task_id=task.id), ctx)
        assert "deleted" in result.lower()
        assert store.list_tasks() == []

    @pytest.mark.asyncio
    async def test_delete_task_not_found(self, ctx):
        result = await taskorbit_delete_task(DeleteTaskInput(task_id="999"), ctx)
        assert "Error" in result

    @pytest.mark.asyncio
    async def test_add_comment(self, ctx, store):
        task = store.create_task("Discuss")
        result = await taskorbit_add_comment(AddCommentInput(task_id=task.id, text="Agreed"), ctx)
        assert "John Doe" in result
        assert store.get_task(task.id).comments[0].text == "Agreed"


# ============================================================================
# Project and team tools
# ============================================================================


class TestProjectTools:
    """Tests for the project and team tools."""

    @pytest.mark.asyncio
    async def test_add_and_list_projects(self, ctx, store):
        result = await taskorbit_add_project(AddProjectInput(name="Mobile App", budget=15000), ctx)
        assert "created" in result

        project = store.list_projects()[0]
        task = store.create_task("x", project_id=project.id)
        store.set_task_completion(task.id, True)
        store.create_task("y", project_id=project.id)

        data = json.loads(await taskorbit_list_projects(ListProjectsInput(response_format=ResponseFormat.JSON), ctx))
        assert data[0]["name"] == "Mobile App"
        assert data[0]["progress"] == pytest.approx(0.5)

        markdown = await taskorbit_list_projects(ListProjectsInput(search="mobile"), ctx)
        assert "**Progress**: 50%" in markdown

    @pytest.mark.asyncio
    async def test_viewer_cannot_create_project(self, ctx, store):
        demote_current_user(store)
        result = await taskorbit_add_project(AddProjectInput(name="Nope"), ctx)
        assert "permission" in result
        assert store.list_projects() == []

    @pytest.mark.asyncio
    async def test_delete_project_cascades(self, ctx, store):
        project = store.create_project("Doomed")
        store.create_task("a", project_id=project.id)
        store.create_task("b", project_id=project.id)

        result = await taskorbit_delete_project(DeleteProjectInput(project_id=project.id), ctx)

        assert "2 task(s)" in result
        assert store.list_tasks() == []

    @pytest.mark.asyncio
    async def test_delete_project_requires_management(self, ctx, store):
        other = store.create_user("Other", "other@x.co")
        project = store.create_project("Theirs", owner_id=other.id)
        demote_current_user(store, UserRole.MEMBER)

        result = await taskorbit_delete_project(DeleteProjectInput(project_id=project.id), ctx)

        assert "permission" in result
        assert len(store.list_projects()) == 1

    @pytest.mark.asyncio
    async def test_project_members(self, ctx, store):
        project = store.create_project("Team")
        user = store.create_user("Mike", "mike@x.co")

        added = await taskorbit_project_members(ProjectMemberInput(project_id=project.id, user_id=user.id), ctx)
        assert "Team size: 2" in added

        invited = await taskorbit_project_members(
            ProjectMemberInput(project_id=project.id, action="invite", email="emma@x.co"), ctx
        )
        assert "Team size: 3" in invited

        removed = await taskorbit_project_members(
            ProjectMemberInput(project_id=project.id, action="remove", user_id=user.id), ctx
        )
        assert "Team size: 2" in removed

        owner = await taskorbit_project_members(
            ProjectMemberInput(project_id=project.id, action="remove", user_id=project.owner_id), ctx
        )
        assert owner.startswith("Error")

    @pytest.mark.asyncio
    async def test_list_users_includes_current_user(self, ctx, store):
        store.create_user("Sarah Chen", "sarah@x.co", UserRole.PROJECT_MANAGER)
        result = await taskorbit_list_users(ListUsersInput(), ctx)
        assert "John Doe** (you)" in result
        assert "Sarah Chen" in result

        data = json.loads(await taskorbit_list_users(ListUsersInput(search="sarah", response_format="json"), ctx))
        assert [u["name"] for u in data] == ["Sarah Chen"]

    @pytest.mark.asyncio
    async def test_add_and_delete_user(self, ctx, store):
        result = await taskorbit_add_user(AddUserInput(name="Emma", email="emma@x.co"), ctx)
        assert "added" in result
        user = store.list_users()[0]

        result = await taskorbit_delete_user(DeleteUserInput(user_id=user.id), ctx)
        assert "removed" in result
        assert store.list_users() == []

    @pytest.mark.asyncio
    async def test_add_user_invalid_email(self, ctx):
        result = await taskorbit_add_user(AddUserInput(email="nope"), ctx)
        assert result.startswith("Error: Invalid input")

    @pytest.mark.asyncio
    async def test_cannot_delete_current_user(self, ctx, store):
        result = await taskorbit_delete_user(DeleteUserInput(user_id=store.get_current_user().id), ctx)
        assert result.startswith("Error")


# ============================================================================
# Analytics tools
# ============================================================================


class TestAnalyticsTools:
    """Tests for the analytics tools."""

    @pytest.mark.asyncio
    async def test_project_analytics_example(self, ctx, store):
        project = store.create_project("P")
        a = store.create_task("A", budget=500, actual_cost=450, project_id=project.id)
        store.create_task("B", budget=1200, actual_cost=800, project_id=project.id)
        store.set_task_completion(a.id, True)

        result = await taskorbit_project_analytics(
            ProjectAnalyticsInput(project_id=project.id, response_format=ResponseFormat.JSON), ctx
        )

        (snapshot,) = json.loads(result)
        assert snapshot["total_budget"] == 1700
        assert snapshot["actual_cost"] == 1250
        assert snapshot["progress"] == 0.5
        assert snapshot["profit_margin"] == pytest.approx(26.47, abs=0.01)
        assert snapshot["completion_trend"][-1] == {"day": "2024-06-12", "completed_tasks": 1}

    @pytest.mark.asyncio
    async def test_project_analytics_all_projects(self, seeded_store, make_ctx):
        result = await taskorbit_project_analytics(ProjectAnalyticsInput(), make_ctx(seeded_store))
        assert result.count("## ") == 3
        assert "TaskOrbit Mobile App" in result

    @pytest.mark.asyncio
    async def test_project_analytics_requires_permission(self, ctx, store):
        demote_current_user(store)
        assert "permission" in await taskorbit_project_analytics(ProjectAnalyticsInput(), ctx)
        assert "permission" in await taskorbit_financial_summary(FinancialSummaryInput(), ctx)

    @pytest.mark.asyncio
    async def test_productivity_for_current_user(self, ctx, store):
        task = store.create_task("x")
        store.set_task_completion(task.id, True)

        data = json.loads(await taskorbit_productivity(ProductivityInput(response_format="json"), ctx))

        assert data["total_tasks_completed"] == 1
        assert data["streak_days"] == 1
        assert data["completion_rate"] == 100.0
        assert data["coins_earned"] == store.get_current_user().coins_earned

    @pytest.mark.asyncio
    async def test_productivity_for_user_without_tasks(self, ctx, store):
        user = store.create_user("Idle", "idle@x.co")
        result = await taskorbit_productivity(ProductivityInput(user_id=user.id), ctx)
        assert "# Productivity: Idle" in result
        assert "**Streak**: 0 day(s)" in result

    @pytest.mark.asyncio
    async def test_productivity_unknown_user(self, ctx):
        result = await taskorbit_productivity(ProductivityInput(user_id="ghost"), ctx)
        assert "taskorbit_list_users" in result

    @pytest.mark.asyncio
    async def test_financial_summary_empty(self, ctx):
        data = json.loads(await taskorbit_financial_summary(FinancialSummaryInput(response_format="json"), ctx))
        assert data["total_budget"] == 0
        assert len(data["monthly_spending"]) == 6
        assert data["monthly_spending"][-1]["label"] == "June"

    @pytest.mark.asyncio
    async def test_financial_summary_markdown(self, seeded_store, make_ctx):
        result = await taskorbit_financial_summary(FinancialSummaryInput(), make_ctx(seeded_store))
        assert "# Financial Summary" in result
        # Sample tasks (2000) plus sample projects (22000)
        assert "$24,000.00" in result

    @pytest.mark.asyncio
    async def test_team_productivity(self, ctx, store):
        member = store.create_user("Mike", "mike@x.co")
        project = store.create_project("Team", member_ids=[member.id])
        store.create_task("his", project_id=project.id, assigned_user_id=member.id)

        result = await taskorbit_team_productivity(TeamProductivityInput(project_id=project.id), ctx)

        assert "# Team: Team" in result
        assert "**Mike**: 0/1" in result
        assert "**John Doe**: 0/0" in result


# ============================================================================
# Backup tools
# ============================================================================


class TestBackupTools:
    """Tests for export and import."""

    @pytest.mark.asyncio
    async def test_export_import_round_trip(self, seeded_store, store, make_ctx, ctx):
        exported = await taskorbit_export(ExportInput(), make_ctx(seeded_store))

        result = await taskorbit_import(ImportInput(payload=exported), ctx)

        assert "3 task(s), 3 project(s), 4 user(s)" in result
        assert store.list_tasks() == seeded_store.list_tasks()

    @pytest.mark.asyncio
    async def test_import_rejects_garbage(self, ctx, store):
        store.create_task("keep")
        result = await taskorbit_import(ImportInput(payload="{broken"), ctx)
        assert result.startswith("Error")
        assert [t.title for t in store.list_tasks()] == ["keep"]
