"""Tests for the data store and its blob backends."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from taskorbit import DataStore, JsonDirectoryBlobStore, MemoryBlobStore, NotFoundError, Priority, UserRole
from taskorbit.enums import StoreTopic
from taskorbit.store import (
    COINS_COMMENT_ADDED,
    COINS_PROJECT_CREATED,
    COINS_TASK_COMPLETED,
    COINS_TASK_CREATED,
    TASKS_KEY,
    USERS_KEY,
)


@pytest.fixture
def events(store):
    received = []
    store.subscribe(received.append)
    return received


def coins(store: DataStore) -> int:
    return store.get_current_user().coins_earned


# ============================================================================
# Loading
# ============================================================================


class TestLoading:
    """Tests for first run and fail-soft loading."""

    def test_empty_store_without_samples(self, store):
        assert store.list_tasks() == []
        assert store.list_projects() == []
        assert store.list_users() == []
        assert store.get_current_user().name == "John Doe"

    def test_first_run_seeds_samples(self, seeded_store, now):
        tasks = seeded_store.list_tasks()
        projects = seeded_store.list_projects()
        current = seeded_store.get_current_user()

        assert len(tasks) == 3
        assert len(projects) == 3
        assert len(seeded_store.list_users()) == 4
        assert all(t.assigned_user_id == current.id for t in tasks)
        assert projects[0].task_ids == [t.id for t in tasks]
        assert all(p.owner_id == current.id for p in projects)
        completed = [t for t in tasks if t.is_completed]
        assert [t.title for t in completed] == ["Market Research"]
        assert completed[0].completed_at == now - timedelta(days=5)

    def test_defaults_are_persisted(self, backend, store):
        assert backend.get(TASKS_KEY) == "[]"
        assert backend.get(USERS_KEY) == "[]"

    def test_reload_from_same_backend(self, backend, store, make_store):
        task = store.create_task("Persist me")
        reloaded = make_store(backend)
        assert [t.id for t in reloaded.list_tasks()] == [task.id]
        assert coins(reloaded) == coins(store)

    def test_corrupt_collection_falls_back(self, backend, store, make_store):
        store.create_user("Keep Me", "keep@x.co")
        backend.set(TASKS_KEY, "{not json")

        reloaded = make_store(backend)

        assert reloaded.list_tasks() == []
        assert [u.name for u in reloaded.list_users()] == ["Keep Me"]
        assert backend.get(TASKS_KEY) == "[]"

    def test_undecodable_file_falls_back(self, tmp_path, make_store, caplog):
        blobs = JsonDirectoryBlobStore(tmp_path)
        blobs.set(USERS_KEY, "[]")
        (tmp_path / "tasks.json").write_bytes(b"\xff\xfe[not utf8")

        with caplog.at_level("WARNING", logger="taskorbit.store"):
            store = make_store(blobs)

        assert store.list_tasks() == []
        assert "tasks" in caplog.text
        assert blobs.get(TASKS_KEY) == "[]"

    def test_corrupt_collection_falls_back_to_samples(self, make_store):
        backend = MemoryBlobStore({TASKS_KEY: '[{"title": ""}]'})
        store = make_store(backend, seed_samples=True)
        assert len(store.list_tasks()) == 3

    def test_fallback_is_logged(self, backend, caplog):
        backend.set(USERS_KEY, "garbage")
        with caplog.at_level("WARNING", logger="taskorbit.store"):
            DataStore(backend, seed_samples=False)
        assert "users" in caplog.text


# ============================================================================
# Tasks
# ============================================================================


class TestTasks:
    """Tests for task CRUD and gamification."""

    def test_create_task_defaults(self, store, now):
        start = coins(store)
        task = store.create_task("Draft proposal", priority=Priority.HIGH, tags=["writing"])

        assert task.assigned_user_id == store.get_current_user().id
        assert task.created_at == now
        assert store.get_task(task.id) == task
        assert coins(store) == start + COINS_TASK_CREATED

    def test_create_task_links_project(self, store):
        project = store.create_project("P")
        task = store.create_task("x", project_id=project.id)
        assert store.get_project(project.id).task_ids == [task.id]
        assert store.get_tasks_for_project(project.id) == [task]

    def test_create_task_unknown_project(self, store):
        with pytest.raises(NotFoundError):
            store.create_task("x", project_id="missing")
        assert store.list_tasks() == []

    def test_create_task_unknown_assignee(self, store):
        with pytest.raises(NotFoundError):
            store.create_task("x", assigned_user_id="nobody")

    def test_create_task_invalid_budget(self, store):
        with pytest.raises(ValidationError):
            store.create_task("x", budget=-1)

    def test_reads_are_copies(self, store):
        task = store.create_task("Original")
        task.title = "Changed outside"
        store.list_tasks()[0].title = "Changed again"
        assert store.get_task(task.id).title == "Original"

    def test_get_missing_task(self, store):
        with pytest.raises(NotFoundError, match="Task 'nope' not found"):
            store.get_task("nope")

    def test_complete_awards_coins_once(self, store, now):
        task = store.create_task("x")
        before = store.get_current_user()

        completed = store.set_task_completion(task.id, True)
        assert completed.is_completed
        assert completed.completed_at == now

        store.set_task_completion(task.id, True)
        after = store.get_current_user()
        assert after.coins_earned == before.coins_earned + COINS_TASK_COMPLETED
        assert after.tasks_completed == before.tasks_completed + 1

    def test_reopen_clears_completion(self, store):
        task = store.create_task("x")
        store.set_task_completion(task.id, True)
        balance = coins(store)

        reopened = store.set_task_completion(task.id, False)

        assert reopened.is_completed is False
        assert reopened.completed_at is None
        assert coins(store) == balance

    def test_update_task_moves_between_projects(self, store):
        first = store.create_project("First")
        second = store.create_project("Second")
        task = store.create_task("x", project_id=first.id)

        store.update_task(task.model_copy(update={"project_id": second.id}))

        assert store.get_project(first.id).task_ids == []
        assert store.get_project(second.id).task_ids == [task.id]

    def test_update_task_to_unknown_project(self, store):
        task = store.create_task("x")
        with pytest.raises(NotFoundError):
            store.update_task(task.model_copy(update={"project_id": "missing"}))

    def test_delete_task_unlinks(self, store):
        project = store.create_project("P")
        task = store.create_task("x", project_id=project.id)
        store.delete_task(task.id)
        assert store.list_tasks() == []
        assert store.get_project(project.id).task_ids == []

    def test_add_comment(self, store):
        task = store.create_task("x")
        start = coins(store)

        comment = store.add_comment(task.id, "Looks good")

        stored = store.get_task(task.id)
        assert stored.comments == [comment]
        assert comment.author_name == "John Doe"
        assert coins(store) == start + COINS_COMMENT_ADDED

    def test_comment_on_missing_task(self, store):
        with pytest.raises(NotFoundError):
            store.add_comment("missing", "hello")


# ============================================================================
# Projects and users
# ============================================================================


class TestProjects:
    """Tests for project CRUD, teams and cascades."""

    def test_create_project_rewards_owner(self, store, now):
        before = store.get_current_user()
        project = store.create_project("P", budget=5000)

        after = store.get_current_user()
        assert project.owner_id == before.id
        assert project.start_date == now
        assert after.projects_owned == before.projects_owned + 1
        assert after.coins_earned == before.coins_earned + COINS_PROJECT_CREATED

    def test_project_for_someone_else_earns_nothing(self, store):
        other = store.create_user("Other", "other@x.co")
        balance = coins(store)
        store.create_project("Theirs", owner_id=other.id)
        assert coins(store) == balance

    def test_create_project_unknown_member(self, store):
        with pytest.raises(NotFoundError):
            store.create_project("P", member_ids=["ghost"])

    def test_delete_project_cascades_to_tasks(self, store):
        keep = store.create_project("Keep")
        doomed = store.create_project("Doomed")
        kept_task = store.create_task("stays", project_id=keep.id)
        store.create_task("goes", project_id=doomed.id)
        store.create_task("goes too", project_id=doomed.id)
        owned = store.get_current_user().projects_owned

        store.delete_project(doomed.id)

        assert [t.id for t in store.list_tasks()] == [kept_task.id]
        assert [p.id for p in store.list_projects()] == [keep.id]
        assert store.get_current_user().projects_owned == owned - 1

    def test_projects_owned_never_negative(self, store):
        store.update_current_user(store.get_current_user().model_copy(update={"projects_owned": 0}))
        project = store.create_project("P")
        store.update_current_user(store.get_current_user().model_copy(update={"projects_owned": 0}))
        store.delete_project(project.id)
        assert store.get_current_user().projects_owned == 0

    def test_members(self, store):
        project = store.create_project("P")
        user = store.create_user("Sarah Chen", "sarah@x.co", UserRole.PROJECT_MANAGER)

        store.add_project_member(project.id, user.id)
        store.add_project_member(project.id, user.id)
        assert store.get_project(project.id).member_ids == [user.id]
        assert store.get_projects_for_user(user.id) == [store.get_project(project.id)]

        store.remove_project_member(project.id, user.id)
        assert store.get_project(project.id).member_ids == []

    def test_invite_creates_user_once(self, store):
        project = store.create_project("P")

        invited = store.invite_user("new.person@x.co", project.id)
        again = store.invite_user("NEW.PERSON@x.co", project.id)

        assert invited.id == again.id
        assert invited.name == "New.person"
        assert len(store.list_users()) == 1
        assert store.get_project(project.id).member_ids == [invited.id]

    def test_invite_to_missing_project(self, store):
        with pytest.raises(NotFoundError):
            store.invite_user("a@x.co", "missing")
        assert store.list_users() == []


class TestUsers:
    """Tests for user CRUD."""

    def test_get_user_finds_current_user(self, store):
        current = store.get_current_user()
        assert store.get_user(current.id) == current

    def test_delete_user_unassigns_and_leaves_teams(self, store):
        user = store.create_user("Mike", "mike@x.co")
        project = store.create_project("P", member_ids=[user.id])
        task = store.create_task("x", project_id=project.id, assigned_user_id=user.id)

        store.delete_user(user.id)

        assert store.list_users() == []
        assert store.get_project(project.id).member_ids == []
        assert store.get_task(task.id).assigned_user_id is None

    def test_update_user(self, store):
        user = store.create_user("Emma", "emma@x.co")
        store.update_user(user.model_copy(update={"role": UserRole.VIEWER}))
        assert store.get_user(user.id).role == UserRole.VIEWER

    def test_delete_missing_user(self, store):
        with pytest.raises(NotFoundError):
            store.delete_user("ghost")


# ============================================================================
# Events, onboarding, reset, export and import
# ============================================================================


class TestEvents:
    """Tests for change notifications."""

    def test_task_creation_events(self, store, events):
        task = store.create_task("x")
        assert [e.topic for e in events] == [StoreTopic.TASK_CREATED, StoreTopic.COINS_AWARDED]
        assert events[0].entity_id == task.id
        assert events[1].detail == {"amount": COINS_TASK_CREATED, "reason": "Task Created"}

    def test_project_deletion_event_lists_removed_tasks(self, store, events):
        project = store.create_project("P")
        task = store.create_task("x", project_id=project.id)
        store.delete_project(project.id)
        assert events[-1].topic == StoreTopic.PROJECT_DELETED
        assert events[-1].detail["removed_task_ids"] == [task.id]

    def test_unsubscribe(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        unsubscribe()
        store.create_task("x")
        assert received == []


class TestDataManagement:
    """Tests for onboarding, reset and backup."""

    def test_onboarding_flag(self, backend, store):
        assert store.has_completed_onboarding is False
        store.has_completed_onboarding = True
        assert DataStore(backend, seed_samples=False).has_completed_onboarding is True

    def test_reset_restores_defaults(self, store, events):
        store.create_task("x")
        store.has_completed_onboarding = True

        store.reset_all_data()

        assert store.list_tasks() == []
        assert store.has_completed_onboarding is False
        assert events[-1].topic == StoreTopic.DATA_RESET

    def test_export_import_round_trip(self, seeded_store, store):
        seeded_store.add_comment(seeded_store.list_tasks()[0].id, "note")

        assert store.import_data(seeded_store.export_data()) is True

        assert store.list_tasks() == seeded_store.list_tasks()
        assert store.list_projects() == seeded_store.list_projects()
        assert store.list_users() == seeded_store.list_users()
        assert store.get_current_user() == seeded_store.get_current_user()

    def test_import_is_persisted(self, backend, seeded_store, store):
        store.import_data(seeded_store.export_data())
        reloaded = DataStore(backend, seed_samples=False)
        assert len(reloaded.list_tasks()) == 3

    @pytest.mark.parametrize("payload", ["", "not json", "[]", '{"tasks": []}'])
    def test_bad_import_changes_nothing(self, store, events, payload):
        task = store.create_task("x")
        events.clear()

        assert store.import_data(payload) is False
        assert [t.id for t in store.list_tasks()] == [task.id]
        assert events == []


# ============================================================================
# Blob backends
# ============================================================================


class TestJsonDirectoryBlobStore:
    """Tests for the on-disk backend."""

    def test_set_get_delete(self, tmp_path):
        blobs = JsonDirectoryBlobStore(tmp_path / "data")
        assert blobs.get("tasks") is None

        blobs.set("tasks", "[1]")
        assert blobs.get("tasks") == "[1]"
        assert (tmp_path / "data" / "tasks.json").read_text() == "[1]"

        blobs.delete("tasks")
        blobs.delete("tasks")
        assert blobs.get("tasks") is None

    def test_no_temp_files_left_behind(self, tmp_path):
        blobs = JsonDirectoryBlobStore(tmp_path)
        blobs.set("users", "[]")
        blobs.set("users", "[{}]")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["users.json"]

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden"])
    def test_invalid_keys(self, tmp_path, key):
        with pytest.raises(ValueError):
            JsonDirectoryBlobStore(tmp_path).set(key, "x")

    def test_store_survives_restart(self, tmp_path, make_store):
        first = make_store(JsonDirectoryBlobStore(tmp_path))
        project = first.create_project("On disk")

        second = make_store(JsonDirectoryBlobStore(tmp_path))

        assert second.get_project(project.id).name == "On disk"
        assert second.get_current_user() == first.get_current_user()


def test_memory_blob_store_keys():
    blobs = MemoryBlobStore({"b": "1"})
    blobs.set("a", "2")
    assert blobs.keys() == ["a", "b"]
