"""
Completion synchronizer and presentation session tests.

Status transitions, persist-then-commit ordering and failure handling.
"""

import pytest
from pydantic import ValidationError as SchemaValidationError

from podium.errors import NotFoundError, StoreUnavailableError, ValidationError
from podium.schemas import OutlineStatus, Section
from podium.session import CompletionSynchronizer, InMemoryOutlineStore, SQLiteOutlineStore

from conftest import make_draft


class RecordingStore(InMemoryOutlineStore):
    """In-memory store that counts writes and can be told to fail reads or writes."""

    def __init__(self, failure: Exception | None = None):
        super().__init__()
        self.failure = failure
        self.get_failure: Exception | None = None
        self.updates: list[dict] = []

    def get(self, outline_id):
        if self.get_failure is not None:
            raise self.get_failure
        return super().get(outline_id)

    def update(self, outline_id, fields):
        if self.failure is not None:
            raise self.failure
        self.updates.append(dict(fields))
        return super().update(outline_id, fields)


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def synchronizer(recording_store) -> CompletionSynchronizer:
    return CompletionSynchronizer(recording_store)


@pytest.fixture
def session(recording_store, synchronizer):
    outline = recording_store.create(make_draft(3))
    return synchronizer.open_session(outline.id)


class TestOpenSession:
    """Test loading an outline for delivery."""

    def test_draft_becomes_active(self, recording_store, synchronizer):
        outline = recording_store.create(make_draft(3))
        session = synchronizer.open_session(outline.id)

        assert session.outline.status == OutlineStatus.ACTIVE
        assert recording_store.get(outline.id).status == OutlineStatus.ACTIVE
        assert session.current_index == 0
        assert session.is_focus_mode is False

    def test_completed_outline_stays_completed(self, recording_store, synchronizer):
        outline = recording_store.create(make_draft(1))
        recording_store.update(outline.id, {
            "sections": [{"title": "Part 1", "completed": True}],
            "status": "completed",
        })
        writes = len(recording_store.updates)

        session = synchronizer.open_session(outline.id)
        assert session.outline.status == OutlineStatus.COMPLETED
        assert session.is_finished
        assert len(recording_store.updates) == writes

    def test_unknown_id(self, synchronizer):
        with pytest.raises(NotFoundError):
            synchronizer.open_session("missing")

    def test_store_failure_on_update(self):
        store = RecordingStore()
        outline = store.create(make_draft(2))
        store.failure = StoreUnavailableError("offline")

        with pytest.raises(StoreUnavailableError):
            CompletionSynchronizer(store).open_session(outline.id)
        assert store.get(outline.id).status == OutlineStatus.DRAFT

    def test_store_failure_on_get(self):
        store = RecordingStore()
        outline = store.create(make_draft(2))
        store.get_failure = OSError("offline")

        with pytest.raises(StoreUnavailableError) as exc_info:
            CompletionSynchronizer(store).open_session(outline.id)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert store.updates == []

    def test_unexpected_store_error_is_wrapped(self):
        store = RecordingStore()
        outline = store.create(make_draft(2))
        store.failure = ConnectionError("socket closed")

        with pytest.raises(StoreUnavailableError) as exc_info:
            CompletionSynchronizer(store).open_session(outline.id)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_sessions_are_independent(self, recording_store, synchronizer):
        first = synchronizer.open_session(recording_store.create(make_draft(3)).id)
        second = synchronizer.open_session(recording_store.create(make_draft(3)).id)
        first.advance()
        first.toggle_focus_mode()
        assert second.current_index == 0
        assert second.is_focus_mode is False


class TestCompleteSection:
    """Test completing sections and the status transitions it drives."""

    def test_three_section_walkthrough(self, session, recording_store):
        session.complete_section(0)
        session.complete_section(1)
        progress = session.progress()
        assert session.outline.status == OutlineStatus.ACTIVE
        assert progress["completed"] == 2
        assert progress["progress_percent"] == pytest.approx(66.7, abs=0.05)

        session.complete_section(2)
        progress = session.progress()
        assert session.outline.status == OutlineStatus.COMPLETED
        assert progress["progress_percent"] == 100
        assert recording_store.get(session.outline.id).status == OutlineStatus.COMPLETED

    def test_walkthrough_against_sqlite_store(self, tmp_path):
        store = SQLiteOutlineStore(tmp_path / "outlines.db")
        outline = store.create(make_draft(3))
        session = CompletionSynchronizer(store).open_session(outline.id)
        assert store.get(outline.id).status == OutlineStatus.ACTIVE

        session.complete_section(0)
        session.complete_section(1)
        stored = store.get(outline.id)
        assert stored.status == OutlineStatus.ACTIVE
        assert [s.completed for s in stored.sections] == [True, True, False]

        session.complete_section(2)
        stored = store.get(outline.id)
        assert stored.status == OutlineStatus.COMPLETED
        assert stored.sections == session.outline.sections

        session.undo_section(1)
        stored = store.get(outline.id)
        assert stored.status == OutlineStatus.ACTIVE
        assert [s.completed for s in stored.sections] == [True, False, True]
        assert stored.total_duration == outline.total_duration

    def test_persisted_and_local_state_match(self, session, recording_store):
        session.complete_section(1)
        stored = recording_store.get(session.outline.id)
        assert stored.sections == session.outline.sections
        assert stored.status == session.outline.status

    def test_writes_sections_and_status(self, session, recording_store):
        recording_store.updates.clear()
        session.complete_section(0)
        assert len(recording_store.updates) == 1
        write = recording_store.updates[0]
        assert set(write) == {"sections", "status"}
        assert write["status"] == OutlineStatus.ACTIVE
        assert [s.completed for s in write["sections"]] == [True, False, False]

    def test_redundant_complete_still_writes(self, session, recording_store):
        session.complete_section(0)
        recording_store.updates.clear()
        session.complete_section(0)
        assert len(recording_store.updates) == 1
        assert [s.completed for s in session.outline.sections] == [True, False, False]

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_index_out_of_range(self, session, recording_store, index):
        recording_store.updates.clear()
        with pytest.raises(ValidationError):
            session.complete_section(index)
        assert recording_store.updates == []

    def test_complete_current_follows_cursor(self, session):
        session.advance()
        session.complete_current()
        assert [s.completed for s in session.outline.sections] == [False, True, False]

    def test_navigator_sees_committed_sections(self, session):
        session.complete_current()
        assert session.current_section.completed is True


class TestUndoSection:
    """Test undoing completion."""

    def test_undo_on_completed_outline(self, session):
        for index in range(3):
            session.complete_section(index)
        assert session.outline.status == OutlineStatus.COMPLETED

        session.undo_section(1)
        assert session.outline.status == OutlineStatus.ACTIVE
        assert session.progress()["completed"] == 2

    def test_complete_then_undo_restores_sections(self, session):
        before = [s.model_copy() for s in session.outline.sections]
        session.complete_section(2)
        session.undo_section(2)
        assert session.outline.sections == before
        assert session.outline.status == OutlineStatus.ACTIVE

    def test_undo_never_returns_to_draft(self, recording_store, synchronizer):
        outline = recording_store.create(make_draft(2))
        assert outline.status == OutlineStatus.DRAFT
        synchronizer.undo_section(outline, 0)
        assert outline.status == OutlineStatus.ACTIVE

    def test_redundant_undo_still_writes(self, session, recording_store):
        recording_store.updates.clear()
        session.undo_current()
        assert len(recording_store.updates) == 1
        assert recording_store.updates[0]["status"] == OutlineStatus.ACTIVE

    def test_index_out_of_range(self, session):
        with pytest.raises(ValidationError):
            session.undo_section(3)


class TestFailedWrites:
    """A failed persist leaves the in-memory outline untouched."""

    def test_complete_failure_keeps_state(self, session, recording_store):
        session.complete_section(0)
        before_sections = [s.model_copy() for s in session.outline.sections]
        recording_store.failure = StoreUnavailableError("timeout")

        with pytest.raises(StoreUnavailableError):
            session.complete_section(1)
        assert session.outline.sections == before_sections
        assert session.outline.status == OutlineStatus.ACTIVE

    def test_last_section_failure_keeps_active(self, session, recording_store):
        session.complete_section(0)
        session.complete_section(1)
        recording_store.failure = StoreUnavailableError("timeout")

        with pytest.raises(StoreUnavailableError):
            session.complete_section(2)
        assert session.outline.status == OutlineStatus.ACTIVE
        assert session.outline.sections[2].completed is False
        assert session.is_finished is False

    def test_undo_failure_keeps_state(self, session, recording_store):
        for index in range(3):
            session.complete_section(index)
        recording_store.failure = RuntimeError("disk full")

        with pytest.raises(StoreUnavailableError):
            session.undo_section(0)
        assert session.outline.status == OutlineStatus.COMPLETED
        assert all(s.completed for s in session.outline.sections)

    def test_store_not_found_propagates(self, session, recording_store):
        recording_store.failure = NotFoundError(session.outline.id)
        with pytest.raises(NotFoundError):
            session.complete_current()
        assert session.outline.sections[0].completed is False

    def test_schema_error_from_store_is_not_wrapped(self, session, recording_store):
        with pytest.raises(SchemaValidationError) as exc_info:
            Section(title="")
        recording_store.failure = exc_info.value

        with pytest.raises(SchemaValidationError):
            session.complete_current()
        assert session.outline.sections[0].completed is False

    def test_session_usable_after_failure(self, session, recording_store):
        recording_store.failure = StoreUnavailableError("timeout")
        with pytest.raises(StoreUnavailableError):
            session.complete_current()

        recording_store.failure = None
        session.complete_current()
        assert session.outline.sections[0].completed is True


class TestStatusInvariant:
    """status == completed iff every section is completed and there is at least one."""

    def test_invariant_through_mixed_operations(self, session):
        operations = [
            ("complete", 0), ("complete", 2), ("undo", 0), ("complete", 1),
            ("complete", 0), ("undo", 2), ("complete", 2), ("undo", 1),
        ]
        for op, index in operations:
            if op == "complete":
                session.complete_section(index)
            else:
                session.undo_section(index)
            is_completed = session.outline.status == OutlineStatus.COMPLETED
            assert is_completed == session.outline.all_completed
            assert session.outline.status != OutlineStatus.DRAFT

    def test_navigation_does_not_write(self, session, recording_store):
        recording_store.updates.clear()
        session.advance()
        session.handle_drag(80)
        session.toggle_focus_mode()
        session.exit_focus_mode()
        assert recording_store.updates == []
