"""Tests for the in-memory session store."""

import threading

from questions_ui.schemas import Question
from questions_ui.store import SessionStore, get_store


class TestCreateAndGet:
    """Test session creation and lookup."""

    def test_create_then_get_is_unanswered(self, store, sample_questions):
        """A new session has no answers and the input questions."""
        session = store.create(sample_questions, title="T", context="C")

        fetched = store.get(session.id)

        assert fetched is not None
        assert fetched.answers is None
        assert fetched.questions == sample_questions
        assert fetched.title == "T"
        assert fetched.context == "C"

    def test_created_at_is_epoch_millis(self, store, sample_questions):
        session = store.create(sample_questions)
        assert session.created_at > 1_000_000_000_000

    def test_ids_are_unique(self, store, sample_questions):
        """Session ids are never reused."""
        ids = {store.create(sample_questions).id for _ in range(200)}
        assert len(ids) == 200
        assert len(store) == 200

    def test_get_unknown_returns_none(self, store):
        assert store.get("does-not-exist") is None

    def test_get_returns_snapshot(self, store, sample_questions):
        """Mutating a returned session does not change the store."""
        session = store.create(sample_questions)
        snapshot = store.get(session.id)
        snapshot.answers = {"name": "sneaky"}

        assert store.get(session.id).answers is None


class TestSubmit:
    """Test the at-most-once submission invariant."""

    def test_submit_unknown_fails_without_side_effects(self, store, sample_questions):
        session = store.create(sample_questions)

        assert store.submit("unknown-id", {"name": "x"}) is False
        assert store.get("unknown-id") is None
        assert store.get(session.id).answers is None
        assert len(store) == 1

    def test_double_submit_keeps_first_answers(self, store, sample_questions):
        """Second submit is rejected and does not overwrite."""
        session = store.create(sample_questions)

        assert store.submit(session.id, {"name": "first"}) is True
        assert store.submit(session.id, {"name": "second"}) is False
        assert store.get(session.id).answers == {"name": "first"}

    def test_submit_stores_answers_verbatim(self, store, sample_questions):
        """No validation against question kinds."""
        session = store.create(sample_questions)
        answers = {"unrelated": 42, "ship_it": "maybe"}

        assert store.submit(session.id, answers) is True
        assert store.get(session.id).answers == answers

    def test_empty_answer_map_counts_as_submitted(self, store, sample_questions):
        session = store.create(sample_questions)

        assert store.submit(session.id, {}) is True
        assert store.is_answered(session.id) is True
        assert store.submit(session.id, {"name": "late"}) is False

    def test_concurrent_submits_only_one_wins(self, store, sample_questions):
        """Check-then-set is atomic across threads."""
        session = store.create(sample_questions)
        results = []
        barrier = threading.Barrier(10)

        def worker(n):
            barrier.wait()
            results.append((n, store.submit(session.id, {"name": f"worker-{n}"})))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [n for n, ok in results if ok]
        assert len(winners) == 1
        assert store.get(session.id).answers == {"name": f"worker-{winners[0]}"}


class TestDelete:
    """Test session removal."""

    def test_delete_nonexistent_returns_false(self, store):
        assert store.delete("nope") is False

    def test_delete_existing_removes_session(self, store, sample_questions):
        session = store.create(sample_questions)

        assert store.delete(session.id) is True
        assert store.get(session.id) is None
        assert store.delete(session.id) is False

    def test_deleted_session_cannot_be_submitted(self, store, sample_questions):
        session = store.create(sample_questions)
        store.delete(session.id)

        assert store.submit(session.id, {"name": "x"}) is False
        assert store.get(session.id) is None


class TestIsAnswered:
    def test_unknown_session_is_not_answered(self, store):
        assert store.is_answered("nope") is False

    def test_pending_then_answered(self, store):
        session = store.create([Question(id="q1", question="?")])
        assert store.is_answered(session.id) is False
        store.submit(session.id, {"q1": "a"})
        assert store.is_answered(session.id) is True


def test_get_store_is_singleton():
    assert get_store() is get_store()
