import threading
import time

import pytest

from assessment.assignments import (AssignmentError, AssignmentRepository,
                                    AssignmentTracker, DuplicateUserError,
                                    UnknownUserError, UserRepository)
from assessment.models import AssignmentStatus, User, UserRole
from assessment.storage import InMemoryStore
from config import ASSIGNMENTS_KEY

COORDINATOR = "coordinator@example.gov.ca"
SECURITY = "security@example.gov.ca"
FINANCE = "finance@example.gov.ca"
REVIEWER = "reviewer@example.gov.ca"


class TestUsers:
    def test_defaults_seeded_once(self, store):
        users = UserRepository(store)
        users.initialize_defaults()
        users.delete(FINANCE)
        users.initialize_defaults()
        assert len(users.all()) == 4

    def test_by_role(self, tracker):
        assert [u.email for u in tracker.users.by_role(UserRole.REVIEWER)] == [REVIEWER]
        assert len(tracker.users.by_role("contributor")) == 3

    def test_duplicate_email(self, tracker):
        with pytest.raises(DuplicateUserError):
            tracker.users.create(User(SECURITY, "Someone", UserRole.CONTRIBUTOR))

    def test_update_cannot_change_email(self, tracker):
        user = tracker.users.update(SECURITY, email="new@example.gov.ca", title="CISO")
        assert user.email == SECURITY
        assert tracker.users.get(SECURITY).title == "CISO"
        assert tracker.users.update("ghost@example.gov.ca", title="x") is None


class TestRepository:
    def test_created_assignments_are_stored_as_plain_data(self, store, clock):
        repo = AssignmentRepository(store, clock=clock)
        created = repo.create(
            area="data", assignee=FINANCE, assigned_by=COORDINATOR, assigned_date="2025-04-01"
        )
        assert created.id.startswith("assignment_")
        assert store.load(ASSIGNMENTS_KEY)[0]["status"] == "not_started"
        assert repo.get(created.id) == created

    def test_queries(self, tracker):
        tracker.assign_area("security", SECURITY, COORDINATOR)
        tracker.assign_area("data", FINANCE, COORDINATOR)
        repo = tracker.assignments
        assert [a.area for a in repo.by_assignee(SECURITY)] == ["security"]
        assert len(repo.by_status(AssignmentStatus.NOT_STARTED)) == 2
        assert repo.assignees() == [SECURITY, FINANCE]
        assert repo.delete(repo.by_area("data")[0].id)
        assert not repo.delete("assignment_missing")

    def test_malformed_records_skipped(self, store, caplog):
        store.save(ASSIGNMENTS_KEY, [{"id": "broken"}])
        assert AssignmentRepository(store).all() == []
        assert "Error parsing assignment" in caplog.text


class TestValidation:
    def test_unknown_assignee(self, tracker):
        with pytest.raises(UnknownUserError, match="Assignee with email ghost@x not found"):
            tracker.assign_area("security", "ghost@x", COORDINATOR)

    def test_unknown_assigner(self, tracker):
        with pytest.raises(UnknownUserError, match="Assigner"):
            tracker.assign_area("security", SECURITY, "ghost@x")

    def test_unknown_area(self, tracker):
        with pytest.raises(AssignmentError):
            tracker.assign_area("space", SECURITY, COORDINATOR)

    def test_questions_must_belong_to_area(self, tracker):
        with pytest.raises(AssignmentError, match="sec_1"):
            tracker.assign_questions("data", ["data_1", "sec_1"], FINANCE, COORDINATOR)
        with pytest.raises(AssignmentError):
            tracker.assign_questions("data", [], FINANCE, COORDINATOR)
        assert tracker.assignments.all() == []

    def test_unknown_user_error_is_a_value_error(self):
        assert issubclass(UnknownUserError, ValueError)


class TestStatus:
    def test_notes_are_appended(self, tracker):
        a = tracker.assign_area("data", FINANCE, COORDINATOR, notes="Start with data_1")
        tracker.update_status(a.id, AssignmentStatus.IN_PROGRESS, notes="Halfway")
        updated = tracker.update_status(a.id, "completed", notes="Done")

        assert updated.notes.startswith("Start with data_1\n\n")
        assert updated.notes.endswith(": Done")
        assert "Halfway" in updated.notes
        assert updated.completed_date is not None

    def test_missing_assignment(self, tracker):
        assert tracker.update_status("assignment_missing", "completed") is None

    def test_review_requires_completed(self, tracker):
        a = tracker.assign_area("data", FINANCE, COORDINATOR)
        with pytest.raises(AssignmentError, match="only completed"):
            tracker.review(a.id, REVIEWER)
        with pytest.raises(UnknownUserError):
            tracker.review(a.id, "ghost@x")


class TestAutomaticTransitions:
    def test_question_scope_lifecycle(self, tracker, responses):
        a = tracker.assign_questions(
            "data", ["data_1", "data_2", "data_3"], FINANCE, COORDINATOR
        )
        assert tracker.sync(a.id, responses).status is AssignmentStatus.NOT_STARTED

        responses.record_response("data_1", "yes")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.IN_PROGRESS

        responses.record_response("data_2", "monthly")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.IN_PROGRESS

        responses.record_response("data_3", "no")
        completed = tracker.sync(a.id, responses)
        assert completed.status is AssignmentStatus.COMPLETED
        assert completed.completed_date is not None

        # stays completed until someone reviews it
        assert tracker.sync(a.id, responses).status is AssignmentStatus.COMPLETED

        reviewed = tracker.review(a.id, REVIEWER, notes="Looks good")
        assert reviewed.status is AssignmentStatus.REVIEWED
        assert reviewed.reviewed_by == REVIEWER
        assert reviewed.notes == "Looks good"
        assert tracker.sync(a.id, responses).status is AssignmentStatus.REVIEWED

    def test_answers_outside_scope_do_not_count(self, tracker, responses):
        a = tracker.assign_questions("data", ["data_1"], FINANCE, COORDINATOR)
        responses.record_response("data_2", "monthly")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.NOT_STARTED

    def test_conditional_questions_join_the_scope(self, tracker, responses):
        a = tracker.assign_area("security", SECURITY, COORDINATOR)
        responses.record_response("sec_1", "monthly")
        responses.record_response("sec_2", "no")
        responses.record_response("sec_3", ["mfa"])
        responses.record_response("sec_4", "defined")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.IN_PROGRESS

        responses.record_response("sec_2a", "Scheduled for Q3")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.COMPLETED

    def test_no_backward_transition(self, tracker, responses):
        a = tracker.assign_questions("data", ["data_1"], FINANCE, COORDINATOR)
        responses.record_response("data_1", "yes")
        tracker.sync(a.id, responses)
        responses.remove_response("data_1")
        assert tracker.sync(a.id, responses).status is AssignmentStatus.COMPLETED

    def test_sync_all(self, tracker, responses):
        tracker.assign_area("security", SECURITY, COORDINATOR)
        tracker.assign_area("data", FINANCE, COORDINATOR)
        responses.record_response("data_1", "yes")
        statuses = {a.area: a.status for a in tracker.sync_all(responses)}
        assert statuses == {
            "security": AssignmentStatus.NOT_STARTED,
            "data": AssignmentStatus.IN_PROGRESS,
        }


class TestLookups:
    def test_area_assignment_wins(self, tracker):
        partial = tracker.assign_questions("security", ["sec_1"], FINANCE, COORDINATOR)
        assert tracker.assignment_for_question("sec_1").id == partial.id
        whole = tracker.assign_area("security", SECURITY, COORDINATOR)
        assert tracker.assignment_for_question("sec_1").id == whole.id
        assert not tracker.is_question_assigned("data_1")

    def test_describe_area(self, tracker, responses):
        a = tracker.assign_area("security", SECURITY, COORDINATOR)
        assert tracker.describe_area("security") == ["Assigned to Security Officer (not started)"]
        responses.record_response("sec_1", "monthly")
        tracker.sync(a.id, responses)
        assert tracker.describe_area("security", "fr") == ["Attribué à Security Officer (en cours)"]


class _SlowStore(InMemoryStore):
    """Widens the gap between reading a document and writing it back."""

    def load(self, key, default=None):
        data = super().load(key, default)
        time.sleep(0.05)
        return data


def _run_together(*calls):
    threads = [threading.Thread(target=fn, kwargs=kwargs) for fn, kwargs in calls]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


class TestConcurrentWrites:
    def test_parallel_creates_keep_every_assignment(self, clock):
        repo = AssignmentRepository(_SlowStore(), clock=clock)
        fields = {"assignee": FINANCE, "assigned_by": COORDINATOR, "assigned_date": "2025-04-01"}
        _run_together(
            (repo.create, {"area": "security", **fields}),
            (repo.create, {"area": "data", **fields}),
        )
        assert sorted(a.area for a in repo.all()) == ["data", "security"]

    def test_parallel_user_creates(self):
        users = UserRepository(_SlowStore())
        _run_together(
            (users.create, {"user": User("a@example.gov.ca", "A", UserRole.CONTRIBUTOR)}),
            (users.create, {"user": User("b@example.gov.ca", "B", UserRole.REVIEWER)}),
        )
        assert sorted(u.email for u in users.all()) == ["a@example.gov.ca", "b@example.gov.ca"]

    def test_assigning_while_syncing(self, bank, clock, responses):
        store = _SlowStore()
        users = UserRepository(store)
        users.initialize_defaults()
        tracker = AssignmentTracker(AssignmentRepository(store, clock=clock), users, bank, clock)
        existing = tracker.assign_area("data", FINANCE, COORDINATOR)
        responses.record_response("data_1", "yes")

        _run_together(
            (tracker.assign_area, {"area": "security", "assignee": SECURITY, "assigned_by": COORDINATOR}),
            (tracker.sync_all, {"responses": responses}),
        )

        statuses = {a.area: a.status for a in tracker.assignments.all()}
        assert statuses["data"] is AssignmentStatus.IN_PROGRESS
        assert "security" in statuses
        assert tracker.assignments.get(existing.id) is not None
