"""
Assignment tracking: delegating an area (or some of its questions) to a user
and following the delegation from not_started to reviewed.

Repositories sit on top of a document store (see `assessment.storage`) that is
passed in explicitly; there are no module-level singletons.
"""

import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from assessment.i18n import translate
from assessment.models import (
    Assignment,
    AssignmentStatus,
    Question,
    Response,
    User,
    UserRole,
)
from assessment.responses import is_answered
from assessment.visibility import should_show
from config import ASSIGNMENTS_KEY, DEFAULT_USERS, USERS_KEY

logger = logging.getLogger(__name__)


class AssignmentError(ValueError):
    """An assignment request that cannot be carried out."""


class UnknownUserError(AssignmentError):
    pass


class DuplicateUserError(ValueError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ----------- Repositories -------------
class _Repository:
    """
    A list of records kept as one document in a store.

    Every read-modify-write runs under `lock`, so concurrent writers sharing a
    repository cannot overwrite each other's changes.
    """

    record_type = None

    def __init__(self, store, key: str) -> None:
        self._store = store
        self._key = key
        self.lock = threading.RLock()

    def _save(self, records) -> None:
        self._store.save(self._key, [r.to_dict() for r in records])

    def all(self) -> list:
        records = []
        for rec in self._store.load(self._key, default=[]) or []:
            try:
                records.append(self.record_type.from_dict(rec))
            except (KeyError, TypeError, ValueError) as exc:
                logger.error(
                    "Error parsing %s %r: %s", self.record_type.__name__.lower(), rec, exc
                )
        return records

    def clear(self) -> None:
        with self.lock:
            self._store.delete(self._key)


class UserRepository(_Repository):
    record_type = User

    def __init__(self, store, key: str = USERS_KEY) -> None:
        super().__init__(store, key)

    def create(self, user: User) -> User:
        with self.lock:
            users = self.all()
            if any(u.email == user.email for u in users):
                raise DuplicateUserError(f"User with email {user.email} already exists")
            users.append(user)
            self._save(users)
        return user

    def update(self, email: str, **changes) -> Optional[User]:
        """Apply `changes` to the user; the email itself cannot be changed."""
        changes.pop("email", None)
        with self.lock:
            users = self.all()
            for i, u in enumerate(users):
                if u.email == email:
                    users[i] = User.from_dict({**u.to_dict(), **changes})
                    self._save(users)
                    return users[i]
        return None

    def delete(self, email: str) -> bool:
        with self.lock:
            users = self.all()
            kept = [u for u in users if u.email != email]
            if len(kept) == len(users):
                return False
            self._save(kept)
        return True

    def get(self, email: str) -> Optional[User]:
        return next((u for u in self.all() if u.email == email), None)

    def by_role(self, role) -> List[User]:
        role = UserRole(role)
        return [u for u in self.all() if u.role is role]

    def initialize_defaults(self, defaults: Sequence[dict] = DEFAULT_USERS) -> None:
        """Seed the demo users, but only into an empty repository."""
        with self.lock:
            if self.all():
                return
            self._save([User.from_dict(d) for d in defaults])


class AssignmentRepository(_Repository):
    record_type = Assignment

    def __init__(
        self, store, key: str = ASSIGNMENTS_KEY, clock: Callable[[], datetime] = _now
    ) -> None:
        super().__init__(store, key)
        self._clock = clock

    def get(self, assignment_id: str) -> Optional[Assignment]:
        return next((a for a in self.all() if a.id == assignment_id), None)

    def create(self, **fields) -> Assignment:
        stamp = int(self._clock().timestamp() * 1000)
        assignment = Assignment(
            id=f"assignment_{stamp}_{secrets.token_hex(5)}", **fields
        )
        with self.lock:
            assignments = self.all()
            assignments.append(assignment)
            self._save(assignments)
        return assignment

    def update(self, assignment_id: str, **changes) -> Optional[Assignment]:
        with self.lock:
            assignments = self.all()
            for i, a in enumerate(assignments):
                if a.id == assignment_id:
                    data = {**a.to_dict(), **changes}
                    if isinstance(data["status"], AssignmentStatus):
                        data["status"] = data["status"].value
                    assignments[i] = Assignment.from_dict(data)
                    self._save(assignments)
                    return assignments[i]
        return None

    def delete(self, assignment_id: str) -> bool:
        with self.lock:
            assignments = self.all()
            kept = [a for a in assignments if a.id != assignment_id]
            if len(kept) == len(assignments):
                return False
            self._save(kept)
        return True

    def by_area(self, area: str) -> List[Assignment]:
        return [a for a in self.all() if a.area == area]

    def by_assignee(self, email: str) -> List[Assignment]:
        return [a for a in self.all() if a.assignee == email]

    def by_status(self, status) -> List[Assignment]:
        status = AssignmentStatus(status)
        return [a for a in self.all() if a.status is status]

    def assignees(self) -> List[str]:
        return list(dict.fromkeys(a.assignee for a in self.all()))


# ----------- Tracker -------------
class AssignmentTracker:
    """
    Coordinator/reviewer actions on assignments, plus the automatic status
    transitions driven by answers:

        not_started -> in_progress   once any question in scope is answered
        in_progress -> completed     once every visible required question in
                                     scope is answered
        completed   -> reviewed      only through `review`

    Nothing ever moves a status backwards.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        users: UserRepository,
        bank,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self.assignments = assignments
        self.users = users
        self.bank = bank
        self._clock = clock

    def _require_user(self, email: str, role: str) -> User:
        user = self.users.get(email)
        if user is None:
            raise UnknownUserError(f"{role} with email {email} not found")
        return user

    def _check_area(self, area: str) -> None:
        if area not in self.bank.areas:
            raise AssignmentError(f"Unknown assessment area: {area}")

    def assign_area(
        self,
        area: str,
        assignee: str,
        assigned_by: str,
        due_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Assignment:
        self._require_user(assignee, "Assignee")
        self._require_user(assigned_by, "Assigner")
        self._check_area(area)
        assignment = self.assignments.create(
            area=area,
            assignee=assignee,
            assigned_by=assigned_by,
            assigned_date=_iso(self._clock()),
            due_date=due_date,
            notes=notes,
        )
        logger.info("Assigned area %s to %s", area, assignee)
        return assignment

    def assign_questions(
        self,
        area: str,
        question_ids: Sequence[str],
        assignee: str,
        assigned_by: str,
        due_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Assignment:
        self._require_user(assignee, "Assignee")
        self._require_user(assigned_by, "Assigner")
        self._check_area(area)

        area_ids = {q.id for q in self.bank.by_area(area)}
        invalid = [qid for qid in question_ids if qid not in area_ids]
        if invalid:
            raise AssignmentError(
                f"Questions {', '.join(invalid)} do not belong to the {area} area"
            )
        if not question_ids:
            raise AssignmentError("At least one question id is required")

        assignment = self.assignments.create(
            area=area,
            question_ids=list(question_ids),
            assignee=assignee,
            assigned_by=assigned_by,
            assigned_date=_iso(self._clock()),
            due_date=due_date,
            notes=notes,
        )
        logger.info("Assigned %d %s questions to %s", len(question_ids), area, assignee)
        return assignment

    def update_status(
        self, assignment_id: str, status, notes: Optional[str] = None
    ) -> Optional[Assignment]:
        """
        Set the status of an assignment.

        Notes are appended to the existing trail with a timestamp rather than
        replacing it. Returns None when the assignment does not exist.
        """
        with self.assignments.lock:
            assignment = self.assignments.get(assignment_id)
            if assignment is None:
                return None

            status = AssignmentStatus(status)
            now = self._clock()
            changes: Dict[str, object] = {"status": status}
            if status is AssignmentStatus.COMPLETED:
                changes["completed_date"] = _iso(now)
            if notes:
                entry = f"{now:%Y-%m-%d %H:%M}: {notes}"
                changes["notes"] = (
                    f"{assignment.notes}\n\n{entry}" if assignment.notes else entry
                )
            return self.assignments.update(assignment_id, **changes)

    def review(
        self, assignment_id: str, reviewer: str, notes: Optional[str] = None
    ) -> Optional[Assignment]:
        """Mark a completed assignment as reviewed by `reviewer`."""
        self._require_user(reviewer, "Reviewer")
        with self.assignments.lock:
            assignment = self.assignments.get(assignment_id)
            if assignment is None:
                return None
            if assignment.status is not AssignmentStatus.COMPLETED:
                raise AssignmentError(
                    f"Assignment {assignment_id} is {assignment.status.value}; "
                    "only completed assignments can be reviewed"
                )

            changes: Dict[str, object] = {
                "status": AssignmentStatus.REVIEWED,
                "reviewed_by": reviewer,
                "reviewed_date": _iso(self._clock()),
            }
            if notes:
                changes["notes"] = notes
            return self.assignments.update(assignment_id, **changes)

    # ---------- scope & lookups ----------
    def scope(self, assignment: Assignment) -> List[Question]:
        questions = self.bank.by_area(assignment.area)
        if assignment.question_ids is None:
            return questions
        wanted = set(assignment.question_ids)
        return [q for q in questions if q.id in wanted]

    def assignment_for_question(self, question_id: str) -> Optional[Assignment]:
        """Area-wide assignments win over question-level ones."""
        question = self.bank.get(question_id)
        assignments = self.assignments.all()
        if question is not None:
            for a in assignments:
                if a.question_ids is None and a.area == question.area:
                    return a
        return next(
            (a for a in assignments if a.question_ids and question_id in a.question_ids),
            None,
        )

    def is_question_assigned(self, question_id: str) -> bool:
        return self.assignment_for_question(question_id) is not None

    def describe_area(self, area: str, language="en") -> List[str]:
        """Annotations such as "Assigned to Security Officer (in progress)"."""
        lines = []
        for a in self.assignments.by_area(area):
            user = self.users.get(a.assignee)
            lines.append(
                translate(
                    "assessment.assigned_to",
                    language,
                    {
                        "assignee": user.name if user else a.assignee,
                        "status": translate(f"status.{a.status.value}", language),
                    },
                )
            )
        return lines

    # ---------- automatic transitions ----------
    def sync(
        self, assignment_id: str, responses: Mapping[str, Response]
    ) -> Optional[Assignment]:
        with self.assignments.lock:
            assignment = self.assignments.get(assignment_id)
            if assignment is None:
                return None

            scope = self.scope(assignment)
            any_answered = any(is_answered(responses.get(q.id)) for q in scope)
            required = [q for q in scope if q.required and should_show(q, responses)]
            all_answered = any_answered and all(
                is_answered(responses.get(q.id)) for q in required
            )

            if assignment.status is AssignmentStatus.NOT_STARTED and any_answered:
                assignment = self.update_status(assignment.id, AssignmentStatus.IN_PROGRESS)
            if assignment.status is AssignmentStatus.IN_PROGRESS and all_answered:
                assignment = self.update_status(assignment.id, AssignmentStatus.COMPLETED)
            return assignment

    def sync_all(self, responses: Mapping[str, Response]) -> List[Assignment]:
        return [self.sync(a.id, responses) for a in self.assignments.all()]
