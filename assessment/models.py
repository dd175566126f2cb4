"""
Data model for the risk & compliance self-assessment.

Catalog types (Option, Question) are frozen: the question bank is built once
from `config.QUESTIONS` and never mutated. Response values are a tagged
variant (`Scalar` or `Multi`) so matching code can dispatch on the shape
instead of sniffing lists at runtime.
"""

import enum
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple, Union


class QuestionType(str, enum.Enum):
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    FREE_TEXT = "free_text"
    LONG_TEXT = "long_text"

    @property
    def is_multi(self) -> bool:
        return self is QuestionType.MULTI_CHOICE


class AssignmentStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REVIEWED = "reviewed"


class UserRole(str, enum.Enum):
    COORDINATOR = "coordinator"
    CONTRIBUTOR = "contributor"
    REVIEWER = "reviewer"


# ----------- Response values -------------
@dataclass(frozen=True)
class Scalar:
    value: str


@dataclass(frozen=True)
class Multi:
    values: FrozenSet[str]


ResponseValue = Union[Scalar, Multi]


def as_value(raw) -> ResponseValue:
    """
    Wrap a raw answer into a tagged response value.

    Strings become `Scalar`; lists, tuples and sets of strings become `Multi`.
    Values that are already tagged pass through untouched.

    :param raw: a string, an iterable of strings, or a ResponseValue
    :return: Scalar or Multi
    :raises TypeError: for anything else (numbers, None, dicts)
    """
    if isinstance(raw, (Scalar, Multi)):
        return raw
    if isinstance(raw, str):
        return Scalar(raw)
    if isinstance(raw, (list, tuple, set, frozenset)):
        if not all(isinstance(v, str) for v in raw):
            raise TypeError("multi-value answers must contain strings only")
        return Multi(frozenset(raw))
    raise TypeError(f"unsupported answer type: {type(raw).__name__}")


def raw_value(value: ResponseValue):
    """Inverse of `as_value`: a plain string or a sorted list of strings."""
    if isinstance(value, Multi):
        return sorted(value.values)
    return value.value


def is_empty(value: ResponseValue) -> bool:
    if isinstance(value, Multi):
        return not value.values
    return not value.value.strip()


# ----------- Catalog -------------
@dataclass(frozen=True)
class Option:
    value: str
    label: str  # translation key
    maturity_weight: Optional[int] = None


@dataclass(frozen=True)
class Question:
    id: str
    area: str
    type: str
    prompt: str  # translation key
    required: bool = True
    options: Tuple[Option, ...] = ()
    flag_trigger_values: FrozenSet[str] = frozenset()
    flag_message: Optional[str] = None  # translation key
    depends_on_question_id: Optional[str] = None
    depends_on_values: Optional[ResponseValue] = None
    guidance: Optional[str] = None
    order: int = 0
    min_selections: Optional[int] = None
    max_selections: Optional[int] = None
    max_length: Optional[int] = None

    @property
    def question_type(self) -> Optional[QuestionType]:
        """The parsed type, or None when the catalog names a type we cannot render."""
        try:
            return QuestionType(self.type)
        except ValueError:
            return None

    def option(self, value: str) -> Optional[Option]:
        for opt in self.options:
            if opt.value == value:
                return opt
        return None

    def accepts(self, value: ResponseValue) -> bool:
        """Whether `value` has the cardinality this question's type expects."""
        qtype = self.question_type
        if qtype is None:
            return True
        return isinstance(value, Multi) == qtype.is_multi


@dataclass(frozen=True)
class Response:
    question_id: str
    value: ResponseValue
    recorded_at: datetime


# ----------- Results -------------
@dataclass
class AreaResult:
    area: str
    maturity_score: float = 0.0
    compliance_score: int = 0
    flags: List[str] = field(default_factory=list)
    question_count: int = 0
    answered_count: int = 0
    maturity_count: int = 0

    @property
    def has_data(self) -> bool:
        # a compliance score of 0 is only meaningful when something was answered
        return self.answered_count > 0


@dataclass
class Summary:
    overall_maturity: float = 0.0
    overall_compliance: int = 0
    total_flags: int = 0


# ----------- Assignments -------------
@dataclass
class Assignment:
    id: str
    area: str
    assignee: str
    assigned_by: str
    assigned_date: str
    status: AssignmentStatus = AssignmentStatus.NOT_STARTED
    due_date: Optional[str] = None
    question_ids: Optional[List[str]] = None
    notes: Optional[str] = None
    completed_date: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_date: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Assignment":
        data = dict(data)
        data["status"] = AssignmentStatus(data.get("status", "not_started"))
        return cls(**data)


@dataclass
class User:
    email: str
    name: str
    role: UserRole
    department: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        data = dict(data)
        data["role"] = UserRole(data["role"])
        return cls(**data)
