import itertools
from datetime import datetime, timedelta, timezone

import pytest

from assessment.assignments import (AssignmentRepository, AssignmentTracker,
                                    UserRepository)
from assessment.models import Option, Question
from assessment.question_bank import default_bank
from assessment.responses import ResponseCollector
from assessment.storage import InMemoryStore

START = datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)

WEIGHTED = (
    Option("initial", "option.maturity.initial", 1),
    Option("repeatable", "option.maturity.repeatable", 2),
    Option("defined", "option.maturity.defined", 3),
    Option("managed", "option.maturity.managed", 4),
    Option("optimizing", "option.maturity.optimizing", 5),
)


def make_question(qid, area="procurement", type="single_choice", **kwargs):
    kwargs.setdefault("prompt", f"question.{qid}.text")
    return Question(id=qid, area=area, type=type, **kwargs)


@pytest.fixture
def clock():
    """A clock that moves one minute forward on every call."""
    ticks = itertools.count()
    return lambda: START + timedelta(minutes=next(ticks))


@pytest.fixture
def bank():
    return default_bank()


@pytest.fixture
def responses(bank, clock):
    return ResponseCollector(bank=bank, clock=clock)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def tracker(store, bank, clock):
    users = UserRepository(store)
    users.initialize_defaults()
    return AssignmentTracker(AssignmentRepository(store, clock=clock), users, bank, clock)
