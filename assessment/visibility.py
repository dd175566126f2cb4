"""
Conditional visibility: whether a question is shown, given earlier answers.
"""

from typing import Iterable, List, Mapping

from assessment.models import Multi, Question, Response, ResponseValue, Scalar
from assessment.responses import is_answered


def matches(answer: ResponseValue, trigger: ResponseValue) -> bool:
    """
    Compare a controlling answer with a trigger value.

    Set/set matches on a non-empty intersection, set/scalar and scalar/set on
    membership, scalar/scalar on equality.
    """
    if isinstance(answer, Multi):
        if isinstance(trigger, Multi):
            return bool(answer.values & trigger.values)
        return trigger.value in answer.values
    if isinstance(trigger, Multi):
        return answer.value in trigger.values
    return isinstance(trigger, Scalar) and answer.value == trigger.value


def should_show(question: Question, responses: Mapping[str, Response]) -> bool:
    if not question.depends_on_question_id:
        return True

    controlling = responses.get(question.depends_on_question_id)
    if not is_answered(controlling) or question.depends_on_values is None:
        return False
    return matches(controlling.value, question.depends_on_values)


def visible_questions(
    questions: Iterable[Question], responses: Mapping[str, Response]
) -> List[Question]:
    return [q for q in questions if should_show(q, responses)]
