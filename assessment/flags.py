"""
Flag evaluation: answers that match a question's configured risk values.
"""

from typing import Iterable, List, Mapping, Optional

from assessment.i18n import translate
from assessment.models import Multi, Question, Response
from assessment.responses import is_answered

DEFAULT_FLAG_KEY = "flag.default"


def is_flagged(question: Question, response: Optional[Response]) -> bool:
    """
    Whether an answer raises the question's flag.

    Questions without trigger values never flag, and neither do unanswered
    ones. A multi-choice answer flags when any selected value is a trigger.
    """
    if not question.flag_trigger_values or not is_answered(response):
        return False
    value = response.value
    if isinstance(value, Multi):
        return bool(value.values & question.flag_trigger_values)
    return value.value in question.flag_trigger_values


def flag_message(question: Question, language="en") -> str:
    if question.flag_message:
        return translate(question.flag_message, language)
    return translate(DEFAULT_FLAG_KEY, language, {"question": question.id})


def evaluate_flags(
    questions: Iterable[Question], responses: Mapping[str, Response], language="en"
) -> List[str]:
    """Flag messages for every flagged answer, in catalog order."""
    return [
        flag_message(q, language)
        for q in questions
        if is_flagged(q, responses.get(q.id))
    ]
