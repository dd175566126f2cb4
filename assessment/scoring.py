"""
Maturity and compliance scoring per assessment area, plus the cross-area summary.

Everything here is recomputed from (question bank, responses, language) on
demand; nothing is cached or stored.
"""

from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from assessment.flags import flag_message, is_flagged
from assessment.i18n import area_title, translate
from assessment.models import (
    AreaResult,
    Multi,
    Question,
    QuestionType,
    Response,
    Summary,
    raw_value,
)
from assessment.responses import is_answered
from assessment.visibility import should_show
from config import COMPLIANCE_BANDS, MATURITY_BANDS


# ----------- Helpers -------------
def round_half_up(x: float, digits: int = 0) -> float:
    """
    Round with 0.5 going away from zero, unlike the built-in banker's rounding.

    round_half_up(2.45, 1) -> 2.5
    round_half_up(62.5)    -> 63.0
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(x)).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _band(score: float, bands) -> str:
    for upper, name in bands:
        if score < upper:
            return name
    return "success"


def maturity_band(score: float) -> str:
    """Colour band for a 1-5 maturity score: danger, warning, info or success."""
    return _band(score, MATURITY_BANDS)


def compliance_band(score: float) -> str:
    """Colour band for a 0-100 compliance score."""
    return _band(score, COMPLIANCE_BANDS)


def maturity_weight(question: Question, response: Optional[Response]) -> Optional[int]:
    """Maturity weight of the selected option for an answered single-choice question."""
    if question.question_type is not QuestionType.SINGLE_CHOICE:
        return None
    if not is_answered(response) or isinstance(response.value, Multi):
        return None
    option = question.option(response.value.value)
    return option.maturity_weight if option else None


# -------------- Scoring ---------------
def score_area(
    area: str,
    questions: Iterable[Question],
    responses: Mapping[str, Response],
    language="en",
) -> AreaResult:
    """
    Score one area.

    Args:
        area (str): area id
        questions (iterable): questions to consider; those of other areas are ignored
        responses (mapping): question id -> Response
        language (str): language for flag messages

    Returns:
        AreaResult: maturity is the mean option weight over answered weighted
        single-choice questions (0 when there are none), compliance the mean of
        100/0 per answered unflagged/flagged question (0 when nothing is
        answered; check `answered_count` to tell the two apart).
    """
    area_questions = [q for q in questions if q.area == area]
    result = AreaResult(area=area, question_count=len(area_questions))

    weights: List[int] = []
    compliance: List[int] = []
    for q in area_questions:
        response = responses.get(q.id)
        if not is_answered(response):
            continue
        result.answered_count += 1

        flagged = is_flagged(q, response)
        if flagged:
            result.flags.append(flag_message(q, language))
        compliance.append(0 if flagged else 100)

        weight = maturity_weight(q, response)
        if weight:
            weights.append(weight)

    result.maturity_count = len(weights)
    if weights:
        result.maturity_score = round_half_up(_mean(weights), 1)
    if compliance:
        result.compliance_score = int(round_half_up(_mean(compliance)))
    return result


def score_areas(
    questions: Iterable[Question],
    responses: Mapping[str, Response],
    language="en",
    areas: Optional[Sequence[str]] = None,
) -> "OrderedDict[str, AreaResult]":
    questions = list(questions)
    if areas is None:
        areas = list(OrderedDict.fromkeys(q.area for q in questions))
    return OrderedDict(
        (area, score_area(area, questions, responses, language)) for area in areas
    )


def summarize(results: Iterable[AreaResult]) -> Summary:
    """
    Overall figures across areas.

    Areas with no answers are left out of both averages rather than counted as
    zero; overall maturity also skips areas whose answers carry no maturity
    weight.
    """
    results = list(results)
    with_data = [r for r in results if r.answered_count > 0]
    with_maturity = [r for r in with_data if r.maturity_count > 0]

    summary = Summary(total_flags=sum(len(r.flags) for r in results))
    if with_maturity:
        summary.overall_maturity = round_half_up(
            _mean([r.maturity_score for r in with_maturity]), 1
        )
    if with_data:
        summary.overall_compliance = int(
            round_half_up(_mean([r.compliance_score for r in with_data]))
        )
    return summary


# -------------- Progress ---------------
def _visible_required(area, questions, responses) -> List[Question]:
    return [
        q
        for q in questions
        if q.area == area and q.required and should_show(q, responses)
    ]


def unanswered_required(
    area: str, questions: Iterable[Question], responses: Mapping[str, Response]
) -> List[Question]:
    return [
        q
        for q in _visible_required(area, questions, responses)
        if not is_answered(responses.get(q.id))
    ]


def area_progress(
    area: str, questions: Iterable[Question], responses: Mapping[str, Response]
) -> float:
    """Percentage of visible required questions in `area` that have an answer."""
    questions = list(questions)
    required = _visible_required(area, questions, responses)
    if not required:
        return 0.0
    answered = [q for q in required if is_answered(responses.get(q.id))]
    return round_half_up(len(answered) / len(required) * 100, 1)


# -------------- Frames ---------------
def _answer_text(question: Question, response: Response, language) -> str:
    value = raw_value(response.value)
    values = value if isinstance(value, list) else [value]
    labels = []
    for v in values:
        option = question.option(v)
        labels.append(translate(option.label, language) if option else v)
    return "; ".join(labels)


def results_frame(
    questions: Iterable[Question], responses: Mapping[str, Response], language="en"
) -> pd.DataFrame:
    """
    One row per question: area, id, prompt, answer, flagged, maturity, recorded_at.

    Unanswered questions are kept with an empty answer so exports show gaps.
    """
    rows = []
    for q in questions:
        response = responses.get(q.id)
        answered = is_answered(response)
        rows.append(
            {
                "area": area_title(q.area, language),
                "id": q.id,
                "prompt": translate(q.prompt, language),
                "answer": _answer_text(q, response, language) if answered else "",
                "flagged": is_flagged(q, response),
                "flag": flag_message(q, language) if is_flagged(q, response) else "",
                "maturity": maturity_weight(q, response),
                "recorded_at": response.recorded_at.isoformat() if answered else "",
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "area",
            "id",
            "prompt",
            "answer",
            "flagged",
            "flag",
            "maturity",
            "recorded_at",
        ],
    )


def area_frame(results: Mapping[str, AreaResult], language="en") -> pd.DataFrame:
    """Area-level scores as a dataframe, in the order of `results`."""
    rows = [
        {
            "area_id": r.area,
            "area": area_title(r.area, language),
            "maturity": r.maturity_score,
            "compliance": r.compliance_score,
            "flags": len(r.flags),
            "answered": r.answered_count,
            "questions": r.question_count,
            "has_data": r.has_data,
            "has_maturity": r.maturity_count > 0,
        }
        for r in results.values()
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "area_id",
            "area",
            "maturity",
            "compliance",
            "flags",
            "answered",
            "questions",
            "has_data",
            "has_maturity",
        ],
    )


def results_payload(
    bank, responses: Mapping[str, Response], language="en"
) -> Dict[str, object]:
    """Everything the results page and the exports need, as plain data."""
    results = score_areas(bank, responses, language, areas=bank.areas)
    summary = summarize(results.values())
    return {
        "language": str(getattr(language, "value", language)),
        "areas": area_frame(results, language).to_dict(orient="records"),
        "flags": {
            area_title(a, language): r.flags for a, r in results.items() if r.flags
        },
        "summary": {
            "overall_maturity": summary.overall_maturity,
            "overall_compliance": summary.overall_compliance,
            "total_flags": summary.total_flags,
        },
        "responses": results_frame(bank, responses, language).to_dict(orient="records"),
    }
