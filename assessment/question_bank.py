"""
Question bank: the immutable catalog of questions grouped by assessment area.

The raw catalog lives in `config.QUESTIONS` as plain dicts; `load_question_bank`
checks it and turns every entry into a frozen `Question`.
"""

import logging
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from assessment.i18n import TRANSLATIONS
from assessment.models import Option, Question, QuestionType, as_value
from config import AREAS, QUESTIONS

logger = logging.getLogger(__name__)


def _validate_config(raw_questions: Sequence[dict], areas: Sequence[str]) -> None:
    """
    Check the sanity of a raw question catalog.

    Logs warnings for entries without an id, unknown areas, unknown question types, duplicate ids,
    conditions pointing at questions that do not exist and translation keys
    with no entry. Nothing here raises: a broken entry still loads and shows
    up as an "unsupported" or untranslated question instead of a crash.
    """
    ids = [q.get("id") for q in raw_questions]
    known_types = {t.value for t in QuestionType}

    bad_areas = [q.get("id") for q in raw_questions if q.get("area") not in areas]
    bad_types = [q.get("id") for q in raw_questions if q.get("type") not in known_types]
    missing_ids = sum(1 for i in ids if not i)
    duplicates = sorted({i for i in ids if i and ids.count(i) > 1})
    dangling = [
        q.get("id")
        for q in raw_questions
        if q.get("depends_on") and q["depends_on"].get("question") not in ids
    ]
    missing_keys = sorted(
        {
            key
            for q in raw_questions
            for key in [q.get("text"), q.get("guidance"), q.get("flag_text")]
            + [o.get("label") for o in q.get("options", [])]
            if key and key not in TRANSLATIONS
        }
    )

    if missing_ids:
        logger.warning("Questions without an id (skipped): %d", missing_ids)
    if bad_areas:
        logger.warning("Questions with unknown area: %s", bad_areas)
    if bad_types:
        logger.warning("Questions with unsupported type: %s", bad_types)
    if duplicates:
        logger.warning("Duplicate question ids: %s", duplicates)
    if dangling:
        logger.warning("Questions depending on unknown questions: %s", dangling)
    if missing_keys:
        logger.warning("Untranslated catalog keys: %s", missing_keys)


def _build_question(raw: dict) -> Question:
    depends = raw.get("depends_on") or {}
    trigger = depends.get("values")
    return Question(
        id=raw["id"],
        area=raw.get("area", ""),
        type=raw.get("type", ""),
        prompt=raw.get("text", f"question.{raw['id']}.text"),
        required=bool(raw.get("required", False)),
        options=tuple(
            Option(
                value=o["value"],
                label=o.get("label", o["value"]),
                maturity_weight=o.get("maturity"),
            )
            for o in raw.get("options", [])
        ),
        flag_trigger_values=frozenset(raw.get("flag_if", [])),
        flag_message=raw.get("flag_text"),
        depends_on_question_id=depends.get("question"),
        depends_on_values=as_value(trigger) if trigger is not None else None,
        guidance=raw.get("guidance"),
        order=int(raw.get("order", 0)),
        min_selections=raw.get("min_selections"),
        max_selections=raw.get("max_selections"),
        max_length=raw.get("max_length"),
    )


class QuestionBank:
    """Read-only view over the question catalog, ordered by area then `order`."""

    def __init__(self, questions: Iterable[Question], areas: Sequence[str] = AREAS):
        self.areas: List[str] = list(areas)
        rank = {a: i for i, a in enumerate(self.areas)}
        self._questions = tuple(
            sorted(questions, key=lambda q: (rank.get(q.area, len(rank)), q.order))
        )
        self._by_id: Dict[str, Question] = {q.id: q for q in self._questions}

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __contains__(self, question_id) -> bool:
        return question_id in self._by_id

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def by_area(self, area: str) -> List[Question]:
        return [q for q in self._questions if q.area == area]

    def counts_by_area(self) -> Dict[str, int]:
        return {area: len(self.by_area(area)) for area in self.areas}


def load_question_bank(
    raw_questions: Sequence[dict] = QUESTIONS, areas: Sequence[str] = AREAS
) -> QuestionBank:
    _validate_config(raw_questions, areas)
    return QuestionBank(
        (_build_question(q) for q in raw_questions if q.get("id")), areas
    )


@lru_cache(maxsize=1)
def default_bank() -> QuestionBank:
    return load_question_bank()
