"""
Response collector: one current answer per question, last write wins.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional

from assessment.models import Response, as_value, is_empty, raw_value

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _ts_iso(ts: datetime) -> str:
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_ts(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def is_answered(response: Optional[Response]) -> bool:
    """An absent response, a blank string or an empty selection is not an answer."""
    return response is not None and not is_empty(response.value)


class ResponseCollector(Mapping):
    """
    Mutable set of responses keyed by question id.

    Behaves as a read-only mapping (question id -> Response) so it can be passed
    straight to the visibility, flag and scoring functions. When a question bank
    is given, answers are checked against the question's cardinality.
    """

    def __init__(self, bank=None, clock: Callable[[], datetime] = utc_now) -> None:
        self._bank = bank
        self._clock = clock
        self._responses: Dict[str, Response] = {}

    def __getitem__(self, question_id: str) -> Response:
        return self._responses[question_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def record_response(self, question_id: str, value) -> Response:
        """
        Insert or replace the answer for `question_id`.

        :param question_id: id of the question being answered
        :param value: a string, or a list/tuple/set of strings for multi-choice
        :return: the stored Response
        :raises ValueError: if the bank knows the question and the value has the
            wrong shape for its type
        """
        tagged = as_value(value)
        if self._bank is not None:
            question = self._bank.get(question_id)
            if question is not None and not question.accepts(tagged):
                raise ValueError(
                    f"{question_id} is a {question.type} question; "
                    f"got {type(tagged).__name__}"
                )
        response = Response(question_id, tagged, self._clock())
        self._responses[question_id] = response
        return response

    def get_response(self, question_id: str) -> Optional[Response]:
        return self._responses.get(question_id)

    def remove_response(self, question_id: str) -> bool:
        return self._responses.pop(question_id, None) is not None

    def clear(self) -> None:
        self._responses.clear()

    # ---------- serialisation ----------
    def to_records(self) -> List[dict]:
        return [
            {
                "questionId": r.question_id,
                "value": raw_value(r.value),
                "recordedAt": _ts_iso(r.recorded_at),
            }
            for r in self._responses.values()
        ]

    @classmethod
    def from_records(cls, records, bank=None, clock=utc_now) -> "ResponseCollector":
        """Rebuild a collector from `to_records` output, skipping malformed entries."""
        collector = cls(bank=bank, clock=clock)
        for rec in records or []:
            try:
                qid = rec["questionId"]
                value = as_value(rec["value"])
                recorded_at = _parse_ts(rec["recordedAt"]) if rec.get("recordedAt") else clock()
                if bank is not None and qid in bank and not bank.get(qid).accepts(value):
                    raise ValueError("cardinality mismatch")
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed response record %r: %s", rec, exc)
                continue
            collector._responses[qid] = Response(qid, value, recorded_at)
        return collector

    def save(self, store, key: str) -> None:
        store.save(key, self.to_records())

    @classmethod
    def load(cls, store, key: str, bank=None) -> "ResponseCollector":
        return cls.from_records(store.load(key, default=[]), bank=bank)
