"""Scoring and question-flow core of the GC-RCP self-assessment."""

from assessment.flags import evaluate_flags, is_flagged
from assessment.question_bank import default_bank, load_question_bank
from assessment.responses import ResponseCollector
from assessment.scoring import score_area, score_areas, summarize
from assessment.visibility import should_show

__all__ = [
    "ResponseCollector",
    "default_bank",
    "evaluate_flags",
    "is_flagged",
    "load_question_bank",
    "score_area",
    "score_areas",
    "should_show",
    "summarize",
]
