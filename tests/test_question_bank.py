import logging

from assessment.i18n import TRANSLATIONS
from assessment.models import Multi, QuestionType, Scalar
from assessment.question_bank import load_question_bank
from config import AREAS, QUESTIONS


class TestDefaultBank:
    def test_loads_whole_catalog(self, bank):
        assert len(bank) == len(QUESTIONS)
        assert bank.areas == AREAS
        assert "proc_1" in bank
        assert bank.get("nope") is None

    def test_ordered_by_area_then_order(self, bank):
        assert bank.questions[0].id == "proc_1"
        assert [q.id for q in bank.by_area("security")] == [
            "sec_1",
            "sec_2",
            "sec_2a",
            "sec_3",
            "sec_3a",
            "sec_4",
        ]

    def test_areas_without_questions(self, bank):
        counts = bank.counts_by_area()
        assert counts["service"] == 0
        assert counts["security"] == 6
        assert bank.by_area("values_ethics") == []

    def test_conditions_are_tagged(self, bank):
        assert bank.get("sec_2a").depends_on_values == Scalar("no")
        assert bank.get("sec_3a").depends_on_values == Multi(frozenset({"none"}))
        assert bank.get("proc_4a").depends_on_question_id == "proc_4"

    def test_types_and_weights(self, bank):
        sec_3 = bank.get("sec_3")
        assert sec_3.question_type is QuestionType.MULTI_CHOICE
        assert sec_3.min_selections == 1
        assert [o.maturity_weight for o in bank.get("sec_4").options] == [1, 2, 3, 4, 5]
        assert bank.get("sec_2").option("yes").maturity_weight is None

    def test_every_catalog_key_is_translated(self, bank):
        for q in bank:
            keys = [q.prompt, q.guidance, q.flag_message] + [o.label for o in q.options]
            missing = [k for k in keys if k and k not in TRANSLATIONS]
            assert not missing, q.id


class TestLoadQuestionBank:
    def test_sorts_raw_entries(self):
        raw = [
            {"id": "b", "area": "data", "type": "free_text", "order": 2},
            {"id": "a", "area": "data", "type": "free_text", "order": 1},
            {"id": "c", "area": "procurement", "type": "free_text", "order": 9},
        ]
        bank = load_question_bank(raw)
        assert [q.id for q in bank] == ["c", "a", "b"]

    def test_bad_entries_are_logged_not_raised(self, caplog):
        raw = [
            {"id": "x1", "area": "nowhere", "type": "single_choice"},
            {"id": "x2", "area": "data", "type": "matrix"},
            {"id": "x2", "area": "data", "type": "free_text"},
            {"id": "x3", "area": "data", "type": "free_text", "depends_on": {"question": "ghost", "values": "y"}},
            {"id": "x4", "area": "data", "type": "free_text", "text": "question.x4.text"},
        ]
        with caplog.at_level(logging.WARNING, logger="assessment.question_bank"):
            bank = load_question_bank(raw)

        assert "unknown area" in caplog.text
        assert "unsupported type" in caplog.text
        assert "Duplicate question ids" in caplog.text
        assert "depending on unknown questions" in caplog.text
        assert "question.x4.text" in caplog.text
        assert len(bank) == 5

    def test_entries_without_id_are_skipped(self, caplog):
        raw = [
            {"area": "data", "type": "free_text"},
            {"id": "kept", "area": "data", "type": "free_text"},
            {"area": "data", "type": "free_text"},
        ]
        with caplog.at_level(logging.WARNING, logger="assessment.question_bank"):
            bank = load_question_bank(raw)
        assert [q.id for q in bank] == ["kept"]
        assert "Questions without an id (skipped): 2" in caplog.text

    def test_unknown_type_is_kept(self):
        bank = load_question_bank([{"id": "m", "area": "data", "type": "matrix"}])
        question = bank.get("m")
        assert question.question_type is None
        assert question.accepts(Scalar("x"))
        assert question.accepts(Multi(frozenset({"x"})))
