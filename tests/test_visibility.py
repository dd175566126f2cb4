import pytest

from assessment.models import Multi, Scalar
from assessment.responses import ResponseCollector
from assessment.visibility import matches, should_show, visible_questions
from conftest import make_question


def _answers(**values):
    collector = ResponseCollector()
    for qid, value in values.items():
        collector.record_response(qid, value)
    return collector


def _dependent(trigger):
    return make_question("child", depends_on_question_id="parent", depends_on_values=trigger)


class TestMatches:
    @pytest.mark.parametrize(
        "answer, trigger, expected",
        [
            (Scalar("a"), Scalar("a"), True),
            (Scalar("a"), Scalar("b"), False),
            (Scalar("b"), Multi(frozenset({"a", "b"})), True),
            (Scalar("c"), Multi(frozenset({"a", "b"})), False),
            (Multi(frozenset({"x", "y"})), Scalar("y"), True),
            (Multi(frozenset({"x", "y"})), Scalar("z"), False),
            (Multi(frozenset({"x", "y"})), Multi(frozenset({"y", "z"})), True),
            (Multi(frozenset({"x"})), Multi(frozenset({"y", "z"})), False),
        ],
    )
    def test_shapes(self, answer, trigger, expected):
        assert matches(answer, trigger) is expected


class TestShouldShow:
    def test_unconditional_question_always_visible(self):
        question = make_question("q1")
        assert should_show(question, ResponseCollector())
        assert should_show(question, _answers(q2="anything"))

    def test_scalar_answer_against_trigger_set(self):
        question = _dependent(Multi(frozenset({"a", "b"})))
        assert should_show(question, _answers(parent="b"))
        assert not should_show(question, _answers(parent="c"))

    def test_set_answer_against_scalar_trigger(self):
        question = _dependent(Scalar("none"))
        assert should_show(question, _answers(parent=["mfa", "none"]))
        assert not should_show(question, _answers(parent=["mfa"]))

    def test_hidden_while_controlling_question_unanswered(self):
        question = _dependent(Scalar("no"))
        assert not should_show(question, ResponseCollector())
        assert not should_show(question, _answers(parent=""))
        assert not should_show(question, _answers(parent=[]))

    def test_follows_answer_changes(self):
        question = _dependent(Scalar("no"))
        answers = _answers(parent="no")
        assert should_show(question, answers)
        answers.record_response("parent", "yes")
        assert not should_show(question, answers)


class TestCatalogConditions:
    def test_security_follow_ups(self, bank, responses):
        sec_2a, sec_3a = bank.get("sec_2a"), bank.get("sec_3a")
        responses.record_response("sec_2", "no")
        responses.record_response("sec_3", ["mfa", "encryption"])
        assert should_show(sec_2a, responses)
        assert not should_show(sec_3a, responses)

        responses.record_response("sec_3", ["none"])
        assert should_show(sec_3a, responses)

    def test_visible_questions_keeps_catalog_order(self, bank, responses):
        security = bank.by_area("security")
        assert [q.id for q in visible_questions(security, responses)] == [
            "sec_1",
            "sec_2",
            "sec_3",
            "sec_4",
        ]
        responses.record_response("proc_4", "none")
        procurement = visible_questions(bank.by_area("procurement"), responses)
        assert "proc_4a" in [q.id for q in procurement]
