import pytest

from assessment.models import AreaResult
from assessment.responses import ResponseCollector
from assessment.scoring import (area_frame, area_progress, compliance_band,
                                maturity_band, results_frame, results_payload,
                                round_half_up, score_area, score_areas,
                                summarize, unanswered_required)
from conftest import WEIGHTED, make_question


@pytest.fixture
def weighted_area():
    return [
        make_question("m1", options=WEIGHTED, flag_trigger_values=frozenset({"initial"})),
        make_question("m2", options=WEIGHTED, flag_trigger_values=frozenset({"initial"})),
        make_question("m3", options=WEIGHTED, flag_trigger_values=frozenset({"initial"})),
    ]


def _answers(**values):
    collector = ResponseCollector()
    for qid, value in values.items():
        collector.record_response(qid, value)
    return collector


class TestRounding:
    @pytest.mark.parametrize(
        "value, digits, expected",
        [(2.45, 1, 2.5), (2.44, 1, 2.4), (62.5, 0, 63.0), (0.125, 2, 0.13), (66.666, 0, 67.0)],
    )
    def test_half_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected


class TestScoreArea:
    def test_maturity_is_mean_of_weights(self, weighted_area):
        result = score_area("procurement", weighted_area, _answers(m1="defined", m2="optimizing"))
        assert result.maturity_score == 4.0
        assert result.maturity_count == 2

    def test_maturity_rounds_half_up(self, weighted_area):
        responses = _answers(m1="repeatable", m2="defined", m3="defined")
        assert score_area("procurement", weighted_area, responses).maturity_score == 2.7

    def test_compliance_one_of_two_flagged(self, weighted_area):
        result = score_area("procurement", weighted_area, _answers(m1="initial", m2="managed"))
        assert result.compliance_score == 50
        assert result.answered_count == 2
        assert len(result.flags) == 1

    def test_compliance_thirds(self, weighted_area):
        result = score_area(
            "procurement", weighted_area, _answers(m1="initial", m2="managed", m3="managed")
        )
        assert result.compliance_score == 67

    def test_no_answers(self, weighted_area):
        result = score_area("procurement", weighted_area, ResponseCollector())
        assert result.maturity_score == 0
        assert result.compliance_score == 0
        assert result.answered_count == 0
        assert not result.has_data

    def test_unweighted_answers_count_for_compliance_only(self, bank, responses):
        responses.record_response("sec_2", "yes")
        result = score_area("security", bank, responses)
        assert result.maturity_score == 0
        assert result.maturity_count == 0
        assert result.compliance_score == 100
        assert result.has_data

    def test_other_areas_ignored(self, bank, responses):
        responses.record_response("sec_2", "no")
        result = score_area("procurement", bank, responses)
        assert result.answered_count == 0
        assert result.question_count == 7

    def test_unsupported_type_still_counts_as_answered(self):
        question = make_question("odd", type="matrix")
        result = score_area("procurement", [question], _answers(odd="something"))
        assert result.answered_count == 1
        assert result.compliance_score == 100

    def test_score_areas_keeps_requested_order(self, bank, responses):
        results = score_areas(bank, responses, areas=bank.areas)
        assert list(results) == bank.areas
        assert results["service"].question_count == 0


class TestSummarize:
    def test_areas_without_data_are_excluded(self):
        results = [
            AreaResult("a", maturity_score=4.0, compliance_score=100, answered_count=2, maturity_count=2),
            AreaResult("b"),
            AreaResult("c", maturity_score=2.0, compliance_score=50, answered_count=2, maturity_count=1),
        ]
        summary = summarize(results)
        assert summary.overall_maturity == 3.0
        assert summary.overall_compliance == 75

    def test_maturity_skips_areas_without_weighted_answers(self):
        results = [
            AreaResult("a", maturity_score=4.0, compliance_score=100, answered_count=1, maturity_count=1),
            AreaResult("b", compliance_score=0, answered_count=1, flags=["x"]),
        ]
        summary = summarize(results)
        assert summary.overall_maturity == 4.0
        assert summary.overall_compliance == 50
        assert summary.total_flags == 1

    def test_empty(self):
        summary = summarize([])
        assert (summary.overall_maturity, summary.overall_compliance, summary.total_flags) == (
            0.0,
            0,
            0,
        )


class TestBands:
    @pytest.mark.parametrize(
        "score, band", [(1.0, "danger"), (1.9, "danger"), (2.0, "warning"), (3.5, "info"), (4.0, "success")]
    )
    def test_maturity(self, score, band):
        assert maturity_band(score) == band

    @pytest.mark.parametrize(
        "score, band", [(0, "danger"), (59, "danger"), (60, "warning"), (85, "info"), (90, "success")]
    )
    def test_compliance(self, score, band):
        assert compliance_band(score) == band


class TestProgress:
    def test_counts_visible_required_questions(self, bank, responses):
        responses.record_response("sec_1", "monthly")
        assert area_progress("security", bank, responses) == 25.0

        responses.record_response("sec_2", "no")
        assert area_progress("security", bank, responses) == 40.0
        assert [q.id for q in unanswered_required("security", bank, responses)] == [
            "sec_2a",
            "sec_3",
            "sec_4",
        ]

    def test_area_without_questions(self, bank, responses):
        assert area_progress("service", bank, responses) == 0.0


class TestFrames:
    def test_results_frame_keeps_unanswered_rows(self, bank, responses):
        responses.record_response("sec_2", "yes")
        responses.record_response("sec_3", ["none"])
        df = results_frame(bank, responses)

        assert len(df) == len(bank)
        row = df.set_index("id").loc["sec_2"]
        assert row["answer"] == "Yes"
        assert not row["flagged"]
        assert df.set_index("id").loc["sec_3", "answer"] == "None of the above"
        assert df.set_index("id").loc["sec_3", "flagged"]
        assert df.set_index("id").loc["proc_1", "answer"] == ""

    def test_area_frame(self, bank, responses):
        responses.record_response("sec_4", "managed")
        df = area_frame(score_areas(bank, responses, areas=bank.areas))
        security = df.set_index("area_id").loc["security"]
        assert security["area"] == "Security"
        assert security["maturity"] == 4.0
        assert security["has_data"]
        assert security["has_maturity"]
        assert not df.set_index("area_id").loc["data", "has_data"]

    def test_payload(self, bank, responses):
        responses.record_response("sec_2", "no")
        payload = results_payload(bank, responses, "fr")
        assert payload["language"] == "fr"
        assert len(payload["areas"]) == len(bank.areas)
        assert payload["flags"] == {
            "Sécurité": ["Pas d'évaluation récente des menaces et des risques"]
        }
        assert payload["summary"]["total_flags"] == 1
        assert payload["summary"]["overall_compliance"] == 0

    def test_area_frame_marks_unweighted_areas(self, bank, responses):
        responses.record_response("tech_1", "no")
        df = area_frame(score_areas(bank, responses, areas=bank.areas)).set_index("area_id")
        assert df.loc["technology", "has_data"]
        assert not df.loc["technology", "has_maturity"]
        assert df.loc["technology", "maturity"] == 0.0
