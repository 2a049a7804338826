"""
Tests for response collection: visibility, coercion, progress and sessions.
"""

from dataclasses import replace

import pytest

from questionnaire_models import AnswerValidationError, ConditionalLogic, DisplayCondition
from questionnaire_library import get_questionnaire
from response_collector import (
    AssessmentNotReadyError,
    AssessmentSession,
    AssessmentStatus,
    coerce_answer,
    completion_percentage,
    is_question_visible,
    missing_required_questions,
    next_question,
    validate_answer,
    visible_questions,
)


class TestVisibility:

    def test_show_if_hidden_until_value_matches(self, questionnaire):
        details = questionnaire.get_question("details")

        assert not is_question_visible(details, {})
        assert not is_question_visible(details, {"severity": "Mild"})
        assert is_question_visible(details, {"severity": "Severe"})

    def test_hide_if(self, questionnaire):
        hidden_for_mild = replace(
            questionnaire.get_question("smoker"),
            conditional_logic=ConditionalLogic(hide_if=DisplayCondition("severity", "Mild")),
        )

        assert is_question_visible(hidden_for_mild, {})
        assert not is_question_visible(hidden_for_mild, {"severity": "Mild"})
        assert is_question_visible(hidden_for_mild, {"severity": "Severe"})

    def test_skincare_acne_question_follows_primary_concern(self):
        questionnaire = get_questionnaire("prescription_skincare")

        shown = [q.id for q in visible_questions(questionnaire, {"primary_concern": "Acne and breakouts"})]
        hidden = [q.id for q in visible_questions(questionnaire, {"primary_concern": "Melasma"})]

        assert "acne_severity" in shown
        assert "acne_severity" not in hidden


class TestCoercion:

    def test_single_choice(self, questionnaire):
        assert coerce_answer(questionnaire.get_question("severity"), " Mild ") == "Mild"

    def test_single_choice_rejects_unknown_option(self, questionnaire):
        with pytest.raises(AnswerValidationError) as exc:
            coerce_answer(questionnaire.get_question("severity"), "Moderate")
        assert exc.value.question_id == "severity"

    def test_multi_choice_from_list_deduplicates(self, questionnaire):
        assert coerce_answer(questionnaire.get_question("conditions"), ["A", "B", "A"]) == ["A", "B"]

    def test_multi_choice_from_comma_string(self, questionnaire):
        assert coerce_answer(questionnaire.get_question("conditions"), "A, C") == ["A", "C"]

    @pytest.mark.parametrize("questionnaire_id,question_id,label", [
        ("glp1_weight_loss", "previous_attempts",
         "Commercial weight loss programs (Weight Watchers, Jenny Craig)"),
        ("hair_growth_treatment", "medical_conditions",
         "Scalp conditions (psoriasis, seborrheic dermatitis)"),
    ])
    def test_multi_choice_option_containing_comma(self, questionnaire_id, question_id, label):
        question = get_questionnaire(questionnaire_id).get_question(question_id)

        assert coerce_answer(question, label) == [label]
        assert coerce_answer(question, [label]) == [label]

    def test_multi_choice_empty_list(self, questionnaire):
        assert coerce_answer(questionnaire.get_question("conditions"), []) == []

    def test_multi_choice_rejects_unknown_option(self, questionnaire):
        assert validate_answer(questionnaire.get_question("conditions"), ["A", "Z"]) == "'Z' is not an option"

    @pytest.mark.parametrize("raw,expected", [
        (True, "Yes"), (False, "No"), ("yes", "Yes"), ("NO", "No"), (" true ", "Yes"), ("n", "No"),
    ])
    def test_boolean(self, questionnaire, raw, expected):
        assert coerce_answer(questionnaire.get_question("smoker"), raw) == expected

    def test_boolean_rejects_other_text(self, questionnaire):
        assert validate_answer(questionnaire.get_question("smoker"), "maybe") == "expected Yes or No"

    @pytest.mark.parametrize("raw,expected", [(42, 42), ("42", 42), ("42.5", 42.5), (30.0, 30)])
    def test_number(self, questionnaire, raw, expected):
        value = coerce_answer(questionnaire.get_question("age"), raw)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("raw", [17, 121, "abc", True])
    def test_number_rejected(self, questionnaire, raw):
        with pytest.raises(AnswerValidationError):
            coerce_answer(questionnaire.get_question("age"), raw)

    def test_glp1_weight_bounds(self):
        weight = get_questionnaire("glp1_weight_loss").get_question("current_weight")

        assert coerce_answer(weight, "185") == 185
        assert validate_answer(weight, 50) == "must be at least 80"
        assert validate_answer(weight, 650) == "must be at most 600"

    @pytest.mark.parametrize("raw,valid", [(1, True), (10, True), ("7", True), (0, False), (11, False), (5.5, False)])
    def test_scale(self, questionnaire, raw, valid):
        assert (validate_answer(questionnaire.get_question("pain"), raw) is None) is valid

    def test_pattern(self, questionnaire):
        zip_code = questionnaire.get_question("zip_code")

        assert coerce_answer(zip_code, "12345") == "12345"
        assert validate_answer(zip_code, "1234a") == "does not match the expected format"


class TestProgress:

    def test_missing_required_skips_hidden(self, questionnaire):
        assert missing_required_questions(questionnaire, {}) == ["severity", "conditions"]
        assert missing_required_questions(questionnaire, {"severity": "Severe"}) == ["conditions", "details"]

    def test_completion_percentage(self, questionnaire):
        assert completion_percentage(questionnaire, {}) == 0
        assert completion_percentage(questionnaire, {"severity": "Mild"}) == 50
        assert completion_percentage(questionnaire, {"severity": "Severe"}) == pytest.approx(100 / 3)
        assert completion_percentage(questionnaire, {"severity": "Mild", "conditions": []}) == 50

    def test_completion_without_required_questions(self, make_questionnaire):
        questionnaire = make_questionnaire(questions=[{
            "id": "only", "type": "boolean", "title": "?", "required": False, "category": "x", "weight": 1,
        }], primary_concern_question=None)
        assert completion_percentage(questionnaire, {}) == 100.0

    def test_next_question_in_order(self, questionnaire):
        assert next_question(questionnaire, {}).id == "severity"
        assert next_question(questionnaire, {"severity": "Mild"}).id == "conditions"
        assert next_question(questionnaire, {"severity": "Severe", "conditions": ["A"]}).id == "details"
        assert next_question(questionnaire, {"severity": "Mild", "conditions": ["A"]}).id == "smoker"

    def test_next_question_none_when_all_answered(self, questionnaire):
        responses = {
            "severity": "Mild", "conditions": ["A"], "smoker": "No", "age": 40, "pain": 3, "zip_code": "12345",
        }
        assert next_question(questionnaire, responses) is None


class TestAssessmentSession:

    def test_status_transitions(self, questionnaire):
        session = AssessmentSession(questionnaire)
        assert session.status == AssessmentStatus.COLLECTING

        session.answer("severity", "Mild")
        session.answer("conditions", ["B"])
        assert session.status == AssessmentStatus.READY

        result = session.complete()
        assert session.status == AssessmentStatus.COMPLETED
        assert session.result is result
        assert result.primary_recommendation.medication.id == "drug_a"

    def test_answer_returns_stored_value(self, questionnaire):
        session = AssessmentSession(questionnaire)
        assert session.answer("smoker", "yes") == "Yes"
        assert session.responses == {"smoker": "Yes"}

    def test_unknown_question(self, questionnaire):
        with pytest.raises(AnswerValidationError, match="unknown question"):
            AssessmentSession(questionnaire).answer("favourite_colour", "blue")

    def test_hidden_question_cannot_be_answered(self, questionnaire):
        session = AssessmentSession(questionnaire)
        with pytest.raises(AnswerValidationError, match="not shown"):
            session.answer("details", "Daily")

    def test_hiding_a_question_drops_its_answer(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.answer("severity", "Severe")
        session.answer("details", "Daily")

        session.answer("severity", "Mild")

        assert "details" not in session.responses

    def test_complete_refuses_missing_required(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.answer("severity", "Severe")

        with pytest.raises(AssessmentNotReadyError) as exc:
            session.complete()
        assert exc.value.missing == ["conditions", "details"]

    def test_complete_forced(self, questionnaire):
        session = AssessmentSession(questionnaire)
        result = session.complete(force=True)
        assert result.type.value == "approved"

    def test_new_answer_invalidates_result(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.update({"severity": "Mild", "conditions": ["A"]})
        first = session.complete()

        session.answer("conditions", ["A", "B"])

        assert session.result is None
        assert session.status == AssessmentStatus.READY
        assert session.complete().responses_hash != first.responses_hash

    def test_update_bulk_applies_visibility_after_all_answers(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.update({"details": "Daily", "severity": "Severe", "conditions": "A", "age": None})

        assert session.responses == {"details": "Daily", "severity": "Severe", "conditions": ["A"]}

    def test_update_drops_answers_to_hidden_questions(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.update({"details": "Daily", "severity": "Mild"})
        assert session.responses == {"severity": "Mild"}

    def test_update_is_all_or_nothing(self, questionnaire):
        session = AssessmentSession(questionnaire)
        with pytest.raises(AnswerValidationError):
            session.update({"severity": "Mild", "age": 5})
        assert session.responses == {}

    def test_clear(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.answer("severity", "Severe")
        session.answer("details", "Weekly")

        session.clear("severity")

        assert session.responses == {}

    def test_snapshot_is_a_copy(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.answer("conditions", ["A"])

        snapshot = session.snapshot()
        snapshot["conditions"].append("B")

        assert session.responses == {"conditions": ["A"]}

    def test_pending_inserts(self, questionnaire):
        session = AssessmentSession(questionnaire)
        assert session.pending_inserts() == []

        session.answer("severity", "Mild")
        assert [i.id for i in session.pending_inserts()] == ["severity_info"]

    def test_progress(self, questionnaire):
        session = AssessmentSession(questionnaire)
        session.answer("severity", "Severe")

        assert session.progress() == {
            "status": "collecting",
            "completion_percentage": 33.3,
            "visible_questions": ["severity", "conditions", "details", "smoker", "age", "pain", "zip_code"],
            "missing_required": ["conditions", "details"],
            "next_question": "conditions",
            "educational_inserts": ["severity_info"],
        }
