"""
Tests for questionnaire loading and load-time validation.
"""

import pytest

from conftest import build_document, medication
from questionnaire_loader import (
    questionnaire_from_dict,
    questionnaire_to_dict,
    resolve_primary_concern_question,
    validate_questionnaire,
)
from questionnaire_models import (
    AnswerKind,
    ContraindicationResult,
    QuestionnaireConfigError,
    UnsupportedConditionError,
)


def rule(condition, result="consultation_required"):
    return {"condition": condition, "result": result, "message": "msg"}


class TestLoading:

    def test_snake_case_document(self, questionnaire):
        assert questionnaire.id == "test_questionnaire"
        assert questionnaire.get_question("conditions").type == AnswerKind.MULTI_CHOICE
        assert questionnaire.get_question("conditions").options == ("A", "B", "C", "None of the above")
        assert questionnaire.get_medication("drug_a").effectiveness == 9
        assert questionnaire.inserts_after("severity")[0].id == "severity_info"

    def test_camel_case_document(self):
        document = {
            "id": "camel",
            "title": "Camel",
            "questions": [
                {
                    "id": "concern", "type": "multiple_choice", "title": "Concern?",
                    "options": ["X", "Y"], "required": True, "category": "concerns", "weight": 2,
                },
                {
                    "id": "follow_up", "type": "checkbox", "title": "More?",
                    "options": ["P", "Q"], "required": False, "category": "other", "weight": 1,
                    "conditionalLogic": {"hideIf": {"questionId": "concern", "value": "Y"}},
                    "empathicMessage": "Take your time.",
                },
            ],
            "educationalInserts": [
                {"id": "tip", "type": "statistic", "title": "Tip", "content": "...", "afterQuestion": "concern"},
            ],
            "medications": [{
                "id": "med", "name": "Med", "genericName": "medicine", "cost": 20, "effectiveness": 6,
                "sideEffects": ["Nausea"], "suitabilityFactors": {"concern": 1.5},
            }],
            "aiLogic": {
                "scoringWeights": {"follow_up": 1.2},
                "contraIndicationRules": [rule('follow_up includes "P"', "medication_contraindicated")],
            },
            "empathicIntro": "Hello",
            "estimatedTime": "2 minutes",
        }
        questionnaire = questionnaire_from_dict(document)

        follow_up = questionnaire.get_question("follow_up")
        assert follow_up.conditional_logic.hide_if.question_id == "concern"
        assert follow_up.empathic_message == "Take your time."
        assert questionnaire.medications[0].generic_name == "medicine"
        assert questionnaire.medications[0].side_effects == ("Nausea",)
        assert questionnaire.medications[0].suitability_factors["concern"] == 1.5
        assert questionnaire.ai_logic.scoring_weights == {"follow_up": 1.2}
        assert questionnaire.ai_logic.contraindication_rules[0].result == ContraindicationResult.MEDICATION_CONTRAINDICATED
        assert questionnaire.educational_inserts[0].after_question == "concern"
        assert questionnaire.empathic_intro == "Hello"
        assert questionnaire.estimated_time == "2 minutes"
        assert questionnaire.primary_concern_question == "concern"

    def test_loaded_definition_is_read_only(self, questionnaire):
        with pytest.raises(TypeError):
            questionnaire.medications[0].suitability_factors["severity"] = 1.0

    def test_to_dict_round_trips(self, make_questionnaire):
        questionnaire = make_questionnaire(rules=[rule('conditions includes "A"')])
        assert questionnaire_from_dict(questionnaire_to_dict(questionnaire)) == questionnaire

    def test_missing_required_field(self):
        document = build_document()
        del document["medications"][0]["cost"]
        with pytest.raises(QuestionnaireConfigError, match="cost"):
            questionnaire_from_dict(document)

    def test_unknown_question_type(self):
        document = build_document()
        document["questions"][0]["type"] = "free_text"
        with pytest.raises(QuestionnaireConfigError, match="free_text"):
            questionnaire_from_dict(document)

    def test_unknown_rule_result(self):
        with pytest.raises(QuestionnaireConfigError, match="denied"):
            questionnaire_from_dict(build_document(rules=[rule('conditions includes "A"', "denied")]))


class TestValidation:

    def test_duplicate_question_id(self):
        document = build_document()
        document["questions"].append(dict(document["questions"][0]))
        with pytest.raises(QuestionnaireConfigError, match="duplicate question id 'severity'"):
            questionnaire_from_dict(document)

    def test_duplicate_medication_id(self):
        with pytest.raises(QuestionnaireConfigError, match="duplicate medication id"):
            questionnaire_from_dict(build_document(medications=[medication("m", 5), medication("m", 6)]))

    def test_unknown_conditional_reference(self):
        document = build_document()
        document["questions"][2]["conditional_logic"]["show_if"]["question_id"] = "nowhere"
        with pytest.raises(QuestionnaireConfigError, match="unknown question 'nowhere'"):
            questionnaire_from_dict(document)

    def test_conditional_reference_to_later_question_allowed(self):
        document = build_document()
        document["questions"][0]["conditional_logic"] = {
            "hide_if": {"question_id": "zip_code", "value": "00000"}
        }
        questionnaire_from_dict(document)

    def test_min_above_max(self):
        document = build_document()
        document["questions"][4]["validation_rules"] = {"min": 10, "max": 5}
        with pytest.raises(QuestionnaireConfigError, match="min > max"):
            questionnaire_from_dict(document)

    @pytest.mark.parametrize("effectiveness", [-1, 10.5, 11])
    def test_effectiveness_out_of_range(self, effectiveness):
        with pytest.raises(QuestionnaireConfigError, match="effectiveness"):
            questionnaire_from_dict(build_document(medications=[medication("m", effectiveness)]))

    @pytest.mark.parametrize("cost", [0, -10])
    def test_cost_must_be_positive(self, cost):
        with pytest.raises(QuestionnaireConfigError, match="cost"):
            questionnaire_from_dict(build_document(medications=[medication("m", 5, cost=cost)]))

    def test_unparseable_rule(self):
        with pytest.raises(UnsupportedConditionError, match="rule #0"):
            questionnaire_from_dict(build_document(rules=[rule("age > 18")]))

    def test_rule_references_unknown_question(self):
        with pytest.raises(QuestionnaireConfigError, match="unknown question 'allergies'"):
            questionnaire_from_dict(build_document(rules=[rule('allergies includes "A"')]))

    def test_includes_on_single_choice_question(self):
        with pytest.raises(QuestionnaireConfigError, match="multi-choice"):
            questionnaire_from_dict(build_document(rules=[rule('severity includes "Severe"')]))

    def test_rule_value_must_be_an_option(self):
        with pytest.raises(QuestionnaireConfigError, match="not an option of 'conditions'"):
            questionnaire_from_dict(build_document(rules=[rule('conditions includes "Pregnancy"')]))

    def test_rule_value_checked_inside_compound(self):
        condition = 'severity equals "Severe" AND conditions includes "D"'
        with pytest.raises(QuestionnaireConfigError, match="'D'"):
            questionnaire_from_dict(build_document(rules=[rule(condition)]))

    @pytest.mark.parametrize("condition", [
        'smoker equals "Yes"',
        'age equals "18"',
        'age equals "42.5"',
        'pain equals "10"',
    ])
    def test_equals_on_typed_questions(self, condition):
        questionnaire_from_dict(build_document(rules=[rule(condition)]))

    @pytest.mark.parametrize("condition,message", [
        ('conditions equals "A"', "use 'includes'"),
        ('smoker equals "yes"', "Yes"),
        ('age equals "eighteen"', "not a number"),
        ('age equals "18.0"', 'as "18"'),
        ('pain equals "ten"', "not a number"),
    ])
    def test_equals_value_that_can_never_match(self, condition, message):
        with pytest.raises(QuestionnaireConfigError, match=message):
            questionnaire_from_dict(build_document(rules=[rule(condition)]))

    def test_dangling_references_are_warnings(self, make_questionnaire):
        questionnaire = make_questionnaire(
            medications=[medication("m", 5, {"previous_treatments": 1.8})],
            weights={"ghost": 1.0},
        )
        warnings = validate_questionnaire(questionnaire)

        assert any("previous_treatments" in w for w in warnings)
        assert any("ghost" in w for w in warnings)

    def test_clean_questionnaire_has_no_warnings(self, questionnaire):
        assert validate_questionnaire(questionnaire) == []


class TestPrimaryConcern:

    def test_derived_from_concerns_category(self, questionnaire):
        assert questionnaire.primary_concern_question == "severity"

    def test_explicit_declaration_wins(self, make_questionnaire):
        questionnaire = make_questionnaire(primary_concern_question="conditions")
        assert questionnaire.primary_concern_question == "conditions"

    def test_declared_question_must_exist(self, make_questionnaire):
        with pytest.raises(QuestionnaireConfigError, match="does not exist"):
            make_questionnaire(primary_concern_question="missing")

    def test_no_concerns_question_must_be_declared(self):
        document = build_document()
        document["questions"][0]["category"] = "symptoms"
        with pytest.raises(QuestionnaireConfigError, match="no question in category 'concerns'"):
            questionnaire_from_dict(document)

    def test_explicit_none_means_no_concern(self):
        document = build_document(primary_concern_question=None)
        document["questions"][0]["category"] = "symptoms"
        assert questionnaire_from_dict(document).primary_concern_question is None

    def test_explicit_none_overrides_concerns_category(self):
        assert questionnaire_from_dict(build_document(primary_concern_question=None)).primary_concern_question is None

    def test_camel_case_declaration(self):
        document = build_document(primaryConcernQuestion="conditions")
        assert questionnaire_from_dict(document).primary_concern_question == "conditions"

    def test_ambiguous_concerns_questions(self):
        document = build_document()
        document["questions"][1]["category"] = "concerns"
        with pytest.raises(QuestionnaireConfigError, match="declare primary_concern_question"):
            questionnaire_from_dict(document)

    def test_ambiguity_resolved_by_declaration(self):
        document = build_document(primary_concern_question="conditions")
        document["questions"][1]["category"] = "concerns"
        questionnaire = questionnaire_from_dict(document)
        assert resolve_primary_concern_question(questionnaire) == "conditions"
