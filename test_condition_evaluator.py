"""
Tests for the contraindication condition language.

Tests verify:
1. Parsing into Equals / Includes / And / Or, with AND binding tighter
2. includes = multi-choice membership, equals = exact text equality
3. Unparseable conditions never match (or raise in strict mode)
"""

import pytest

from condition_evaluator import (
    And,
    Equals,
    Includes,
    Or,
    evaluate_condition,
    iter_predicates,
    parse_condition,
)
from questionnaire_models import UnsupportedConditionError


class TestParsing:

    def test_includes(self):
        assert parse_condition('medical_conditions includes "Gastroparesis"') == Includes(
            "medical_conditions", "Gastroparesis"
        )

    def test_equals_with_punctuation_in_value(self):
        node = parse_condition('medications equals "Heart medications (nitrates)"')
        assert node == Equals("medications", "Heart medications (nitrates)")

    def test_and(self):
        node = parse_condition('gender equals "Female" AND medications includes "None of the above"')
        assert node == And((Equals("gender", "Female"), Includes("medications", "None of the above")))

    def test_and_binds_tighter_than_or(self):
        node = parse_condition('a equals "x" OR b equals "y" AND c includes "z"')
        assert node == Or((Equals("a", "x"), And((Equals("b", "y"), Includes("c", "z")))))

    def test_iter_predicates_flattens(self):
        node = parse_condition('a equals "x" OR b equals "y" AND c includes "z"')
        assert [p.field for p in iter_predicates(node)] == ["a", "b", "c"]

    @pytest.mark.parametrize("text", [
        "",
        "age > 18",
        'age greater "18"',
        'conditions includes Gastroparesis',
        'conditions includes "A" and smoker equals "Yes"',
        'conditions includes "A" AND',
        '(conditions includes "A")',
        'NOT conditions includes "A"',
    ])
    def test_unsupported(self, text):
        with pytest.raises(UnsupportedConditionError):
            parse_condition(text)


class TestEvaluation:

    def test_includes_matches_selection(self):
        assert evaluate_condition('conditions includes "A"', {"conditions": ["A", "B"]})

    def test_includes_misses_other_selection(self):
        assert not evaluate_condition('conditions includes "C"', {"conditions": ["A", "B"]})

    def test_includes_is_exact_membership(self):
        assert not evaluate_condition('conditions includes "Heart"', {"conditions": ["Heart disease"]})

    def test_includes_needs_a_list(self):
        assert not evaluate_condition('conditions includes "A"', {"conditions": "A"})

    def test_equals_matches_exact_string(self):
        assert evaluate_condition('severity equals "Severe"', {"severity": "Severe"})

    def test_equals_is_case_sensitive(self):
        assert not evaluate_condition('severity equals "Severe"', {"severity": "severe"})

    def test_equals_never_matches_a_list(self):
        assert not evaluate_condition('conditions equals "A"', {"conditions": ["A"]})

    def test_equals_on_boolean_answer_uses_label(self):
        assert evaluate_condition('smoker equals "Yes"', {"smoker": True})
        assert evaluate_condition('smoker equals "No"', {"smoker": False})

    def test_missing_field_never_matches(self):
        assert not evaluate_condition('severity equals "Severe"', {})
        assert not evaluate_condition('conditions includes "A"', {})

    def test_and_requires_both(self):
        condition = 'gender equals "Female" AND medications includes "None of the above"'
        assert evaluate_condition(condition, {"gender": "Female", "medications": ["None of the above"]})
        assert not evaluate_condition(condition, {"gender": "Male", "medications": ["None of the above"]})
        assert not evaluate_condition(condition, {"gender": "Female", "medications": ["Steroids"]})

    def test_or_requires_either(self):
        condition = 'a equals "x" OR b includes "y"'
        assert evaluate_condition(condition, {"a": "x"})
        assert evaluate_condition(condition, {"b": ["y"]})
        assert not evaluate_condition(condition, {"a": "z", "b": []})

    def test_unparseable_condition_is_false(self):
        assert evaluate_condition("age > 18", {"age": 40}) is False

    def test_unparseable_condition_raises_when_strict(self):
        with pytest.raises(UnsupportedConditionError):
            evaluate_condition("age > 18", {"age": 40}, strict=True)

    def test_responses_not_mutated(self):
        responses = {"conditions": ["A"]}
        evaluate_condition('conditions includes "A"', responses)
        assert responses == {"conditions": ["A"]}
