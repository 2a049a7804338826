"""Shared fixtures: a small questionnaire covering every answer kind."""

import copy

import pytest

from questionnaire_loader import questionnaire_from_dict


BASE_DOCUMENT = {
    "id": "test_questionnaire",
    "category": "Testing",
    "title": "Test Questionnaire",
    "description": "Fixture questionnaire",
    "questions": [
        {
            "id": "severity", "type": "multiple_choice", "title": "How severe?",
            "options": ["Mild", "Severe"], "required": True, "category": "concerns", "weight": 1.0,
        },
        {
            "id": "conditions", "type": "checkbox", "title": "Any conditions?",
            "options": ["A", "B", "C", "None of the above"],
            "required": True, "category": "medical_history", "weight": 1.0,
        },
        {
            "id": "details", "type": "multiple_choice", "title": "Tell us more",
            "options": ["Daily", "Weekly"], "required": True, "category": "history", "weight": 1.0,
            "conditional_logic": {"show_if": {"question_id": "severity", "value": "Severe"}},
        },
        {
            "id": "smoker", "type": "boolean", "title": "Do you smoke?",
            "required": False, "category": "lifestyle", "weight": 1.0,
        },
        {
            "id": "age", "type": "number", "title": "Age",
            "required": False, "category": "demographics", "weight": 1.0,
            "validation_rules": {"min": 18, "max": 120},
        },
        {
            "id": "pain", "type": "scale", "title": "Pain level",
            "required": False, "category": "symptoms", "weight": 1.0,
        },
        {
            "id": "zip_code", "type": "multiple_choice", "title": "ZIP code",
            "required": False, "category": "demographics", "weight": 1.0,
            "validation_rules": {"pattern": r"\d{5}"},
        },
    ],
    "educational_inserts": [
        {"id": "severity_info", "type": "fact", "title": "Severity", "content": "...", "after_question": "severity"},
    ],
    "medications": [
        {"id": "drug_a", "name": "Drug A", "generic_name": "drug a", "cost": 100, "effectiveness": 9},
        {"id": "drug_b", "name": "Drug B", "generic_name": "drug b", "cost": 50, "effectiveness": 7},
    ],
    "ai_logic": {"scoring_weights": {}, "contraindication_rules": []},
}


def build_document(medications=None, weights=None, rules=None, **overrides):
    document = copy.deepcopy(BASE_DOCUMENT)
    if medications is not None:
        document["medications"] = medications
    if weights is not None:
        document["ai_logic"]["scoring_weights"] = weights
    if rules is not None:
        document["ai_logic"]["contraindication_rules"] = rules
    document.update(overrides)
    return document


@pytest.fixture
def make_questionnaire():
    def _make(medications=None, weights=None, rules=None, **overrides):
        return questionnaire_from_dict(build_document(medications, weights, rules, **overrides))
    return _make


@pytest.fixture
def questionnaire(make_questionnaire):
    return make_questionnaire()


def medication(mid, effectiveness, factors=None, cost=100):
    return {
        "id": mid,
        "name": mid.replace("_", " ").title(),
        "generic_name": mid,
        "cost": cost,
        "effectiveness": effectiveness,
        "suitability_factors": factors or {},
    }
