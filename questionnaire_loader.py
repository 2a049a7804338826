"""
Questionnaire loading and load-time validation.

Questionnaire documents are JSON-shaped dictionaries. Both the camelCase
keys used by the questionnaire front end (`suitabilityFactors`,
`contraIndicationRules`, `afterQuestion`, ...) and snake_case keys are
accepted.

Validation runs before a questionnaire is handed to the engine. Problems
that would make a safety rule silently ineffective are errors; dangling
scoring references are only warnings because the engine ignores them.
"""

from typing import Dict, Any, List, Optional, Tuple
from dataclasses import replace
import logging

from questionnaire_models import (
    AILogic,
    AnswerKind,
    ConditionalLogic,
    ContraindicationResult,
    ContraindicationRule,
    DisplayCondition,
    EducationalInsert,
    InsertType,
    Medication,
    QuestionDefinition,
    Questionnaire,
    QuestionnaireConfigError,
    UnsupportedConditionError,
    ValidationRules,
)
from condition_evaluator import Equals, Includes, iter_predicates, parse_condition
from responses import format_number

logger = logging.getLogger(__name__)

CONCERNS_CATEGORY = "concerns"


# ==================== DICT → MODEL ====================

def _pick(data: Dict[str, Any], snake: str, camel: Optional[str] = None, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    if camel and camel in data:
        return data[camel]
    return default


def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if key not in data:
        raise QuestionnaireConfigError(f"{context}: missing required field '{key}'")
    return data[key]


def _enum(enum_cls, value: Any, context: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise QuestionnaireConfigError(f"{context}: invalid value {value!r} (allowed: {allowed})")


def _display_condition(data: Optional[Dict[str, Any]]) -> Optional[DisplayCondition]:
    if not data:
        return None
    return DisplayCondition(
        question_id=_pick(data, "question_id", "questionId"),
        value=data.get("value"),
    )


def _question_from_dict(data: Dict[str, Any]) -> QuestionDefinition:
    qid = _require(data, "id", "question")
    context = f"question '{qid}'"

    logic = _pick(data, "conditional_logic", "conditionalLogic")
    conditional_logic = None
    if logic:
        conditional_logic = ConditionalLogic(
            show_if=_display_condition(_pick(logic, "show_if", "showIf")),
            hide_if=_display_condition(_pick(logic, "hide_if", "hideIf")),
        )

    rules = _pick(data, "validation_rules", "validationRules")
    validation_rules = None
    if rules:
        validation_rules = ValidationRules(
            min=rules.get("min"), max=rules.get("max"), pattern=rules.get("pattern")
        )

    return QuestionDefinition(
        id=qid,
        type=_enum(AnswerKind, _require(data, "type", context), context),
        title=_require(data, "title", context),
        required=bool(data.get("required", False)),
        category=data.get("category", ""),
        weight=float(data.get("weight", 1.0)),
        options=data.get("options") or (),
        subtitle=data.get("subtitle"),
        empathic_message=_pick(data, "empathic_message", "empathicMessage"),
        conditional_logic=conditional_logic,
        validation_rules=validation_rules,
    )


def _insert_from_dict(data: Dict[str, Any]) -> EducationalInsert:
    iid = _require(data, "id", "educational insert")
    return EducationalInsert(
        id=iid,
        type=_enum(InsertType, data.get("type", "fact"), f"insert '{iid}'"),
        title=data.get("title", ""),
        content=data.get("content", ""),
        after_question=_pick(data, "after_question", "afterQuestion"),
    )


def _medication_from_dict(data: Dict[str, Any]) -> Medication:
    mid = _require(data, "id", "medication")
    context = f"medication '{mid}'"
    return Medication(
        id=mid,
        name=_require(data, "name", context),
        generic_name=_pick(data, "generic_name", "genericName", ""),
        cost=float(_require(data, "cost", context)),
        effectiveness=float(_require(data, "effectiveness", context)),
        dosages=data.get("dosages") or (),
        description=data.get("description", ""),
        side_effects=_pick(data, "side_effects", "sideEffects") or (),
        contraindications=data.get("contraindications") or (),
        suitability_factors={
            k: float(v) for k, v in (_pick(data, "suitability_factors", "suitabilityFactors") or {}).items()
        },
    )


def _ai_logic_from_dict(data: Dict[str, Any]) -> AILogic:
    rules = []
    raw_rules = _pick(data, "contraindication_rules", "contraIndicationRules") or []
    for index, rule in enumerate(raw_rules):
        context = f"contraindication rule #{index}"
        rules.append(ContraindicationRule(
            condition=_require(rule, "condition", context),
            result=_enum(ContraindicationResult, _require(rule, "result", context), context),
            message=rule.get("message", ""),
        ))
    weights = _pick(data, "scoring_weights", "scoringWeights") or {}
    return AILogic(
        scoring_weights={k: float(v) for k, v in weights.items()},
        contraindication_rules=rules,
    )


def questionnaire_from_dict(data: Dict[str, Any], validate: bool = True) -> Questionnaire:
    """
    Build a Questionnaire from a document and (by default) validate it.

    Validation also resolves `primary_concern_question` when the document
    does not declare one. Declare it as None for a questionnaire without a
    primary-concern question.
    """
    qid = _require(data, "id", "questionnaire")
    context = f"questionnaire '{qid}'"

    questionnaire = Questionnaire(
        id=qid,
        category=data.get("category", ""),
        title=_require(data, "title", context),
        description=data.get("description", ""),
        questions=[_question_from_dict(q) for q in data.get("questions", [])],
        medications=[_medication_from_dict(m) for m in data.get("medications", [])],
        ai_logic=_ai_logic_from_dict(_pick(data, "ai_logic", "aiLogic") or {}),
        educational_inserts=[
            _insert_from_dict(i) for i in _pick(data, "educational_inserts", "educationalInserts") or []
        ],
        empathic_intro=_pick(data, "empathic_intro", "empathicIntro", ""),
        estimated_time=_pick(data, "estimated_time", "estimatedTime", ""),
        primary_concern_question=_pick(data, "primary_concern_question", "primaryConcernQuestion"),
        primary_concern_declared="primary_concern_question" in data or "primaryConcernQuestion" in data,
    )

    if not validate:
        return questionnaire

    validate_questionnaire(questionnaire)
    return replace(
        questionnaire,
        primary_concern_question=resolve_primary_concern_question(questionnaire),
        primary_concern_declared=True,
    )


# ==================== MODEL → DICT ====================

def _display_condition_to_dict(condition: Optional[DisplayCondition]) -> Optional[Dict[str, Any]]:
    if condition is None:
        return None
    return {"question_id": condition.question_id, "value": condition.value}


def question_to_dict(question: QuestionDefinition) -> Dict[str, Any]:
    data = {
        "id": question.id,
        "type": question.type.value,
        "title": question.title,
        "subtitle": question.subtitle,
        "options": list(question.options),
        "required": question.required,
        "category": question.category,
        "weight": question.weight,
    }
    if question.conditional_logic:
        data["conditional_logic"] = {
            "show_if": _display_condition_to_dict(question.conditional_logic.show_if),
            "hide_if": _display_condition_to_dict(question.conditional_logic.hide_if),
        }
    if question.validation_rules:
        rules = question.validation_rules
        data["validation_rules"] = {"min": rules.min, "max": rules.max, "pattern": rules.pattern}
    return data


def medication_to_dict(medication: Medication) -> Dict[str, Any]:
    return {
        "id": medication.id,
        "name": medication.name,
        "generic_name": medication.generic_name,
        "dosages": list(medication.dosages),
        "description": medication.description,
        "side_effects": list(medication.side_effects),
        "contraindications": list(medication.contraindications),
        "cost": medication.cost,
        "effectiveness": medication.effectiveness,
        "suitability_factors": dict(medication.suitability_factors),
    }


def questionnaire_to_dict(questionnaire: Questionnaire) -> Dict[str, Any]:
    return {
        "id": questionnaire.id,
        "category": questionnaire.category,
        "title": questionnaire.title,
        "description": questionnaire.description,
        "empathic_intro": questionnaire.empathic_intro,
        "estimated_time": questionnaire.estimated_time,
        "primary_concern_question": questionnaire.primary_concern_question,
        "questions": [question_to_dict(q) for q in questionnaire.questions],
        "educational_inserts": [
            {
                "id": i.id,
                "type": i.type.value,
                "title": i.title,
                "content": i.content,
                "after_question": i.after_question,
            }
            for i in questionnaire.educational_inserts
        ],
        "medications": [medication_to_dict(m) for m in questionnaire.medications],
        "ai_logic": {
            "scoring_weights": dict(questionnaire.ai_logic.scoring_weights),
            "contraindication_rules": [
                {"condition": r.condition, "result": r.result.value, "message": r.message}
                for r in questionnaire.ai_logic.contraindication_rules
            ],
        },
    }


# ==================== VALIDATION ====================

def resolve_primary_concern_question(questionnaire: Questionnaire) -> Optional[str]:
    """
    The question whose answer is quoted in the recommendation reasoning.

    A declared id must name an existing question; a declared None means the
    questionnaire has no concern sentence. Without a declaration the single
    question with category "concerns" is used, and zero or several such
    questions are a configuration error.
    """
    declared = questionnaire.primary_concern_question
    if declared is not None:
        if questionnaire.get_question(declared) is None:
            raise QuestionnaireConfigError(
                f"questionnaire '{questionnaire.id}': primary concern question "
                f"'{declared}' does not exist"
            )
        return declared
    if questionnaire.primary_concern_declared:
        return None

    candidates = [q.id for q in questionnaire.questions if q.category == CONCERNS_CATEGORY]
    if len(candidates) != 1:
        found = f"{len(candidates)} questions" if candidates else "no question"
        listed = f" ({', '.join(candidates)})" if candidates else ""
        raise QuestionnaireConfigError(
            f"questionnaire '{questionnaire.id}': {found} in category "
            f"'{CONCERNS_CATEGORY}'{listed}; declare primary_concern_question (null for none)"
        )
    return candidates[0]


def _check_equals_value(predicate: Equals, question: QuestionDefinition, context: str) -> None:
    """`equals` compares against the answer's canonical text; reject values it can never produce."""
    value = predicate.value
    if question.type == AnswerKind.MULTI_CHOICE:
        raise QuestionnaireConfigError(
            f"{context}: 'equals' cannot match multi-choice question '{question.id}', use 'includes'"
        )
    if question.type == AnswerKind.BOOLEAN and value not in ("Yes", "No"):
        raise QuestionnaireConfigError(
            f"{context}: yes/no question '{question.id}' compares against \"Yes\" or \"No\", not {value!r}"
        )
    if question.type in (AnswerKind.NUMBER, AnswerKind.SCALE):
        try:
            canonical = format_number(value)
        except ValueError:
            raise QuestionnaireConfigError(
                f"{context}: {value!r} is not a number, '{question.id}' is {question.type.value}"
            )
        if canonical != value:
            raise QuestionnaireConfigError(
                f"{context}: write {value!r} as \"{canonical}\" to match '{question.id}'"
            )


def _check_rules(questionnaire: Questionnaire) -> None:
    for index, rule in enumerate(questionnaire.ai_logic.contraindication_rules):
        try:
            node = parse_condition(rule.condition)
        except UnsupportedConditionError as e:
            raise UnsupportedConditionError(
                f"questionnaire '{questionnaire.id}', rule #{index}: {e}"
            ) from e

        for predicate in iter_predicates(node):
            context = f"questionnaire '{questionnaire.id}', rule #{index} ({rule.condition!r})"
            question = questionnaire.get_question(predicate.field)
            if question is None:
                raise QuestionnaireConfigError(
                    f"{context}: references unknown question '{predicate.field}'"
                )
            if isinstance(predicate, Includes) and question.type != AnswerKind.MULTI_CHOICE:
                raise QuestionnaireConfigError(
                    f"{context}: 'includes' needs a multi-choice question, "
                    f"'{question.id}' is {question.type.value}"
                )
            if isinstance(predicate, Equals):
                _check_equals_value(predicate, question, context)
            if question.options and predicate.value not in question.options:
                raise QuestionnaireConfigError(
                    f"{context}: {predicate.value!r} is not an option of '{question.id}'"
                )


def validate_questionnaire(questionnaire: Questionnaire) -> List[str]:
    """
    Raise QuestionnaireConfigError on structural problems; return warnings.
    """
    qid = questionnaire.id
    warnings: List[str] = []

    all_ids = set(questionnaire.question_ids)
    seen = set()
    for question in questionnaire.questions:
        if question.id in seen:
            raise QuestionnaireConfigError(f"questionnaire '{qid}': duplicate question id '{question.id}'")
        seen.add(question.id)

        logic = question.conditional_logic
        if logic:
            for condition in (logic.show_if, logic.hide_if):
                if condition and condition.question_id not in all_ids:
                    raise QuestionnaireConfigError(
                        f"questionnaire '{qid}': question '{question.id}' depends on "
                        f"unknown question '{condition.question_id}'"
                    )

        rules = question.validation_rules
        if rules and rules.min is not None and rules.max is not None and rules.min > rules.max:
            raise QuestionnaireConfigError(
                f"questionnaire '{qid}': question '{question.id}' has min > max"
            )

    medication_ids = set()
    for medication in questionnaire.medications:
        if medication.id in medication_ids:
            raise QuestionnaireConfigError(f"questionnaire '{qid}': duplicate medication id '{medication.id}'")
        medication_ids.add(medication.id)

        if not 0 <= medication.effectiveness <= 10:
            raise QuestionnaireConfigError(
                f"questionnaire '{qid}': medication '{medication.id}' effectiveness "
                f"{medication.effectiveness} outside 0-10"
            )
        if medication.cost <= 0:
            raise QuestionnaireConfigError(
                f"questionnaire '{qid}': medication '{medication.id}' cost must be positive"
            )

        for question_id in medication.suitability_factors:
            if question_id not in seen:
                warnings.append(
                    f"medication '{medication.id}' suitability factor references unknown question '{question_id}'"
                )

    for question_id in questionnaire.ai_logic.scoring_weights:
        if question_id not in seen:
            warnings.append(f"scoring weight references unknown question '{question_id}'")

    for insert in questionnaire.educational_inserts:
        if insert.after_question and insert.after_question not in seen:
            warnings.append(f"insert '{insert.id}' follows unknown question '{insert.after_question}'")

    _check_rules(questionnaire)
    resolve_primary_concern_question(questionnaire)

    for warning in warnings:
        logger.warning(f"⚠️  [{qid}] {warning} (ignored at evaluation time)")

    return warnings
