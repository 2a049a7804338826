"""
Response collection for a questionnaire assessment.

Holds the mutable response map while a patient answers, and applies the
per-question rules the engine itself never checks:

- conditional display (show_if / hide_if on another question's answer)
- answer coercion and validation per answer kind (options, min/max, pattern)
- required-question tracking, next question and completion percentage

The engine only ever sees a snapshot. Once a recommendation is produced,
any further answer invalidates it, since it describes the old answers.
"""

from typing import Dict, Any, List, Optional, Mapping
from enum import Enum
import copy
import logging
import re

from questionnaire_models import (
    AnswerKind,
    AnswerValidationError,
    EducationalInsert,
    QuestionDefinition,
    Questionnaire,
)
from prescription_engine import PrescriptionEngine, RecommendationResult

logger = logging.getLogger(__name__)


class AssessmentStatus(Enum):
    COLLECTING = "collecting"
    READY = "ready"
    COMPLETED = "completed"


class AssessmentNotReadyError(RuntimeError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Required questions unanswered: {', '.join(missing)}")


# ==================== VISIBILITY ====================

def is_question_visible(question: QuestionDefinition, responses: Mapping[str, Any]) -> bool:
    logic = question.conditional_logic
    if logic is None:
        return True
    if logic.show_if is not None:
        return responses.get(logic.show_if.question_id) == logic.show_if.value
    if logic.hide_if is not None:
        return responses.get(logic.hide_if.question_id) != logic.hide_if.value
    return True


def visible_questions(questionnaire: Questionnaire, responses: Mapping[str, Any]) -> List[QuestionDefinition]:
    return [q for q in questionnaire.questions if is_question_visible(q, responses)]


def has_value(value: Any) -> bool:
    return value is not None and value != "" and value != []


# ==================== ANSWER COERCION ====================

class AnswerCoercer:
    """
    Kind-aware coercion and validation. Rejects malformed values rather than
    storing them; the stored shape is what the engine expects:

        multiple_choice → str          checkbox → List[str]
        boolean         → "Yes" / "No"  number   → int | float
        scale           → int 1-10
    """

    TRUE_WORDS = ("yes", "y", "true")
    FALSE_WORDS = ("no", "n", "false")

    SCALE_MIN = 1
    SCALE_MAX = 10

    @staticmethod
    def coerce(question: QuestionDefinition, value: Any) -> Any:
        kind = question.type

        if kind == AnswerKind.SINGLE_CHOICE:
            result = AnswerCoercer._single_choice(question, value)
        elif kind == AnswerKind.MULTI_CHOICE:
            result = AnswerCoercer._multi_choice(question, value)
        elif kind == AnswerKind.BOOLEAN:
            result = AnswerCoercer._boolean(question, value)
        elif kind == AnswerKind.NUMBER:
            result = AnswerCoercer._number(question, value)
        else:
            result = AnswerCoercer._scale(question, value)

        AnswerCoercer._check_rules(question, result)
        return result

    @staticmethod
    def _single_choice(question: QuestionDefinition, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise AnswerValidationError(question.id, "expected a single option")
        value = value.strip()
        if question.options and value not in question.options:
            raise AnswerValidationError(question.id, f"{value!r} is not an option")
        return value

    @staticmethod
    def _multi_choice(question: QuestionDefinition, value: Any) -> List[str]:
        if isinstance(value, str) and value.strip() in question.options:
            # Option labels may themselves contain commas
            items = [value.strip()]
        elif isinstance(value, str):
            items = [v.strip() for v in value.split(",") if v.strip()]
        elif isinstance(value, (list, tuple)):
            items = [str(v).strip() for v in value]
        else:
            raise AnswerValidationError(question.id, "expected a list of options")

        selected = []
        for item in items:
            if question.options and item not in question.options:
                raise AnswerValidationError(question.id, f"{item!r} is not an option")
            if item not in selected:
                selected.append(item)
        return selected

    @staticmethod
    def _boolean(question: QuestionDefinition, value: Any) -> str:
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, str):
            low = value.strip().lower()
            if low in AnswerCoercer.TRUE_WORDS:
                return "Yes"
            if low in AnswerCoercer.FALSE_WORDS:
                return "No"
        raise AnswerValidationError(question.id, "expected Yes or No")

    @staticmethod
    def _to_number(question: QuestionDefinition, value: Any) -> float:
        if isinstance(value, bool):
            raise AnswerValidationError(question.id, "expected a number")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise AnswerValidationError(question.id, "expected a number")

    @staticmethod
    def _number(question: QuestionDefinition, value: Any):
        number = AnswerCoercer._to_number(question, value)
        return int(number) if number.is_integer() else number

    @staticmethod
    def _scale(question: QuestionDefinition, value: Any) -> int:
        number = AnswerCoercer._to_number(question, value)
        if not number.is_integer():
            raise AnswerValidationError(question.id, "scale answers are whole numbers")
        number = int(number)
        if not AnswerCoercer.SCALE_MIN <= number <= AnswerCoercer.SCALE_MAX:
            raise AnswerValidationError(
                question.id, f"scale answers run {AnswerCoercer.SCALE_MIN}-{AnswerCoercer.SCALE_MAX}"
            )
        return number

    @staticmethod
    def _check_rules(question: QuestionDefinition, value: Any) -> None:
        rules = question.validation_rules
        if rules is None:
            return
        if isinstance(value, (int, float)):
            if rules.min is not None and value < rules.min:
                raise AnswerValidationError(question.id, f"must be at least {rules.min}")
            if rules.max is not None and value > rules.max:
                raise AnswerValidationError(question.id, f"must be at most {rules.max}")
        if rules.pattern and isinstance(value, str) and not re.fullmatch(rules.pattern, value):
            raise AnswerValidationError(question.id, "does not match the expected format")


def coerce_answer(question: QuestionDefinition, raw: Any) -> Any:
    return AnswerCoercer.coerce(question, raw)


def validate_answer(question: QuestionDefinition, raw: Any) -> Optional[str]:
    """None if `raw` is acceptable for `question`, else the reason it is not."""
    try:
        AnswerCoercer.coerce(question, raw)
    except AnswerValidationError as e:
        return e.reason
    return None


# ==================== PROGRESS ====================

def missing_required_questions(questionnaire: Questionnaire, responses: Mapping[str, Any]) -> List[str]:
    return [
        q.id for q in visible_questions(questionnaire, responses)
        if q.required and not has_value(responses.get(q.id))
    ]


def next_question(questionnaire: Questionnaire, responses: Mapping[str, Any]) -> Optional[QuestionDefinition]:
    """First visible question without an answer (required or not), in order."""
    for question in visible_questions(questionnaire, responses):
        if not has_value(responses.get(question.id)):
            return question
    return None


def completion_percentage(questionnaire: Questionnaire, responses: Mapping[str, Any]) -> float:
    required = [q.id for q in visible_questions(questionnaire, responses) if q.required]
    if not required:
        return 100.0
    filled = [qid for qid in required if has_value(responses.get(qid))]
    return len(filled) / len(required) * 100


# ==================== SESSION ====================

class AssessmentSession:
    """
    One patient working through one questionnaire.

    collecting → ready (every visible required question answered)
               → completed (recommendation produced from a snapshot)
    """

    def __init__(self, questionnaire: Questionnaire):
        self.questionnaire = questionnaire
        self._responses: Dict[str, Any] = {}
        self._result: Optional[RecommendationResult] = None

    @property
    def responses(self) -> Dict[str, Any]:
        return copy.deepcopy(self._responses)

    @property
    def result(self) -> Optional[RecommendationResult]:
        return self._result

    @property
    def status(self) -> AssessmentStatus:
        if self._result is not None:
            return AssessmentStatus.COMPLETED
        if missing_required_questions(self.questionnaire, self._responses):
            return AssessmentStatus.COLLECTING
        return AssessmentStatus.READY

    def _question(self, question_id: str) -> QuestionDefinition:
        question = self.questionnaire.get_question(question_id)
        if question is None:
            raise AnswerValidationError(question_id, "unknown question")
        return question

    def _prune_hidden(self) -> None:
        # Hiding one question can hide another that depends on it.
        changed = True
        while changed:
            changed = False
            for question in self.questionnaire.questions:
                if question.id in self._responses and not is_question_visible(question, self._responses):
                    logger.info(f"🔀 {question.id} no longer shown, dropping its answer")
                    del self._responses[question.id]
                    changed = True

    def _invalidate(self) -> None:
        if self._result is not None:
            logger.info("♻️  Answers changed after completion; previous recommendation discarded")
        self._result = None

    def answer(self, question_id: str, value: Any) -> Any:
        question = self._question(question_id)
        if not is_question_visible(question, self._responses):
            raise AnswerValidationError(question_id, "question is not shown for the current answers")

        coerced = AnswerCoercer.coerce(question, value)
        self._responses[question_id] = coerced
        self._prune_hidden()
        self._invalidate()
        logger.info(f"✅ {question_id} = {coerced}")
        return coerced

    def update(self, responses: Mapping[str, Any]) -> None:
        """Bulk-load answers; visibility is applied once all are in."""
        coerced = {}
        for question_id, value in responses.items():
            if value is None:
                continue
            coerced[question_id] = AnswerCoercer.coerce(self._question(question_id), value)
        self._responses.update(coerced)
        self._prune_hidden()
        self._invalidate()

    def clear(self, question_id: str) -> None:
        self._question(question_id)
        self._responses.pop(question_id, None)
        self._prune_hidden()
        self._invalidate()

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self._responses)

    def pending_inserts(self) -> List[EducationalInsert]:
        """Inserts attached to questions answered so far, in question order."""
        inserts = []
        for question in self.questionnaire.questions:
            if has_value(self._responses.get(question.id)):
                inserts.extend(self.questionnaire.inserts_after(question.id))
        return inserts

    def progress(self) -> Dict[str, Any]:
        upcoming = next_question(self.questionnaire, self._responses)
        return {
            "status": self.status.value,
            "completion_percentage": round(completion_percentage(self.questionnaire, self._responses), 1),
            "visible_questions": [q.id for q in visible_questions(self.questionnaire, self._responses)],
            "missing_required": missing_required_questions(self.questionnaire, self._responses),
            "next_question": upcoming.id if upcoming else None,
            "educational_inserts": [i.id for i in self.pending_inserts()],
        }

    def complete(self, strict: bool = False, force: bool = False) -> RecommendationResult:
        missing = missing_required_questions(self.questionnaire, self._responses)
        if missing and not force:
            raise AssessmentNotReadyError(missing)

        self._result = PrescriptionEngine.evaluate(self.snapshot(), self.questionnaire, strict=strict)
        return self._result
