"""
Questionnaire Data Model

Declarative description of one clinical questionnaire: the questions asked,
the educational inserts shown between them, the candidate medications and
the AI-logic block (global scoring weights + ordered contraindication rules)
the prescription engine runs on.

Definitions are static reference data. Collections are converted to tuples
and read-only mappings on construction, so a loaded questionnaire can be
shared between requests without defensive copies.
"""

from typing import Dict, Any, List, Tuple, Optional, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from enum import Enum
import logging

logger = logging.getLogger(__name__)


# ==================== ERRORS ====================

class QuestionnaireConfigError(ValueError):
    """A questionnaire definition is internally inconsistent."""


class UnsupportedConditionError(QuestionnaireConfigError):
    """A contraindication condition is outside the supported rule language."""


class AnswerValidationError(ValueError):
    """An answer does not satisfy its question's kind, options or bounds."""

    def __init__(self, question_id: str, reason: str):
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"{question_id}: {reason}")


# ==================== ENUMS ====================

class AnswerKind(Enum):
    """How a question is answered (values match the questionnaire documents)"""
    SINGLE_CHOICE = "multiple_choice"
    MULTI_CHOICE = "checkbox"
    BOOLEAN = "boolean"
    NUMBER = "number"
    SCALE = "scale"


class ContraindicationResult(Enum):
    """Outcome tag carried by a contraindication rule"""
    CONSULTATION_REQUIRED = "consultation_required"
    MEDICATION_CONTRAINDICATED = "medication_contraindicated"


class InsertType(Enum):
    FACT = "fact"
    STATISTIC = "statistic"
    ENCOURAGEMENT = "encouragement"
    EDUCATION = "education"


# ==================== QUESTIONS ====================

@dataclass(frozen=True)
class DisplayCondition:
    """`question_id` must hold exactly `value`"""
    question_id: str
    value: Any


@dataclass(frozen=True)
class ConditionalLogic:
    show_if: Optional[DisplayCondition] = None
    hide_if: Optional[DisplayCondition] = None


@dataclass(frozen=True)
class ValidationRules:
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None


@dataclass(frozen=True)
class QuestionDefinition:
    """One question of a questionnaire"""
    id: str
    type: AnswerKind
    title: str
    required: bool
    category: str
    weight: float  # relative importance, typically 1.0-2.5
    options: Tuple[str, ...] = ()
    subtitle: Optional[str] = None
    empathic_message: Optional[str] = None
    conditional_logic: Optional[ConditionalLogic] = None
    validation_rules: Optional[ValidationRules] = None

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def is_choice(self) -> bool:
        return self.type in (AnswerKind.SINGLE_CHOICE, AnswerKind.MULTI_CHOICE)


@dataclass(frozen=True)
class EducationalInsert:
    """Informational card shown after a question. Never scored."""
    id: str
    type: InsertType
    title: str
    content: str
    after_question: Optional[str] = None


# ==================== MEDICATIONS ====================

@dataclass(frozen=True)
class Medication:
    """
    Candidate medication with its static reference data.

    `contraindications` is display text only; safety is enforced through the
    questionnaire's rule list. `suitability_factors` maps question id to a
    signed weight: positive answers raise this medication's fit, negative
    ones lower it.
    """
    id: str
    name: str
    generic_name: str
    cost: float           # monthly, currency units
    effectiveness: float  # 0-10, intrinsic to the medication
    dosages: Tuple[str, ...] = ()
    description: str = ""
    side_effects: Tuple[str, ...] = ()
    contraindications: Tuple[str, ...] = ()
    suitability_factors: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "dosages", tuple(self.dosages))
        object.__setattr__(self, "side_effects", tuple(self.side_effects))
        object.__setattr__(self, "contraindications", tuple(self.contraindications))
        object.__setattr__(
            self, "suitability_factors", MappingProxyType(dict(self.suitability_factors))
        )


# ==================== AI LOGIC ====================

@dataclass(frozen=True)
class ContraindicationRule:
    condition: str
    result: ContraindicationResult
    message: str


@dataclass(frozen=True)
class AILogic:
    """Global scoring weights plus ordered contraindication rules (first match wins)"""
    scoring_weights: Mapping[str, float] = field(default_factory=dict)
    contraindication_rules: Tuple[ContraindicationRule, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "scoring_weights", MappingProxyType(dict(self.scoring_weights)))
        object.__setattr__(self, "contraindication_rules", tuple(self.contraindication_rules))


# ==================== QUESTIONNAIRE ====================

@dataclass(frozen=True)
class Questionnaire:
    id: str
    category: str
    title: str
    description: str
    questions: Tuple[QuestionDefinition, ...]
    medications: Tuple[Medication, ...]
    ai_logic: AILogic
    educational_inserts: Tuple[EducationalInsert, ...] = ()
    empathic_intro: str = ""
    estimated_time: str = ""
    # Question whose answer names the patient's primary concern in the
    # recommendation reasoning. Resolved by questionnaire_loader; an explicit
    # None (declared=True) means the questionnaire has no such question.
    primary_concern_question: Optional[str] = None
    primary_concern_declared: bool = False

    def __post_init__(self):
        object.__setattr__(self, "questions", tuple(self.questions))
        object.__setattr__(self, "medications", tuple(self.medications))
        object.__setattr__(self, "educational_inserts", tuple(self.educational_inserts))

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]

    def get_question(self, question_id: str) -> Optional[QuestionDefinition]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        for medication in self.medications:
            if medication.id == medication_id:
                return medication
        return None

    def inserts_after(self, question_id: str) -> List[EducationalInsert]:
        return [i for i in self.educational_inserts if i.after_question == question_id]

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "estimated_time": self.estimated_time,
            "question_count": len(self.questions),
            "medication_count": len(self.medications),
        }
