"""
Questionnaire Prescription Recommendation Engine

Maps a patient's questionnaire answers to a ranked set of medication
recommendations, gated by hard contraindication rules.

PIPELINE:
1. Contraindication check - the questionnaire's rules run in order; the first
   rule that matches blocks the run with its result tag and message.
2. Medication scoring - every candidate medication gets an additive,
   explainable suitability score seeded at its effectiveness rating.
3. Recommendation assembly - ranking, primary + alternates, confidence band
   and human-readable reasoning.

The engine is a pure function of (responses, questionnaire). It keeps no
state between runs, and every result carries the hash of the response
snapshot it was computed from.
"""

from typing import Dict, Any, List, Tuple, Optional, Mapping
from dataclasses import dataclass
from enum import Enum
import logging

from questionnaire_models import (
    ContraindicationResult,
    Medication,
    Questionnaire,
)
from questionnaire_loader import medication_to_dict
from condition_evaluator import evaluate_condition
from responses import MultiChoiceAnswer, ResponseMap, format_number

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"


# ==================== DATA MODELS ====================

class RecommendationType(Enum):
    """Final outcome categories"""
    APPROVED = "approved"
    CONSULTATION_REQUIRED = "consultation_required"
    MEDICATION_CONTRAINDICATED = "medication_contraindicated"
    NO_MEDICATIONS_AVAILABLE = "no_medications_available"


@dataclass(frozen=True)
class ContraindicationCheck:
    has_contraindications: bool
    message: Optional[str] = None
    result: Optional[ContraindicationResult] = None
    rule_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.has_contraindications:
            return {"has_contraindications": False}
        return {
            "has_contraindications": True,
            "message": self.message,
            "result": self.result.value,
            "rule_index": self.rule_index,
        }


@dataclass(frozen=True)
class ScoreContribution:
    """One additive term of a medication score"""
    question_id: str
    source: str  # "suitability_factor" | "scoring_weight"
    amount: float


@dataclass(frozen=True)
class ScoredMedication:
    medication: Medication
    score: float
    rank: int
    contributions: Tuple[ScoreContribution, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = medication_to_dict(self.medication)
        data["score"] = self.score
        data["rank"] = self.rank
        data["score_breakdown"] = [
            {"question_id": c.question_id, "source": c.source, "amount": round(c.amount, 4)}
            for c in self.contributions
        ]
        return data


@dataclass(frozen=True)
class RecommendationResult:
    type: RecommendationType
    confidence: int
    responses_hash: str
    primary_recommendation: Optional[ScoredMedication] = None
    alternative_options: Tuple[ScoredMedication, ...] = ()
    reasoning: Tuple[str, ...] = ()
    message: Optional[str] = None

    @property
    def blocked(self) -> bool:
        return self.type in (
            RecommendationType.CONSULTATION_REQUIRED,
            RecommendationType.MEDICATION_CONTRAINDICATED,
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.type != RecommendationType.APPROVED:
            return {
                "type": self.type.value,
                "message": self.message,
                "medications": [],
                "confidence": self.confidence,
                "responses_hash": self.responses_hash,
            }
        return {
            "type": self.type.value,
            "primary_recommendation": self.primary_recommendation.to_dict(),
            "alternative_options": [m.to_dict() for m in self.alternative_options],
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "responses_hash": self.responses_hash,
        }


# ==================== STAGE 1: CONTRAINDICATIONS ====================

class ContraindicationChecker:
    """
    Runs the questionnaire's contraindication rules in declaration order.

    The first matching rule decides the outcome and evaluation stops there.
    A rule whose condition cannot be parsed never matches; questionnaire
    validation rejects such rules before they get here, and strict=True
    turns them into UnsupportedConditionError at run time.
    """

    @staticmethod
    def check(responses: Mapping[str, Any], questionnaire: Questionnaire,
              strict: bool = False) -> ContraindicationCheck:
        snapshot = ResponseMap.from_raw(responses, questionnaire)

        for index, rule in enumerate(questionnaire.ai_logic.contraindication_rules):
            if evaluate_condition(rule.condition, snapshot, strict=strict):
                logger.warning(
                    f"❌ Contraindication rule #{index} matched: {rule.condition} "
                    f"→ {rule.result.value}"
                )
                return ContraindicationCheck(
                    has_contraindications=True,
                    message=rule.message,
                    result=rule.result,
                    rule_index=index,
                )

        logger.info("✅ No contraindications")
        return ContraindicationCheck(has_contraindications=False)


# ==================== STAGE 2: MEDICATION SCORING ====================

class MedicationScorer:
    """
    Additive suitability score on a 0-10 scale.

    score = effectiveness
          + Σ suitability factors  (multi-choice: n × factor × 0.1, else factor × 0.2)
          + Σ global weights       (multi-choice: n × weight × 0.15, else weight × 0.1)
    clamped into [0, 10]. Unanswered or unknown questions add nothing.
    """

    FACTOR_PER_SELECTION = 0.1
    FACTOR_PER_ANSWER = 0.2
    WEIGHT_PER_SELECTION = 0.15
    WEIGHT_PER_ANSWER = 0.1

    MIN_SCORE = 0.0
    MAX_SCORE = 10.0

    @staticmethod
    def _term(answer, coefficient: float, per_selection: float, per_answer: float) -> float:
        if isinstance(answer, MultiChoiceAnswer):
            return answer.count * coefficient * per_selection
        return coefficient * per_answer

    @staticmethod
    def score_with_breakdown(responses: Mapping[str, Any], medication: Medication,
                             questionnaire: Questionnaire) -> Tuple[float, List[ScoreContribution]]:
        snapshot = ResponseMap.from_raw(responses, questionnaire)
        score = medication.effectiveness
        contributions = []

        for question_id, factor in medication.suitability_factors.items():
            if questionnaire.get_question(question_id) is None:
                continue
            answer = snapshot.answered(question_id)
            if answer is None:
                continue
            amount = MedicationScorer._term(
                answer, factor,
                MedicationScorer.FACTOR_PER_SELECTION, MedicationScorer.FACTOR_PER_ANSWER,
            )
            score += amount
            contributions.append(ScoreContribution(question_id, "suitability_factor", amount))

        for question_id, weight in questionnaire.ai_logic.scoring_weights.items():
            if questionnaire.get_question(question_id) is None:
                continue
            answer = snapshot.answered(question_id)
            if answer is None:
                continue
            amount = MedicationScorer._term(
                answer, weight,
                MedicationScorer.WEIGHT_PER_SELECTION, MedicationScorer.WEIGHT_PER_ANSWER,
            )
            score += amount
            contributions.append(ScoreContribution(question_id, "scoring_weight", amount))

        clamped = max(MedicationScorer.MIN_SCORE, min(MedicationScorer.MAX_SCORE, score))
        logger.debug(f"  • {medication.id}: raw {score:.3f} → {clamped:.3f}")
        return clamped, contributions

    @staticmethod
    def score(responses: Mapping[str, Any], medication: Medication,
              questionnaire: Questionnaire) -> float:
        return MedicationScorer.score_with_breakdown(responses, medication, questionnaire)[0]


# ==================== STAGE 3: RECOMMENDATION ASSEMBLY ====================

class RecommendationAssembler:
    """Ranks scored medications and turns the top one into a recommendation."""

    BLOCKED_CONFIDENCE = 95
    MIN_CONFIDENCE = 60
    MAX_CONFIDENCE = 95
    MAX_ALTERNATIVES = 2

    @staticmethod
    def rank(responses: Mapping[str, Any], questionnaire: Questionnaire) -> List[ScoredMedication]:
        scored = []
        for medication in questionnaire.medications:
            score, contributions = MedicationScorer.score_with_breakdown(
                responses, medication, questionnaire
            )
            scored.append((medication, score, contributions))

        # sorted() is stable: equal scores keep declaration order
        ordered = sorted(scored, key=lambda item: -item[1])
        return [
            ScoredMedication(medication, score, rank, tuple(contributions))
            for rank, (medication, score, contributions) in enumerate(ordered, start=1)
        ]

    @staticmethod
    def confidence_for(score: float) -> int:
        """Linear 0-10 → 60-95 band."""
        return round(min(
            RecommendationAssembler.MAX_CONFIDENCE,
            max(RecommendationAssembler.MIN_CONFIDENCE, score * 10),
        ))

    @staticmethod
    def generate_reasoning(responses: ResponseMap, medication: Medication,
                           questionnaire: Questionnaire) -> List[str]:
        reasons = [
            f"{medication.name} is recommended based on your specific health profile",
            f"Clinical effectiveness rating: {format_number(medication.effectiveness)}/10",
            f"Cost-effective option at ${format_number(medication.cost)} per month",
        ]

        concern_id = questionnaire.primary_concern_question
        if concern_id:
            concern = responses.answered(concern_id)
            if concern is not None:
                reasons.append(f"Specifically effective for {concern.display().lower()}")

        return reasons


# ==================== MAIN ENGINE ====================

class PrescriptionEngine:
    """Orchestrates the three stages for one response snapshot."""

    @staticmethod
    def evaluate(responses: Mapping[str, Any], questionnaire: Questionnaire,
                 strict: bool = False) -> RecommendationResult:
        logger.info("=" * 60)
        logger.info(f"🏥 STARTING RECOMMENDATION: {questionnaire.id}")
        logger.info("=" * 60)

        snapshot = ResponseMap.from_raw(responses, questionnaire)
        responses_hash = snapshot.fingerprint()

        # ─── STAGE 1: Contraindications ───
        check = ContraindicationChecker.check(snapshot, questionnaire, strict=strict)
        if check.has_contraindications:
            result_type = RecommendationType(check.result.value)
            logger.info(f"🎯 FINAL: {result_type.value.upper()} (rule #{check.rule_index})")
            return RecommendationResult(
                type=result_type,
                confidence=RecommendationAssembler.BLOCKED_CONFIDENCE,
                responses_hash=responses_hash,
                message=check.message,
            )

        if not questionnaire.medications:
            logger.error(f"❌ Questionnaire '{questionnaire.id}' has no candidate medications")
            return RecommendationResult(
                type=RecommendationType.NO_MEDICATIONS_AVAILABLE,
                confidence=0,
                responses_hash=responses_hash,
                message="No medications are available for this assessment.",
            )

        # ─── STAGE 2: Scoring ───
        ranked = RecommendationAssembler.rank(snapshot, questionnaire)
        for scored in ranked:
            logger.info(f"  • #{scored.rank} {scored.medication.name}: {scored.score:.2f}/10")

        # ─── STAGE 3: Assembly ───
        primary = ranked[0]
        alternatives = ranked[1:1 + RecommendationAssembler.MAX_ALTERNATIVES]
        confidence = RecommendationAssembler.confidence_for(primary.score)
        reasoning = RecommendationAssembler.generate_reasoning(
            snapshot, primary.medication, questionnaire
        )

        logger.info(f"🎯 FINAL: APPROVED → {primary.medication.name} | Confidence: {confidence}%")

        return RecommendationResult(
            type=RecommendationType.APPROVED,
            confidence=confidence,
            responses_hash=responses_hash,
            primary_recommendation=primary,
            alternative_options=tuple(alternatives),
            reasoning=tuple(reasoning),
        )


# ==================== FUNCTION INTERFACE ====================

def check_contraindications(responses: Mapping[str, Any], questionnaire: Questionnaire,
                            strict: bool = False) -> Dict[str, Any]:
    return ContraindicationChecker.check(responses, questionnaire, strict=strict).to_dict()


def score_medication(responses: Mapping[str, Any], medication: Medication,
                     questionnaire: Questionnaire) -> float:
    return MedicationScorer.score(responses, medication, questionnaire)


def generate_recommendation(responses: Mapping[str, Any], questionnaire: Questionnaire,
                            strict: bool = False) -> Dict[str, Any]:
    """
    Run the full pipeline and return a JSON-serializable result.

    Approved:  {type, primary_recommendation, alternative_options, confidence, reasoning, responses_hash}
    Blocked:   {type, message, medications: [], confidence: 95, responses_hash}
    """
    return PrescriptionEngine.evaluate(responses, questionnaire, strict=strict).to_dict()
