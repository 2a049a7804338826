"""
FastAPI Endpoints for Questionnaire Recommendations

Exposes the questionnaire library, answer progress tracking and the
prescription recommendation engine over HTTP.

Every request carries the full response map collected so far. Answers are
validated against their questions, answers to questions hidden by
conditional logic are dropped, and the engine runs on the resulting
snapshot. No state is kept between requests.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, Optional, List
from datetime import datetime
import logging

from config import Config
from questionnaire_models import AnswerValidationError, Questionnaire, QuestionnaireConfigError
from questionnaire_library import get_questionnaire, list_questionnaires
from questionnaire_loader import questionnaire_to_dict
from prescription_engine import ENGINE_VERSION, ContraindicationChecker
from response_collector import AssessmentNotReadyError, AssessmentSession

logger = logging.getLogger(__name__)

questionnaire_router = APIRouter(prefix="/questionnaires", tags=["questionnaires"])


# ==================== REQUEST/RESPONSE MODELS ====================

class AssessmentRequest(BaseModel):
    """Responses collected so far for one questionnaire"""
    responses: Dict[str, Any] = Field(default_factory=dict, description="Question id → answer")
    session_id: Optional[str] = Field(None, description="Session identifier for tracking")
    allow_incomplete: bool = Field(
        False, description="Recommend even if required questions are unanswered"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "responses": {
                    "primary_concern": "Acne and breakouts",
                    "skin_type": "Oily - shiny, enlarged pores, frequent breakouts",
                    "acne_severity": "Moderate - regular breakouts, some inflammation",
                    "current_routine": ["Daily cleanser", "Moisturizer"],
                    "hormonal_factors": ["None of the above"],
                    "skin_sensitivity": "Somewhat tolerant - occasional mild irritation",
                },
                "session_id": "20260131123456",
            }
        }
    )


class QuestionnaireSummary(BaseModel):
    id: str
    category: str
    title: str
    description: str
    estimated_time: str
    question_count: int
    medication_count: int


class ProgressResponse(BaseModel):
    questionnaire_id: str
    session_id: Optional[str]
    status: str
    completion_percentage: float
    visible_questions: List[str]
    missing_required: List[str]
    next_question: Optional[str]
    educational_inserts: List[str]


class ContraindicationResponse(BaseModel):
    questionnaire_id: str
    has_contraindications: bool
    message: Optional[str] = None
    result: Optional[str] = None
    rule_index: Optional[int] = None
    safe_to_proceed: bool


class RecommendationResponse(BaseModel):
    """Engine output plus request metadata"""
    success: bool
    timestamp: str
    session_id: Optional[str]
    questionnaire_id: str

    recommendation: Dict[str, Any]
    responses_hash: str

    # Metadata
    processing_time: float
    engine_version: str = ENGINE_VERSION


# ==================== HELPERS ====================

def _load_questionnaire(questionnaire_id: str) -> Questionnaire:
    questionnaire = get_questionnaire(questionnaire_id)
    if questionnaire is None:
        raise HTTPException(status_code=404, detail=f"Unknown questionnaire: {questionnaire_id}")
    return questionnaire


def _session_for(questionnaire: Questionnaire, request: AssessmentRequest) -> AssessmentSession:
    session = AssessmentSession(questionnaire)
    try:
        session.update(request.responses)
    except AnswerValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"question_id": e.question_id, "error": e.reason},
        )
    return session


# ==================== ENDPOINTS ====================

@questionnaire_router.get("", response_model=List[QuestionnaireSummary])
async def get_questionnaires():
    """List the available questionnaires."""
    return [q.summary() for q in list_questionnaires()]


@questionnaire_router.get("/{questionnaire_id}")
async def get_questionnaire_definition(questionnaire_id: str):
    """Full definition: questions, inserts, medications and prescription logic."""
    return questionnaire_to_dict(_load_questionnaire(questionnaire_id))


@questionnaire_router.post("/{questionnaire_id}/progress", response_model=ProgressResponse)
async def get_progress(questionnaire_id: str, request: AssessmentRequest):
    """
    Which questions are shown for the current answers, what is still missing
    and which question comes next.
    """
    questionnaire = _load_questionnaire(questionnaire_id)
    session = _session_for(questionnaire, request)
    return ProgressResponse(
        questionnaire_id=questionnaire.id,
        session_id=request.session_id,
        **session.progress(),
    )


@questionnaire_router.post("/{questionnaire_id}/check-contraindications",
                           response_model=ContraindicationResponse)
async def check_contraindications(questionnaire_id: str, request: AssessmentRequest):
    """
    Run only the contraindication rules.

    Useful for early screening while answers are still being collected.
    """
    questionnaire = _load_questionnaire(questionnaire_id)
    session = _session_for(questionnaire, request)

    try:
        check = ContraindicationChecker.check(
            session.snapshot(), questionnaire, strict=Config.STRICT_CONDITIONS
        )
    except QuestionnaireConfigError as e:
        logger.error(f"❌ Contraindication check failed for {questionnaire_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Questionnaire configuration error: {str(e)}")

    return ContraindicationResponse(
        questionnaire_id=questionnaire.id,
        safe_to_proceed=not check.has_contraindications,
        **check.to_dict(),
    )


@questionnaire_router.post("/{questionnaire_id}/recommendation", response_model=RecommendationResponse)
async def generate_recommendation(questionnaire_id: str, request: AssessmentRequest):
    """
    Generate a medication recommendation from questionnaire answers.

    1. Contraindication rules (first match blocks the recommendation)
    2. Medication scoring (effectiveness + suitability factors + global weights)
    3. Ranking, confidence and reasoning

    **Returns:**
    - approved: primary recommendation, up to two alternatives, reasoning
    - consultation_required / medication_contraindicated: the rule's message
    """
    start_time = datetime.now()
    questionnaire = _load_questionnaire(questionnaire_id)

    try:
        logger.info(f"🔍 Recommendation for {questionnaire_id}, session: {request.session_id}")

        session = _session_for(questionnaire, request)
        result = session.complete(
            strict=Config.STRICT_CONDITIONS,
            force=request.allow_incomplete,
        )

        processing_time = (datetime.now() - start_time).total_seconds()

        response = RecommendationResponse(
            success=True,
            timestamp=datetime.now().isoformat(),
            session_id=request.session_id,
            questionnaire_id=questionnaire.id,
            recommendation=result.to_dict(),
            responses_hash=result.responses_hash,
            processing_time=round(processing_time, 3),
        )

        logger.info(f"✅ Recommendation completed: {result.type.value} (confidence: {result.confidence})")

        return response

    except HTTPException:
        raise
    except AssessmentNotReadyError as e:
        raise HTTPException(
            status_code=409,
            detail={"error": "assessment incomplete", "missing_required": e.missing},
        )
    except Exception as e:
        logger.error(f"❌ Recommendation failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Recommendation error: {str(e)}"
        )


# ==================== INTEGRATION HELPER ====================

def add_questionnaire_routes_to_app(app):
    """
    Usage in main.py:
        from recommendation_endpoint import add_questionnaire_routes_to_app
        add_questionnaire_routes_to_app(app)
    """
    app.include_router(questionnaire_router)
    logger.info("✅ Questionnaire routes registered")
