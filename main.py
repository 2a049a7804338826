"""
Questionnaire Prescription Recommendation API

Run: python main.py
Docs: http://localhost:8000/docs
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import Config
from prescription_engine import ENGINE_VERSION
from questionnaire_library import list_questionnaires
from recommendation_endpoint import add_questionnaire_routes_to_app

logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Questionnaire Prescription Recommendations", version=ENGINE_VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
add_questionnaire_routes_to_app(app)


@app.get("/health")
async def health_check():
    questionnaires = list_questionnaires()
    return {
        "status": "healthy",
        "engine_version": ENGINE_VERSION,
        "questionnaires": len(questionnaires),
        "strict_conditions": Config.STRICT_CONDITIONS,
    }


if __name__ == "__main__":
    import uvicorn
    print("\n" + "=" * 60)
    print("🏥 Questionnaire Prescription Recommendation API")
    print("=" * 60)
    print(f"📋 Questionnaires: {', '.join(q.id for q in list_questionnaires())}")
    print(f"🌐 Server: http://localhost:{Config.API_PORT}")
    print(f"📚 Docs  : http://localhost:{Config.API_PORT}/docs")
    print("=" * 60 + "\n")
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)
