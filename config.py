import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# ==================== CONFIGURATION ====================
class Config:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    CORS_ORIGINS: List[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    # Unparseable contraindication rules raise instead of never matching
    STRICT_CONDITIONS = _as_bool(os.getenv("STRICT_CONDITIONS", "false"))
