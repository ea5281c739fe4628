# toybattle/config.py
import os

DEFAULT_ORIGINS = "http://localhost:3000,http://localhost:3002,http://localhost:3003"


def _origins(raw: str):
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if origins == ["*"]:
        return "*"
    return origins


class Config:
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3002"))
    SECRET_KEY = os.getenv("SECRET_KEY", "toybattle-dev")
    CORS_ALLOWED_ORIGINS = _origins(os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_ORIGINS))
    MATCH_START_DELAY = float(os.getenv("MATCH_START_DELAY", "1.0"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
