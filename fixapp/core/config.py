# File: fixapp\core\config.py
# Project: fixapp-backend
# Auto-added for reference

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    .env file may contain:

    Optional (with defaults):
    - DATABASE_URL=sqlite:///./fixapp.db (any SQLAlchemy URL)
    - BACKEND_CORS_ORIGINS=http://localhost:5173,http://127.0.0.1:5173
    - SOLVE_API_URL=https://photomath1.p.rapidapi.com/maths/solve-problem
    - SOLVE_API_HOST=photomath1.p.rapidapi.com
    - TRACKING_ID_MAX_ATTEMPTS=5
    - QUIZ_SESSION_MAX_AGE=3600 (seconds a practice session may sit idle)
    - QUIZ_MAX_SESSIONS=10000 (least recently used sessions are dropped beyond this)
    - LOG_LEVEL=INFO

    Optional (no defaults - will be None if not set):
    - SOLVE_API_KEY=your-rapidapi-key (solve endpoint answers 503 without it)
    - SOLVE_API_TIMEOUT=30 (seconds; unset means no timeout)
    """
    database_url: str = Field(default="sqlite:///./fixapp.db", alias="DATABASE_URL")
    backend_cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        alias="BACKEND_CORS_ORIGINS",
    )

    solve_api_url: str = Field(
        default="https://photomath1.p.rapidapi.com/maths/solve-problem",
        alias="SOLVE_API_URL",
    )
    solve_api_key: Optional[str] = Field(default=None, alias="SOLVE_API_KEY")
    solve_api_host: str = Field(default="photomath1.p.rapidapi.com", alias="SOLVE_API_HOST")
    solve_api_timeout: Optional[float] = Field(default=None, alias="SOLVE_API_TIMEOUT")

    tracking_id_max_attempts: int = Field(default=5, ge=1, alias="TRACKING_ID_MAX_ATTEMPTS")
    quiz_session_max_age: float = Field(default=3600, gt=0, alias="QUIZ_SESSION_MAX_AGE")
    quiz_max_sessions: int = Field(default=10000, ge=1, alias="QUIZ_MAX_SESSIONS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

def cors_origins_list() -> List[str]:
    raw = settings.backend_cors_origins or ""
    return [x.strip().rstrip("/") for x in raw.split(",") if x.strip()]

settings = Settings()
