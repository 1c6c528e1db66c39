from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Career Tracker API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database - supports both SQLite (local) and PostgreSQL/Supabase (production)
    database_url: str = "sqlite+aiosqlite:///./careertrack.db"

    # Server
    port: int = 5001

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000"

    # Supabase (hosted auth)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # AI/LLM Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout_seconds: float = 60.0
    gemini_max_retries: int = 0  # 0 = no automatic retry

    # Uploads
    max_upload_mb: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
