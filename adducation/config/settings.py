"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Adducation"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Remote backend (auth, profile, progress)
    api_base_url: str = "http://localhost:5000"
    health_check_timeout_seconds: float = 5.0
    request_timeout_seconds: float = 30.0

    # Candidate endpoint templates, tried in order until one is not a 404.
    # {user_id} is substituted per call.
    login_endpoints_str: str = Field(
        default="/api/auth/login,/auth/login,/login",
        validation_alias="login_endpoints",
    )
    progress_endpoints_str: str = Field(
        default="/api/users/{user_id}/progress,/users/{user_id}/progress,/user/{user_id}/progress",
        validation_alias="progress_endpoints",
    )
    register_endpoint: str = "/api/auth/register"
    profile_endpoint: str = "/api/users/{user_id}"

    # OpenRouter (LLM provider)
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_api_key: str = ""
    default_model: str = "anthropic/claude-3-sonnet-20240229"
    interview_model: str = "anthropic/claude-3-haiku-20240307"
    http_referer: str = "https://adducation.com"
    app_title: str = "Adducation Learning Platform"
    llm_timeout_seconds: float = 60.0

    # Local durable storage (empty = in-memory only)
    storage_path: str = "./data/local_storage.json"

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def login_endpoints(self) -> list[str]:
        """Ordered login endpoint candidates."""
        return _split_csv(self.login_endpoints_str)

    @computed_field
    @property
    def progress_endpoints(self) -> list[str]:
        """Ordered progress endpoint templates."""
        return _split_csv(self.progress_endpoints_str)

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return _split_csv(self.cors_origins_str)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
