from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[2]
BACKEND_ENV_FILE = BACKEND_DIR / ".env"

WEIGHT_KEYS = ("preference", "mobility", "seniority", "consecutive")


def _parse_origin_list(raw: str) -> list[str]:
    text = raw.strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            return [origin for origin in (str(item).strip() for item in decoded) if origin]
    return [origin for origin in (part.strip() for part in raw.split(",")) if origin]


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Sectionplan API"
    api_prefix: str = "/api"
    environment: str = "development"
    log_level: str | None = None

    optimizer_default_seed: int = 42
    optimizer_default_weights: dict[str, float] = {key: 1.0 for key in WEIGHT_KEYS}

    max_request_size_bytes: int = 2_500_000
    security_enable_hsts: bool = False
    security_hsts_max_age_seconds: int = 31536000

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:4173",
        "http://127.0.0.1:4173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        return _parse_origin_list(value) if isinstance(value, str) else value

    @field_validator("optimizer_default_weights")
    @classmethod
    def validate_default_weights(cls, value: dict[str, float]) -> dict[str, float]:
        unknown = sorted(set(value) - set(WEIGHT_KEYS))
        if unknown:
            raise ValueError(f"Unknown weight key(s): {', '.join(unknown)}")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
