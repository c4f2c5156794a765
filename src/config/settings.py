"""Application settings sourced from environment variables."""

from __future__ import annotations

import os
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

PACKAGE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_DIR

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://192.168.1.43:3000"]


def _split_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return list(default)
    parts = [item.strip() for item in value.split(",") if item.strip()]
    return parts or list(default)


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _env_date(value: str | None, default: date) -> date:
    if not value:
        return default
    return date.fromisoformat(value.strip())


class Settings(BaseModel):
    """Runtime configuration for the Monzo MCP gateway."""

    project_name: str = Field(default="Monzo MCP Gateway")
    version: str = Field(default="0.1.0")
    monzo_token: str | None = Field(default=None, description="Monzo access token")
    monzo_user_id: str | None = Field(
        default=None, description="Fallback owner id for accounts and getUserInfo"
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    monzo_base_url: str = Field(default="https://api.monzo.com")
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4o")
    openai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    reference_date: date = Field(
        default=date(2025, 3, 28),
        description="Date the assistant treats as 'today' for relative time queries",
    )
    chat_max_tokens_cap: int = Field(default=4096, gt=0)
    upstream_timeout: float = Field(default=30.0, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    cors_default_origin: str = Field(default="http://localhost:3000")
    tool_config_path: str = Field(
        default=str(CONFIG_DIR / "tools.yaml"),
        description="Path to the tool manifest",
    )
    log_level: str = Field(default="INFO", description="Application log level")
    prometheus_enabled: bool = Field(
        default=False, description="Expose Prometheus metrics endpoint"
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8787, gt=0, lt=65536)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""

    return Settings(
        project_name=os.getenv("GATEWAY_PROJECT_NAME", "Monzo MCP Gateway"),
        version=os.getenv("GATEWAY_VERSION", "0.1.0"),
        monzo_token=os.getenv("MONZO_TOKEN") or None,
        monzo_user_id=os.getenv("MONZO_USER_ID") or None,
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        monzo_base_url=os.getenv("GATEWAY_MONZO_BASE_URL", "https://api.monzo.com"),
        openai_base_url=os.getenv(
            "GATEWAY_OPENAI_BASE_URL", "https://api.openai.com/v1"
        ),
        openai_model=os.getenv("GATEWAY_OPENAI_MODEL", "gpt-4o"),
        openai_temperature=float(os.getenv("GATEWAY_OPENAI_TEMPERATURE", "0.7")),
        reference_date=_env_date(os.getenv("GATEWAY_REFERENCE_DATE"), date(2025, 3, 28)),
        chat_max_tokens_cap=int(os.getenv("GATEWAY_CHAT_MAX_TOKENS_CAP", "4096")),
        upstream_timeout=float(os.getenv("GATEWAY_UPSTREAM_TIMEOUT", "30")),
        cors_origins=_split_csv(os.getenv("GATEWAY_CORS_ORIGINS"), DEFAULT_CORS_ORIGINS),
        cors_default_origin=os.getenv(
            "GATEWAY_CORS_DEFAULT_ORIGIN", "http://localhost:3000"
        ),
        tool_config_path=os.getenv(
            "GATEWAY_TOOL_CONFIG", str(CONFIG_DIR / "tools.yaml")
        ),
        log_level=os.getenv("GATEWAY_LOG_LEVEL", "INFO"),
        prometheus_enabled=_env_bool(os.getenv("GATEWAY_PROMETHEUS_ENABLED"), False),
        host=os.getenv("GATEWAY_HOST", "0.0.0.0"),
        port=int(os.getenv("GATEWAY_PORT", "8787")),
    )
