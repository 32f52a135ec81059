"""
Configuration helpers for the creative review dashboard.

Centralises environment variable loading/validation so the rest of the codebase
can depend on typed config objects instead of sprinkling os.getenv calls.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

ANALYZER_PROVIDER_CHOICES = {"google", "openai"}
DEFAULT_GOOGLE_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:8501")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Hosted model used for the combined asset analysis."""

    provider: str
    model_name: str
    api_key: str
    api_base: Optional[str]
    temperature: float
    timeout_seconds: Optional[float]


@dataclass(frozen=True)
class AppConfig:
    """Misc application knobs shared by the API, dashboard and CLI."""

    log_level: str
    cors_origins: Tuple[str, ...]
    publish_delay_seconds: float
    max_upload_mb: int
    test_asset_path: str
    sentry_dsn: Optional[str]
    sentry_environment: str


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Wrapper around os.getenv that trims whitespace."""
    value = os.getenv(name, default)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or default


def _require_env(name: str) -> str:
    """Fetch an environment variable or raise a helpful error."""
    value = _get_env(name)
    if not value:
        raise RuntimeError(f"Expected environment variable '{name}' to be set.")
    return value


def _get_float_env(name: str, default: Optional[float], allow_zero: bool = False) -> Optional[float]:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float, got '{raw}'.") from exc
    if value < 0 or (value == 0 and not allow_zero):
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _get_int_env(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


@lru_cache(maxsize=1)
def get_analyzer_config() -> AnalyzerConfig:
    """Return the provider/model configuration for the combined analysis."""
    provider = (_get_env("ANALYZER_PROVIDER") or "google").lower()
    if provider not in ANALYZER_PROVIDER_CHOICES:
        raise ValueError(
            f"ANALYZER_PROVIDER must be one of {sorted(ANALYZER_PROVIDER_CHOICES)}, got '{provider}'."
        )

    if provider == "google":
        api_key = _get_env("GOOGLE_API_KEY") or _get_env("GEMINI_API_KEY")
        if not api_key:
            raise RuntimeError(
                "GOOGLE_API_KEY (or GEMINI_API_KEY) must be set when ANALYZER_PROVIDER=google."
            )
        model_name = _get_env("ANALYZER_MODEL") or DEFAULT_GOOGLE_MODEL
        api_base = None
    else:
        api_key = _require_env("OPENAI_API_KEY")
        model_name = _get_env("ANALYZER_MODEL") or DEFAULT_OPENAI_MODEL
        api_base = _get_env("OPENAI_API_BASE") or "https://api.openai.com/v1"

    temperature = _get_float_env("ANALYZER_TEMPERATURE", 0.2, allow_zero=True)
    if temperature > 2.0:
        raise ValueError(f"ANALYZER_TEMPERATURE must be between 0 and 2, got {temperature}.")

    return AnalyzerConfig(
        provider=provider,
        model_name=model_name,
        api_key=api_key,
        api_base=api_base,
        temperature=temperature,
        timeout_seconds=_get_float_env("ANALYZER_TIMEOUT_SECONDS", None),
    )


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """Return misc application toggles."""
    raw_origins = _get_env("CORS_ORIGINS")
    if raw_origins:
        cors_origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())
    else:
        cors_origins = DEFAULT_CORS_ORIGINS

    return AppConfig(
        log_level=(_get_env("LOG_LEVEL") or "INFO").upper(),
        cors_origins=cors_origins,
        publish_delay_seconds=_get_float_env("PUBLISH_DELAY_SECONDS", 2.5, allow_zero=True),
        max_upload_mb=_get_int_env("MAX_UPLOAD_MB", 100),
        test_asset_path=_get_env("TEST_ASSET_PATH") or os.path.join("public", "test-asset.png"),
        sentry_dsn=_get_env("SENTRY_DSN"),
        sentry_environment=_get_env("SENTRY_ENVIRONMENT") or "production",
    )


def clear_config_caches() -> None:
    """Drop cached config objects so edited environment values are picked up."""
    get_analyzer_config.cache_clear()
    get_app_config.cache_clear()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for entry points (API, CLI)."""
    logging.basicConfig(
        level=(level or get_app_config().log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def describe_active_models() -> dict:
    """Return a summary of the currently selected analyzer provider/model."""
    try:
        cfg = get_analyzer_config()
    except (RuntimeError, ValueError) as exc:
        return {"provider": None, "model": None, "configured": False, "error": str(exc)}
    return {
        "provider": cfg.provider,
        "model": cfg.model_name,
        "configured": True,
    }


__all__ = [
    "AnalyzerConfig",
    "AppConfig",
    "get_analyzer_config",
    "get_app_config",
    "clear_config_caches",
    "configure_logging",
    "describe_active_models",
]
