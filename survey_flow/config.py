"""Configuration utilities for the survey flow service.

This module loads application configuration with the following rules:
- Primary source: `survey_flow_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG_FILE = Path("survey_flow_config.json")
logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        v = str(v).strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {sorted(_LOG_LEVELS)}")
        return v


class ApiConfig(BaseModel):
    prefix: str = Field(default="/api/v1")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("prefix")
    @classmethod
    def prefix_must_be_path(cls, v: str) -> str:
        v = str(v).strip()
        if v and not v.startswith("/"):
            raise ValueError("api.prefix must start with '/'")
        return v.rstrip("/")


class EngineConfig(BaseModel):
    lint_on_store: bool = Field(default=True)


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _truthy(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) survey_flow_config.json at project root
    4) Defaults
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(x) for x in cur)
        if isinstance(cur, bool):
            return "true" if cur else "false"
        return str(cur) if cur is not None else default

    level = _env("LOG_LEVEL") or _read_config_file("logging.level") or _base("logging.level", "INFO")
    prefix = _env("API_PREFIX") or _read_config_file("api.prefix") or _base("api.prefix", "/api/v1")
    origins_text = _env("CORS_ORIGINS") or _read_config_file("api.cors_origins") or _base("api.cors_origins", "*")
    lint_text = _env("LINT_ON_STORE") or _read_config_file("engine.lint_on_store") or _base("engine.lint_on_store", "true")

    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()] or ["*"]

    try:
        return AppConfig(
            logging=LoggingConfig(level=str(level)),
            api=ApiConfig(prefix=str(prefix), cors_origins=origins),
            engine=EngineConfig(lint_on_store=_truthy(lint_text)),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "LoggingConfig",
    "ApiConfig",
    "EngineConfig",
    "load_config",
]
