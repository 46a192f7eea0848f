"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``SALES_ORACLE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring weights (40/30/30) are deliberately NOT configurable: store
health and seller score must share them, so they live as constants in
``sales_oracle.scoring.formulas``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite settings for the history snapshot store."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/sales_oracle.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/sales_oracle.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class HistoryConfig(BaseModel):
    """How much prior context the trend/intelligence steps consume."""

    model_config = ConfigDict(frozen=True)

    intelligence_window: int = 3
    min_trend_swing: float = 5.0

    @field_validator("intelligence_window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError(f"intelligence_window must be in [1, 12], got {v}.")
        return v

    @field_validator("min_trend_swing")
    @classmethod
    def validate_swing(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"min_trend_swing must be >= 0, got {v}.")
        return v


class NarrativeConfig(BaseModel):
    """Hosted text-generation settings (chat-completions compatible API).

    The API key itself is never stored in config; ``api_key_env`` names the
    environment variable (usually set via ``.env``) that holds it.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = 0.6
    max_tokens: int = 1200
    timeout_seconds: float = 30.0
    api_key_env: str = "OPENAI_API_KEY"

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be in [0.0, 2.0], got {v}.")
        return v

    def api_key(self) -> Optional[str]:
        """Return the API key from the environment, or ``None`` if unset."""
        return os.environ.get(self.api_key_env) or None


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    CLI commands receive an ``AppConfig`` instance constructed by
    ``load_config()``, which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    history: HistoryConfig = HistoryConfig()
    narrative: NarrativeConfig = NarrativeConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SALES_ORACLE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SALES_ORACLE_* env vars to the raw config dict.

    Supported overrides:
      SALES_ORACLE_DB_PATH          → raw["database"]["db_path"]
      SALES_ORACLE_LOG_LEVEL        → raw["logging"]["level"]
      SALES_ORACLE_DEBUG            → raw["debug"]
      SALES_ORACLE_NARRATIVE_MODEL  → raw["narrative"]["model"]
    """
    if db_path := os.environ.get("SALES_ORACLE_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("SALES_ORACLE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("SALES_ORACLE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if model := os.environ.get("SALES_ORACLE_NARRATIVE_MODEL"):
        raw.setdefault("narrative", {})["model"] = model

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        history=HistoryConfig(**raw.get("history", {})),
        narrative=NarrativeConfig(**raw.get("narrative", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
