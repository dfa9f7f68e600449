"""Runtime configuration loaded from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

LOGGER = logging.getLogger(__name__)

DEFAULT_AI_MODEL: Final[str] = "gemini-1.5-flash"
DEFAULT_AI_TEMPERATURE: Final[float] = 0.7
DEFAULT_AI_TIMEOUT: Final[float] = 10.0
DEFAULT_DB_PATH: Final[Path] = Path.home() / "inkwell" / "data" / "blog.db"
LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_API_KEY_ENV_VARS: Final[tuple[str, ...]] = ("GOOGLE_GEMINI_API_KEY", "INKWELL_GEMINI_API_KEY")


@dataclass(slots=True, frozen=True)
class Settings:
    """Process configuration for the blog API and its AI assistant."""

    gemini_api_key: str | None = None
    ai_enabled: bool = True
    ai_model: str = DEFAULT_AI_MODEL
    ai_temperature: float = DEFAULT_AI_TEMPERATURE
    ai_timeout: float = DEFAULT_AI_TIMEOUT
    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    log_level: str = "INFO"

    @property
    def ai_available(self) -> bool:
        """Return ``True`` when a credential is present and remote calls are enabled."""

        return self.ai_enabled and bool((self.gemini_api_key or "").strip())


def _load_bool_from_env(variable_name: str, default: bool) -> bool:
    raw_value = os.getenv(variable_name)
    if raw_value is None:
        return default

    value = raw_value.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    LOGGER.warning("Ignoring unrecognised boolean value in %s", variable_name)
    return default


def _load_float_from_env(variable_name: str, default: float, *, positive: bool = False) -> float:
    raw_value = os.getenv(variable_name)
    if not raw_value:
        return default

    try:
        value = float(raw_value)
    except ValueError:
        LOGGER.warning("Ignoring invalid numeric value in %s", variable_name)
        return default

    if positive and value <= 0:
        LOGGER.warning("Ignoring non-positive value in %s", variable_name)
        return default

    return value


def _load_api_key() -> str | None:
    for variable_name in _API_KEY_ENV_VARS:
        value = os.getenv(variable_name)
        if value and value.strip():
            return value.strip()
    return None


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""

    db_path = os.getenv("INKWELL_DB_PATH")
    return Settings(
        gemini_api_key=_load_api_key(),
        ai_enabled=_load_bool_from_env("INKWELL_AI_ENABLED", True),
        ai_model=(os.getenv("INKWELL_AI_MODEL") or DEFAULT_AI_MODEL).strip(),
        ai_temperature=_load_float_from_env("INKWELL_AI_TEMPERATURE", DEFAULT_AI_TEMPERATURE),
        ai_timeout=_load_float_from_env("INKWELL_AI_TIMEOUT", DEFAULT_AI_TIMEOUT, positive=True),
        db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
        log_level=(os.getenv("INKWELL_LOG_LEVEL") or "INFO").strip().upper(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging using the configured level."""

    level_name = (settings.log_level if settings else os.getenv("INKWELL_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = ["Settings", "configure_logging", "load_settings"]
