"""
Centralized configuration with environment variable overrides.

Business hours, storage location, text-generation model settings and
notification delivery are configurable here. Nothing is hardcoded in the
scheduling tools.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from barbershop.logging_context import LOG_FORMAT, install_session_filter
from barbershop.utils import MINUTES_PER_DAY

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag (1/0, true/false, yes/no, on/off)."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Shop-wide booking policy."""

    name: str = os.getenv("BUSINESS_NAME", "W8 Barber Studio")
    # Minutes since midnight; 480 = 08:00, 1200 = 20:00
    opening_minute: int = _safe_int("BUSINESS_OPENING_MINUTE", "480")
    closing_minute: int = _safe_int("BUSINESS_CLOSING_MINUTE", "1200")
    # When set, the computed end of a booking must also fall before closing
    bound_end: bool = _safe_bool("BUSINESS_BOUND_END", "false")
    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "30")
    availability_search_days: int = _safe_int("AVAILABILITY_SEARCH_DAYS", "14")
    currency: str = os.getenv("BUSINESS_CURRENCY", "COP")


@dataclass(frozen=True)
class StorageConfig:
    """Where the JSON key-value store keeps its files."""

    data_dir: str = os.getenv("BARBERSHOP_DATA_DIR", ".barbershop")
    key_prefix: str = os.getenv("BARBERSHOP_KEY_PREFIX", "w8_")


@dataclass(frozen=True)
class ModelConfig:
    """Text-generation collaborator settings (OpenAI-compatible endpoint)."""

    llm_model: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_temperature: float = _safe_float("LLM_TEMPERATURE", "0.3")
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1")
    llm_api_key: str = os.getenv("LLM_API_KEY", "")
    llm_timeout_sec: float = _safe_float("LLM_TIMEOUT", "30.0")


@dataclass(frozen=True)
class NotificationConfig:
    """Fire-and-forget notification delivery."""

    enabled: bool = _safe_bool("NOTIFICATIONS_ENABLED", "true")
    webhook_url: str = os.getenv("NOTIFICATION_WEBHOOK_URL", "")
    timeout_sec: float = _safe_float("NOTIFICATION_TIMEOUT", "10.0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    biz = config.business
    for name, value in [
        ("BUSINESS_OPENING_MINUTE", biz.opening_minute),
        ("BUSINESS_CLOSING_MINUTE", biz.closing_minute),
    ]:
        if not 0 <= value < MINUTES_PER_DAY:
            raise ValueError(f"{name} must be between 0 and 1439, got {value}")
    if biz.opening_minute >= biz.closing_minute:
        raise ValueError(
            "BUSINESS_OPENING_MINUTE must be before BUSINESS_CLOSING_MINUTE, "
            f"got {biz.opening_minute} >= {biz.closing_minute}"
        )
    if biz.slot_step_minutes < 1:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be >= 1, got {biz.slot_step_minutes}"
        )
    if biz.availability_search_days < 1:
        raise ValueError(
            f"AVAILABILITY_SEARCH_DAYS must be >= 1, got {biz.availability_search_days}"
        )
    if not 0.0 <= config.model.llm_temperature <= 2.0:
        raise ValueError(
            f"LLM_TEMPERATURE must be between 0.0 and 2.0, got {config.model.llm_temperature}"
        )
    if config.model.llm_timeout_sec <= 0:
        raise ValueError(
            f"LLM_TIMEOUT must be > 0, got {config.model.llm_timeout_sec}"
        )
    if config.notifications.timeout_sec <= 0:
        raise ValueError(
            f"NOTIFICATION_TIMEOUT must be > 0, got {config.notifications.timeout_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_session_filter()
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
