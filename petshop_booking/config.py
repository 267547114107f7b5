"""
Centralized configuration with environment variable overrides.

Schedule rules (working hours, lunch break, closing time, groomer
capacity) are configurable here so the availability engine never
hardcodes them.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from petshop_booking.logging_context import session_log_handler

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"


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


def _safe_int_list(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers, e.g. ``"9,10,11"``."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except (ValueError, TypeError, AttributeError):
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "Sandy's Pet Shop")
    currency: str = os.getenv("CURRENCY", "R$")


@dataclass(frozen=True)
class ScheduleConfig:
    """Opening hours and capacity used by the availability checker."""

    # Grooming start hours; 12 is left out for the lunch break.
    working_hours: tuple[int, ...] = _safe_int_list(
        "WORKING_HOURS", "9,10,11,13,14,15,16,17"
    )
    # Visit check-ins run through lunch.
    visit_working_hours: tuple[int, ...] = _safe_int_list(
        "VISIT_WORKING_HOURS", "9,10,11,12,13,14,15,16"
    )
    lunch_hour: int = _safe_int("LUNCH_HOUR", "12")
    closing_hour: int = _safe_int("CLOSING_HOUR", "18")
    max_capacity_per_slot: int = _safe_int("MAX_CAPACITY_PER_SLOT", "2")


@dataclass(frozen=True)
class FlowConfig:
    """Booking wizard timing."""

    confirmation_display_sec: float = _safe_float("CONFIRMATION_DISPLAY_SEC", "3.0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    flow: FlowConfig = field(default_factory=FlowConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    schedule = config.schedule
    if not 1 <= schedule.closing_hour <= 24:
        raise ValueError(
            f"CLOSING_HOUR must be between 1 and 24, got {schedule.closing_hour}"
        )
    if not 0 <= schedule.lunch_hour <= 23:
        raise ValueError(
            f"LUNCH_HOUR must be between 0 and 23, got {schedule.lunch_hour}"
        )
    if schedule.max_capacity_per_slot < 1:
        raise ValueError(
            f"MAX_CAPACITY_PER_SLOT must be >= 1, got {schedule.max_capacity_per_slot}"
        )

    for hours_name, hours in [
        ("WORKING_HOURS", schedule.working_hours),
        ("VISIT_WORKING_HOURS", schedule.visit_working_hours),
    ]:
        if not hours:
            raise ValueError(f"{hours_name} must list at least one hour")
        for hour in hours:
            if not 0 <= hour < schedule.closing_hour:
                raise ValueError(
                    f"{hours_name} entries must be between 0 and CLOSING_HOUR - 1, "
                    f"got {hour}"
                )

    if config.flow.confirmation_display_sec <= 0:
        raise ValueError(
            "CONFIRMATION_DISPLAY_SEC must be > 0, "
            f"got {config.flow.confirmation_display_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        handlers=[session_log_handler(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")],
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
