"""
Engine configuration with environment variable overrides.

Defaults match the rental business rules: a 12 hour maintenance
buffer after every rental, a 2 day minimum stay and a 2 hour lead
time for same-day pickups.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

FETCH_POLICIES = ("open", "closed")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class RulesConfig:
    """Booking window rules."""

    maintenance_buffer_hours: int = _safe_int("MAINTENANCE_BUFFER_HOURS", "12")
    min_rental_days: int = _safe_int("MIN_RENTAL_DAYS", "2")
    pickup_lead_hours: int = _safe_int("PICKUP_LEAD_HOURS", "2")
    default_return_time: str = os.getenv("DEFAULT_RETURN_TIME", "17:00")
    month_advance_cap: int = _safe_int("MONTH_ADVANCE_CAP", "12")


@dataclass(frozen=True)
class StorageConfig:
    """Reservation snapshot location and fetch failure handling."""

    reservations_file: str = os.getenv("RESERVATIONS_FILE", "reservations/fleet.yaml")
    fetch_failure_policy: str = os.getenv("FETCH_FAILURE_POLICY", "closed")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    rules: RulesConfig = field(default_factory=RulesConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    secret_key: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-prod")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.rules.maintenance_buffer_hours < 0:
        raise ValueError(
            "MAINTENANCE_BUFFER_HOURS must be >= 0, "
            f"got {config.rules.maintenance_buffer_hours}"
        )
    if config.rules.min_rental_days < 1:
        raise ValueError(
            f"MIN_RENTAL_DAYS must be >= 1, got {config.rules.min_rental_days}"
        )
    if not 0 <= config.rules.pickup_lead_hours <= 23:
        raise ValueError(
            "PICKUP_LEAD_HOURS must be between 0 and 23, "
            f"got {config.rules.pickup_lead_hours}"
        )
    if config.rules.month_advance_cap < 0:
        raise ValueError(
            f"MONTH_ADVANCE_CAP must be >= 0, got {config.rules.month_advance_cap}"
        )
    hours, _, minutes = config.rules.default_return_time.partition(":")
    if not (hours.isdigit() and minutes.isdigit()
            and int(hours) < 24 and int(minutes) < 60):
        raise ValueError(
            "DEFAULT_RETURN_TIME must be HH:MM, "
            f"got {config.rules.default_return_time!r}"
        )
    if config.storage.fetch_failure_policy not in FETCH_POLICIES:
        raise ValueError(
            f"FETCH_FAILURE_POLICY must be one of {FETCH_POLICIES}, "
            f"got {config.storage.fetch_failure_policy!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.debug("Configuration loaded (policy=%s)", config.storage.fetch_failure_policy)
    return config


# Singleton instance
settings = load_config()
