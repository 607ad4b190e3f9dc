"""
Environment-based configuration for the module republisher.

This module exposes a small, typed configuration surface shared by the
scanner, the publisher and the scheduler. All values are sourced from
environment variables; only the operator credentials and the target
environment name are required.

No secrets or credentials are hard-coded here; they must be provided via
the environment (or a local .env file loaded with python-dotenv).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

REQUIRED_ENV_VARS = ("WODIFY_USERNAME", "WODIFY_PASSWORD", "WODIFY_ENV")


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class AppConfig:
    """
    Top-level application configuration.

    Credentials are excluded from repr so the config can be logged safely.
    """

    username: str = field(repr=False)
    password: str = field(repr=False)
    # Target environment name; endpoint hostnames are derived from it.
    environment: str

    log_level: str
    # Optional file path for structured JSON logs; when set, logs are written
    # to file (and stdout if log_stdout).
    log_file: Optional[str]
    log_stdout: bool

    base_domain: str
    snapshot_path: str
    headless: bool

    # Browser waits (ms) and retry policy shared by navigation and publish waits.
    navigation_timeout_ms: int
    retry_limit: int
    retry_backoff_seconds: float
    tabs_per_group: int
    warning_check_timeout_ms: int
    refresh_delay_ms: int
    publish_settle_seconds: float

    schedule_cron: str

    @property
    def service_center_url(self) -> str:
        """Service Center root of the scan endpoint (the `{env}sc` host)."""
        return f"https://{self.environment}sc.{self.base_domain}/ServiceCenter/"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Construct configuration from environment variables.

        Raises ConfigError naming every missing required variable, so the
        process stops before any browser or network activity.
        """

        missing = [name for name in REQUIRED_ENV_VARS if not (os.getenv(name) or "").strip()]
        if missing:
            raise ConfigError(
                "Missing required environment variables: "
                + ", ".join(missing)
                + ". Set them in the environment or in a .env file."
            )

        def _bool_env(name: str, default: bool) -> bool:
            raw = (os.getenv(name) or str(default)).strip().lower()
            return raw in ("true", "1", "yes")

        def _int_env(name: str, default: int, minimum: int = 0) -> int:
            raw = (os.getenv(name) or str(default)).strip()
            try:
                value = int(raw)
            except ValueError:
                raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
            if value < minimum:
                raise ConfigError(f"{name} must be >= {minimum}, got {value}")
            return value

        def _float_env(name: str, default: float) -> float:
            raw = (os.getenv(name) or str(default)).strip()
            try:
                value = float(raw)
            except ValueError:
                raise ConfigError(f"{name} must be a number, got {raw!r}") from None
            if value < 0:
                raise ConfigError(f"{name} must be >= 0, got {value}")
            return value

        return cls(
            username=os.environ["WODIFY_USERNAME"].strip(),
            password=os.environ["WODIFY_PASSWORD"],
            environment=os.environ["WODIFY_ENV"].strip(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_stdout=_bool_env("LOG_STDOUT", True),
            base_domain=os.getenv("CONSOLE_BASE_DOMAIN", "wodify.com").strip(),
            snapshot_path=os.getenv("SNAPSHOT_PATH", "sorted-modules.json"),
            headless=_bool_env("HEADLESS", True),
            navigation_timeout_ms=_int_env("NAVIGATION_TIMEOUT_MS", 180_000, minimum=1),
            retry_limit=_int_env("RETRY_LIMIT", 3, minimum=1),
            retry_backoff_seconds=_float_env("RETRY_BACKOFF_SECONDS", 0.0),
            tabs_per_group=_int_env("TABS_PER_GROUP", 2, minimum=1),
            warning_check_timeout_ms=_int_env("WARNING_CHECK_TIMEOUT_MS", 1000, minimum=1),
            refresh_delay_ms=_int_env("REFRESH_DELAY_MS", 1000),
            publish_settle_seconds=_float_env("PUBLISH_SETTLE_SECONDS", 15.0),
            schedule_cron=os.getenv("SCHEDULE_CRON", "*/15 * * * *"),
        )


def get_config() -> AppConfig:
    """
    Helper to obtain the current configuration.

    Entry points build a single `AppConfig` at startup and pass it
    explicitly through the scan and publish pipelines.
    """

    return AppConfig.from_env()
