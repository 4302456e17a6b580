"""Main application settings and configuration management.

This module composes all the settings from the different modules (app,
database, confirmation, sms) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the package.

Environment Support:
- Development: Uses .env, SMS test mode enabled
- Test: Uses .env.test, SMS test mode enabled
- Staging/Production: Uses .env.staging / .env.production, SECRET_KEY required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .confirmation import ConfirmationSettings
from .database import DatabaseSettings
from .sms import SmsSettings

logger = logging.getLogger(__name__)

MIN_SECRET_KEY_LENGTH = 32


class Settings(AppSettings, DatabaseSettings, ConfirmationSettings, SmsSettings):
    """The main settings class that aggregates all configurations.

    Environment Support:
        - Automatically loads the correct .env file based on APP_ENV
        - Development/Test: SMS test mode enabled, missing secrets tolerated
        - Staging/Production: SECRET_KEY must be set

    Usage:
        - Access settings via the singleton instance `settings`.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="allow"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)

        env = os.getenv("APP_ENV", self.APP_ENV)
        self._set_environment_defaults(env)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.SMS_TEST_MODE = True
            logger.info(f"SMS test mode enabled for {env} environment")

        if env == "development":
            self.DEBUG = True

        logger.info(f"Application running in {env} environment")

    def validate_required_fields(self) -> None:
        """Validates that required settings are present.

        Raises:
            ValueError: If SECRET_KEY is missing or too short outside
                development and test environments.
        """
        problems = []
        if len(self.SECRET_KEY) < MIN_SECRET_KEY_LENGTH:
            problems.append(f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters")
        if not self.DATABASE_URL:
            problems.append("DATABASE_URL could not be assembled")

        if not problems:
            logger.info("All required environment variables are set.")
            return

        error_msg = "; ".join(problems)
        env = os.getenv("APP_ENV", self.APP_ENV)
        if env in ("development", "test"):
            logger.warning(f"{env} mode: {error_msg}")
        else:
            logger.error(error_msg)
            raise ValueError(error_msg)


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        settings_instance = Settings(_env_file=env_file)
    elif Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
        settings_instance = Settings()
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
        settings_instance = Settings()

    return settings_instance


# Create a singleton instance of the settings to be used across the package.
settings = create_settings()
settings.validate_required_fields()
