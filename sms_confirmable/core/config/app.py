"""
Application-specific settings.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, logging and language.

    Security Note:
        - SECRET_KEY must be a cryptographically secure random string
          (minimum 32 characters). Confirmation token digests are keyed with
          it, so rotating it invalidates every outstanding confirmation code.
    """
    PROJECT_NAME: str = "sms-confirmable"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    SECRET_KEY: str = Field(default="", description="Key material for token digests")
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[str, List[str]] = Field(default=["en", "es"])

    @field_validator("SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def assemble_languages(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of language codes into a list.

        Args:
            v: Input value as a string or list of language codes.

        Returns:
            List of stripped language codes.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v
