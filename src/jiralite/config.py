"""Configuration management with pydantic-settings for jiralite.

The client itself never reads the environment. ``JiraSettings`` is an opt-in
loader for applications that keep their Jira credentials in environment
variables or a ``.env`` file; hand it to ``JiraClient.from_settings``.

References:
- Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_API_VERSION",
    "JiraSettings",
    "get_config",
    "reset_config",
]

DEFAULT_API_VERSION = "2"


class JiraSettings(BaseSettings):
    """Settings for a Jira REST connection.

    Loads from (in order of precedence):
    1. Environment variables prefixed with ``JIRA_`` (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        url: Jira instance URL (e.g., https://company.atlassian.net)
        username: Account name for Basic Auth
        password: Password or API token (stored as SecretStr)
        api_version: REST API version segment (rest/api/<version>/)
        timeout_connect: Connection establishment timeout in seconds
        timeout_read: Read timeout in seconds
        timeout_write: Write timeout in seconds
        timeout_pool: Pool acquisition timeout in seconds
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json for production, text for development)
    """

    model_config = SettingsConfigDict(
        env_prefix="JIRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    url: str = Field(
        default="",
        description="Jira instance URL (e.g., https://company.atlassian.net)",
    )

    username: str = Field(default="", description="Account name for Basic Auth")

    password: SecretStr = Field(
        default=SecretStr(""),
        description="Password or API token for Basic Auth (stored securely)",
    )

    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        pattern=r"^[0-9A-Za-z.]+$",
        description="REST API version segment, e.g. '2' or '3'",
    )

    timeout_connect: float = Field(default=3.0, gt=0, le=120)
    timeout_read: float = Field(default=15.0, gt=0, le=600)
    timeout_write: float = Field(default=5.0, gt=0, le=120)
    timeout_pool: float = Field(default=3.0, gt=0, le=120)

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        description="Log format: json (production), text (development)",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL when one is configured."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("JIRA_URL must start with http:// or https://")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


@lru_cache(maxsize=1)
def get_config() -> JiraSettings:
    """Get global settings singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return JiraSettings()


def reset_config() -> None:
    """Reset settings singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
