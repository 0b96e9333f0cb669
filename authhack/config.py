"""Application configuration"""

from __future__ import annotations

import enum
import logging
from typing import Any, Mapping

from pydantic import field_serializer, field_validator
from pydantic_settings import BaseSettings

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")


class LogLevel(enum.IntEnum):
    """Filter verbosity, ordered from quietest to loudest.

    DEBUG and ALL log raw credential values.
    """

    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    VERBOSE = 4
    DEBUG = 5
    ALL = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]

    @classmethod
    def parse(cls, value: Any) -> "LogLevel":
        """Accept a level, its textual name ("Debug") or its ordinal."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            for level in cls:
                if level.label == text:
                    return level
        raise ValueError(f"invalid LogLevel '{value}'")

    def __str__(self) -> str:
        return self.label


_LOGGING_LEVELS = {
    LogLevel.NONE: logging.CRITICAL + 10,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: VERBOSE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.ALL: 1,
}


# Traefik-style option names -> field names
PLUGIN_CONFIG_KEYS = {
    "LogLevel": "log_level",
    "UsernameQueryParam": "username_query_param",
    "PasswordQueryParam": "password_query_param",
    "AuthorizationQueryParam": "authorization_query_param",
    "CookieName": "cookie_name",
    "CookieDomain": "cookie_domain",
    "CookiePath": "cookie_path",
}


class AuthHackConfig(BaseSettings):
    """Filter options.

    Read from AUTHHACK_* environment variables (or .env) unless passed
    explicitly. An empty parameter or cookie name disables that carrier.
    """

    log_level: LogLevel = LogLevel.WARNING

    username_query_param: str = "username"
    password_query_param: str = "password"
    authorization_query_param: str = "authorization"

    cookie_name: str = "traefik-authhack"
    # Empty means a host-only cookie.
    cookie_domain: str = ""
    cookie_path: str = "/"

    class Config:
        env_prefix = "AUTHHACK_"
        env_file = ".env"
        case_sensitive = False
        frozen = True
        extra = "forbid"

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    @field_serializer("log_level")
    def serialize_log_level(self, value: LogLevel) -> str:
        return value.label

    @classmethod
    def from_plugin_config(cls, data: Mapping[str, Any]) -> "AuthHackConfig":
        """Build from Traefik-style keys (``LogLevel``, ``CookieName``...).

        Unknown keys are passed through so validation rejects them.
        """
        return cls(**{PLUGIN_CONFIG_KEYS.get(key, key): value for key, value in data.items()})

    def to_plugin_config(self) -> dict[str, Any]:
        fields = {name: key for key, name in PLUGIN_CONFIG_KEYS.items()}
        return {fields[name]: value for name, value in self.model_dump().items()}


class Settings(BaseSettings):
    """Demo host settings"""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
