"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from src.helpers.constants import (
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_BLOCKCHAIN_API_URL,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
)


# Load environment variables from .env file
load_dotenv()


class RedisSettings(BaseModel):
    """Connection parameters for the Redis cache."""

    host: str = Field(default=DEFAULT_REDIS_HOST, description="Redis host")
    port: int = Field(default=DEFAULT_REDIS_PORT, description="Redis port")
    password: str | None = Field(default=None, description="Optional password")


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default

    Example:
        ```python
        from src.helpers.config import get_optional_env

        log_level = get_optional_env("LOG_LEVEL", "INFO")
        ```
    """
    return os.getenv(key, default)


def get_int_env(key: str, default: int) -> int:
    """Get an integer environment variable.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Parsed integer value

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        msg = f"{key} must be an integer, got {value!r}"
        raise ValueError(msg) from None


def get_bool_env(key: str, *, default: bool = False) -> bool:
    """Get a boolean environment variable ("1", "true", "yes" and "on" are truthy)."""
    value = os.getenv(key)
    if not value:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_redis_settings() -> RedisSettings:
    """Build Redis connection settings from the environment.

    Reads REDIS_HOST, REDIS_PORT and REDIS_PASSWORD. An empty password is
    treated as no password.

    Returns:
        RedisSettings instance

    Example:
        ```python
        from src.helpers.config import get_redis_settings

        settings = get_redis_settings()
        cache = await CacheClient.connect(settings)
        ```
    """
    return RedisSettings(
        host=get_optional_env("REDIS_HOST") or DEFAULT_REDIS_HOST,
        port=get_int_env("REDIS_PORT", DEFAULT_REDIS_PORT),
        password=get_optional_env("REDIS_PASSWORD") or None,
    )


def get_blockchain_api_url(api_url: str | None = None) -> str:
    """Get the upstream blockchain API base URL from parameter or environment.

    Args:
        api_url: Optional base URL to use directly

    Returns:
        Base URL without a trailing slash
    """
    url = api_url or get_optional_env("BLOCKCHAIN_API_URL") or DEFAULT_BLOCKCHAIN_API_URL
    return url.rstrip("/")


def get_api_bind() -> tuple[str, int]:
    """Get the (host, port) the GraphQL server binds to."""
    host = get_optional_env("API_HOST") or DEFAULT_API_HOST
    return host, get_int_env("API_PORT", DEFAULT_API_PORT)


__all__ = [
    "RedisSettings",
    "get_api_bind",
    "get_blockchain_api_url",
    "get_bool_env",
    "get_int_env",
    "get_optional_env",
    "get_redis_settings",
]
