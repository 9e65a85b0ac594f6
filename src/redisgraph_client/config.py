"""Configuration management for the Redis connection and CLI.

Loads configuration from environment variables and an optional .env file
in the working directory.

Example .env:

    REDIS_URL=redis://localhost:6379
    REDIS_PASSWORD=your_password_here
    REDISGRAPH_GRAPH=social
    LOG_LEVEL=INFO
"""

from typing import Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment / .env file.

    We use explicit aliases so the mapping to env vars is obvious and
    easy to consume from scripts.
    """

    # Redis configuration
    redis_url: AnyUrl = Field(
        "redis://127.0.0.1:6379",
        alias="REDIS_URL",
        description="Redis connection URL, e.g. redis://localhost:6379",
    )
    redis_password: Optional[str] = Field(
        None,
        alias="REDIS_PASSWORD",
        description="Redis password, if the server requires one",
    )
    redis_socket_timeout: float = Field(
        30.0,
        alias="REDIS_SOCKET_TIMEOUT",
        description="Socket timeout for Redis commands in seconds",
    )
    redis_max_connections: int = Field(
        10,
        alias="REDIS_MAX_CONNECTIONS",
        description="Maximum number of connections in the Redis pool",
    )

    # Graph configuration
    graph_name: str = Field(
        "default",
        alias="REDISGRAPH_GRAPH",
        description="Name of the graph key the CLI operates on",
    )

    log_level: str = Field(
        "INFO",
        alias="LOG_LEVEL",
        description="Log level for the CLI (e.g. DEBUG, INFO, WARN, ERROR)",
    )

    # Pydantic v2 settings for env loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,  # we use explicit aliases, so keep env lookup strict
        extra="ignore",
        populate_by_name=False,
    )
