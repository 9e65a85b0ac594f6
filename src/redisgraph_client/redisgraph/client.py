"""Redis connection management."""

from __future__ import annotations

import logging
from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from ..config import Config
from ..errors import ServerError

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client with a lazily created connection pool."""

    def __init__(self, config: Optional[Config] = None) -> None:
        """Initialize Redis client with configuration."""
        self.config = config or Config()
        self._redis: Optional[redis.Redis] = None

    def connect(self) -> None:
        """Establish connection to the Redis server."""
        if self._redis is None:
            self._redis = redis.Redis.from_url(
                str(self.config.redis_url),
                password=self.config.redis_password,
                socket_timeout=self.config.redis_socket_timeout,
                max_connections=self.config.redis_max_connections,
            )

            # Verify connectivity immediately - the pool is lazy and doesn't
            # actually connect.
            try:
                self._redis.ping()
            except RedisError as e:
                logger.error(f"Failed to connect to Redis: {e}")
                self._redis.close()
                self._redis = None
                raise ConnectionError(
                    f"Cannot connect to Redis at {self.config.redis_url}. "
                    "Please ensure the server is running and has the graph module loaded."
                ) from e

    def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is not None:
            self._redis.close()
            self._redis = None

    def execute(self, *args: Any) -> Any:
        """Run one Redis command and return its raw reply."""
        if self._redis is None:
            self.connect()

        assert self._redis is not None  # for type checkers
        try:
            return self._redis.execute_command(*args)
        except RedisError as e:
            raise ServerError(f"{args[0]} failed: {e}") from e

    def verify_connectivity(self) -> bool:
        """Verify connection to the Redis server."""
        try:
            if self._redis is None:
                self.connect()
            assert self._redis is not None
            self._redis.ping()
            return True
        except (ConnectionError, RedisError) as e:
            logger.error("Redis connectivity check failed: %s", e, exc_info=True)
            return False

    def __enter__(self) -> "RedisClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
