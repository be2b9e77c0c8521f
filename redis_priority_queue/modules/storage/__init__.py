"""
Storage Module - Black Box Interface

Purpose: Own the connection to the store holding the queues
Interface: connect(), disconnect(), from_config()
Hidden: Redis URL assembly, connection pooling

Queue members are raw bytes, so responses are never decoded to str here.
"""

import logging
import os
from typing import Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage connection."""

    def __init__(
        self,
        connection_url: str = None,
        password: Optional[str] = None,
        socket_timeout: Optional[float] = 5,
    ):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.password = password
        self.socket_timeout = socket_timeout
        self._client = None

    @classmethod
    def from_config(cls, config) -> "StorageModule":
        """
        Build from a ConfigModule.

        Args:
            config: ConfigModule (or anything with a compatible get())

        Returns:
            StorageModule pointed at redis_url, or at redis_host/port/db
        """
        url = config.get("redis_url") or (
            f"redis://{config.get('redis_host')}:{config.get('redis_port')}/{config.get('redis_db')}"
        )
        return cls(
            connection_url=url,
            password=config.get("redis_password"),
            socket_timeout=config.get("socket_timeout"),
        )

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(
                self.url,
                password=self.password,
                decode_responses=False,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
            )
            logger.info(f"Storage client created for {self._redacted_url()}")
        return self._client

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _redacted_url(self) -> str:
        # Drop credentials embedded in the URL
        if "@" in self.url:
            scheme, _, rest = self.url.partition("://")
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.url


__all__ = ["StorageModule"]
