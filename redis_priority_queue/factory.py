"""
Queue client factory.

This factory:
- Constructs the queue client from configuration
- Wires storage, serializer and observer together
- Returns only the client facade
"""

import logging
from typing import Any, Optional

from .modules.config import ConfigModule, get_config
from .modules.logger import LoggingQueueLogger, QueueLogger
from .modules.queue import DEFAULT_POLL_INTERVAL, PriorityQueueClient
from .modules.serializer import SerializerType, new_serializer
from .modules.storage import StorageModule

_log = logging.getLogger(__name__)


class QueueClientFactory:
    """Composition root for PriorityQueueClient."""

    @staticmethod
    async def build(
        config: Optional[ConfigModule] = None,
        payload_type: Any = Any,
        redis_client: Optional[Any] = None,
        logger: Optional[QueueLogger] = None,
    ) -> PriorityQueueClient:
        """
        Build a queue client.

        Args:
            config: Configuration (defaults to the environment singleton)
            payload_type: Type payloads are validated against
            redis_client: Existing async Redis client, else one is created
                from config
            logger: Observer, else a LoggingQueueLogger at the configured level

        Returns:
            PriorityQueueClient

        Raises:
            UnknownSerializerError: If the configured serializer is unknown
        """
        config = config or get_config()

        serializer = new_serializer(config.get("serializer"), payload_type)

        if redis_client is None:
            redis_client = await StorageModule.from_config(config).connect()

        if logger is None:
            logger = LoggingQueueLogger.from_name(config.get("log_level", "INFO"))

        _log.info(
            f"Building queue client with {config.get('serializer')} serializer "
            f"and {logger.get_level().value} observer"
        )
        return PriorityQueueClient(
            redis_client,
            serializer,
            logger=logger,
            poll_interval=config.get("sub_poll_interval", DEFAULT_POLL_INTERVAL),
        )

    @staticmethod
    def build_for_testing(
        redis_client: Any,
        payload_type: Any = Any,
        serializer: SerializerType = SerializerType.JSON,
        logger: Optional[QueueLogger] = None,
        poll_interval: float = 0.01,
    ) -> PriorityQueueClient:
        """
        Build a queue client for tests without touching configuration.

        Args:
            redis_client: Real or mock async Redis client
            payload_type: Type payloads are validated against
            serializer: Codec name
            logger: Optional observer
            poll_interval: Subscription poll interval

        Returns:
            PriorityQueueClient
        """
        return PriorityQueueClient(
            redis_client,
            serializer,
            logger=logger,
            payload_type=payload_type,
            poll_interval=poll_interval,
        )
