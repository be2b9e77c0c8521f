"""Typed priority queue client on Redis sorted sets with atomic Lua scripts."""

__version__ = "1.0.0"

from .errors import (
    DecodingError,
    EmptyQueueError,
    EncodingError,
    QueueError,
    QueueNotImplementedError,
    TransportError,
    UnknownSerializerError,
)
from .factory import QueueClientFactory
from .modules.logger import LoggingQueueLogger, LogLevel, NullQueueLogger, QueueLogger
from .modules.queue import PriorityQueueClient
from .modules.serializer import JsonSerializer, ProtobufSerializer, Serializer, SerializerType

__all__ = [
    "DecodingError",
    "EmptyQueueError",
    "EncodingError",
    "JsonSerializer",
    "LoggingQueueLogger",
    "LogLevel",
    "NullQueueLogger",
    "PriorityQueueClient",
    "ProtobufSerializer",
    "QueueClientFactory",
    "QueueError",
    "QueueLogger",
    "QueueNotImplementedError",
    "Serializer",
    "SerializerType",
    "TransportError",
    "UnknownSerializerError",
]
