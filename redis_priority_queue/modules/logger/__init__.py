"""
Logger Module - Black Box Interface

Purpose: Observe queue operations at a configurable level
Interface: QueueLogger protocol, NullQueueLogger, LoggingQueueLogger
Hidden: Log sink, level mapping

Pure observer: nothing it does can change what the queue returns.
"""

from .logger import TRACE, LoggingQueueLogger, LogLevel, NullQueueLogger, QueueLogger

__all__ = ["TRACE", "LoggingQueueLogger", "LogLevel", "NullQueueLogger", "QueueLogger"]
