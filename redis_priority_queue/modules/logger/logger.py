import logging
from enum import Enum
from typing import Any, Optional, Protocol

# Below DEBUG; stdlib has no trace level
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LogLevel(str, Enum):
    """Level an observer wants queue events reported at."""

    INFO = "info"
    ERROR = "error"
    DEBUG = "debug"
    TRACE = "trace"


class QueueLogger(Protocol):
    """
    Protocol for queue observers.

    Implement this to receive a message after every store call. Messages use
    %-style formatting, the same as the logging module.
    """

    def info(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...

    def debug(self, msg: str, *args: Any) -> None: ...

    def trace(self, msg: str, *args: Any) -> None: ...

    def get_level(self) -> LogLevel: ...

    def set_level(self, level: LogLevel) -> None: ...


class NullQueueLogger:
    """Observer that discards everything."""

    def __init__(self, level: LogLevel = LogLevel.INFO):
        self._level = level

    def info(self, msg: str, *args: Any) -> None:
        pass

    def error(self, msg: str, *args: Any) -> None:
        pass

    def debug(self, msg: str, *args: Any) -> None:
        pass

    def trace(self, msg: str, *args: Any) -> None:
        pass

    def get_level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LogLevel) -> None:
        self._level = LogLevel(level)


class LoggingQueueLogger:
    """Observer that forwards to a standard library logger."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        """
        Initialize logging observer.

        Args:
            logger: Target logger (defaults to "redis_priority_queue.observer")
            level: Level queue events are reported at
        """
        self.logger = logger or logging.getLogger("redis_priority_queue.observer")
        self._level = LogLevel(level)

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.logger.error(msg, *args)

    def debug(self, msg: str, *args: Any) -> None:
        self.logger.debug(msg, *args)

    def trace(self, msg: str, *args: Any) -> None:
        self.logger.log(TRACE, msg, *args)

    def get_level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LogLevel) -> None:
        self._level = LogLevel(level)

    @classmethod
    def from_name(cls, name: str, logger: Optional[logging.Logger] = None) -> "LoggingQueueLogger":
        """
        Build from a level name such as "DEBUG" or "trace".

        Stdlib names without an observer counterpart (WARNING, CRITICAL)
        map to ERROR.
        """
        normalized = name.strip().lower()
        if normalized in ("warning", "warn", "critical"):
            normalized = "error"
        return cls(logger=logger, level=LogLevel(normalized))
