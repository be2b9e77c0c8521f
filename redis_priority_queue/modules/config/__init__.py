"""
Config Module - Black Box Interface

Purpose: Queue client settings read from the process environment
Interface: get_config(), reset_config(), ConfigModule.get(), ConfigModule.get_config_schema()
Hidden: Environment variable names, type coercion, serializer validation
"""

import os
from typing import Any, Dict

from ...errors import UnknownSerializerError
from ..serializer import SerializerType

# Keys every ConfigModule instance carries, and the ones that may be None

REQUIRED_CONFIG_KEYS = {
    "redis_host": "Redis server hostname",
    "redis_port": "Redis server port number",
    "redis_db": "Redis database number",
    "serializer": "Payload codec (json, protobuf)",
    "log_level": "Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)",
    "sub_poll_interval": "Seconds a subscription sleeps while its queue is empty",
}

OPTIONAL_CONFIG_KEYS = {
    "redis_password": {
        "description": "Redis authentication password",
        "default": None,
    },
    "redis_url": {
        "description": "Full Redis URL, overrides host/port/db when set",
        "default": None,
    },
    "socket_timeout": {
        "description": "Socket connect/read timeout in seconds",
        "default": 5.0,
    },
}


class ConfigModule:
    """Queue client settings, validated once at construction."""

    def __init__(self):
        """
        Read and validate the environment.

        Raises:
            ValueError: If a required key is missing
            UnknownSerializerError: If QUEUE_SERIALIZER names an unknown codec
        """
        self._config = self._load_from_env()
        self._validate_required_keys()
        self._validate_serializer()

    def _validate_required_keys(self) -> None:
        missing = [key for key in REQUIRED_CONFIG_KEYS if self._config.get(key) is None]
        if missing:
            raise ValueError(
                f"Queue configuration is missing {', '.join(missing)}; "
                f"set the matching REDIS_* or QUEUE_* variables."
            )

    def _validate_serializer(self) -> None:
        serializer = self._config["serializer"]
        try:
            self._config["serializer"] = SerializerType(serializer)
        except ValueError:
            raise UnknownSerializerError(
                f"QUEUE_SERIALIZER must be one of "
                f"{', '.join(t.value for t in SerializerType)}, got '{serializer}'"
            ) from None

    def _load_from_env(self) -> Dict[str, Any]:
        # REDIS_PORT may be a service link such as tcp://10.0.0.3:6379
        port = os.getenv("REDIS_PORT", "6379").rsplit(":", 1)[-1]

        return {
            "redis_host": os.getenv("REDIS_HOST", "localhost"),
            "redis_port": int(port),
            "redis_db": int(os.getenv("REDIS_DB", "0")),
            "redis_password": os.getenv("REDIS_PASSWORD"),
            "redis_url": os.getenv("REDIS_URL"),
            "socket_timeout": float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            "serializer": os.getenv("QUEUE_SERIALIZER", "json").lower(),
            "sub_poll_interval": float(os.getenv("QUEUE_SUB_POLL_INTERVAL", "0.5")),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        }

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Override a value, e.g. from a test or a CLI flag."""
        self._config[key] = value

    def get_all(self) -> Dict[str, Any]:
        return dict(self._config)

    @staticmethod
    def get_config_schema() -> Dict[str, Any]:
        """
        Describe the keys this module provides.

        Returns:
            {"required": {key: description}, "optional": {key: {description, default}}}
        """
        return {
            "required": dict(REQUIRED_CONFIG_KEYS),
            "optional": dict(OPTIONAL_CONFIG_KEYS),
        }


_instance = None


def get_config() -> ConfigModule:
    """Get the configuration module singleton."""
    global _instance
    if _instance is None:
        _instance = ConfigModule()
    return _instance


def reset_config() -> None:
    """Drop the singleton so the next get_config() rereads the environment."""
    global _instance
    _instance = None


__all__ = ["get_config", "reset_config", "ConfigModule"]
