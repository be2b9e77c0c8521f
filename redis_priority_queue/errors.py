"""
Error taxonomy for the priority queue client.

Every failure raised by this package derives from QueueError so callers can
catch the whole family in one place.
"""

from typing import Optional


class QueueError(Exception):
    """Base class for all queue client errors."""


class EncodingError(QueueError):
    """Payload could not be serialized. No store call was made."""


class DecodingError(QueueError):
    """
    Bytes returned by the store do not match the expected payload shape.

    For batch pops the entries were already removed from the store when the
    failure is detected. ``index`` is the position of the payload that failed
    to decode and ``lost`` the number of removed entries from that position
    onward that will never be delivered.
    """

    def __init__(self, message: str, index: Optional[int] = None, lost: int = 0):
        super().__init__(message)
        self.index = index
        self.lost = lost


class TransportError(QueueError):
    """The store call itself failed (connectivity, timeout, script error)."""


class EmptyQueueError(QueueError):
    """A pop found no entry with a score in [0, +inf]."""

    def __init__(self, key: str):
        super().__init__(f"Queue '{key}' is empty")
        self.key = key


class QueueNotImplementedError(QueueError, NotImplementedError):
    """Capability is declared but not implemented."""


class UnknownSerializerError(QueueError, ValueError):
    """Serializer name is not one of the supported serializer types."""
