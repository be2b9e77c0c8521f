import json
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ...errors import (
    DecodingError,
    EncodingError,
    QueueNotImplementedError,
    UnknownSerializerError,
)

T = TypeVar("T")


class SerializerType(str, Enum):
    """Codecs selectable at client construction time."""

    JSON = "json"
    PROTOBUF = "protobuf"


class Serializer(Protocol[T]):
    """Protocol for payload codecs - allows swappable implementations."""

    def serialize(self, value: T) -> bytes:
        """
        Encode a payload.

        Raises:
            EncodingError: If the value cannot be encoded
        """
        ...

    def deserialize(self, data: bytes) -> T:
        """
        Decode a payload.

        Raises:
            DecodingError: If the bytes do not match the payload type
        """
        ...


class JsonSerializer(Generic[T]):
    """
    Structured-text codec validated against a payload type.

    Encoding is canonical: object keys are sorted and separators compact, so
    equal payloads always produce the same member bytes and accumulate into
    one entry. A payload is only accepted if its encoding decodes back as
    payload_type; anything else (wrong type, NaN/inf in float fields)
    raises EncodingError before the store sees it.
    """

    def __init__(self, payload_type: Any = Any):
        """
        Initialize JSON serializer.

        Args:
            payload_type: Type the payloads are validated against
                (str, dict, a pydantic model, ...). Defaults to Any.
        """
        self.payload_type = payload_type
        self._adapter = TypeAdapter(payload_type)

    def serialize(self, value: T) -> bytes:
        try:
            plain = self._adapter.dump_python(value, mode="json", warnings="error")
            data = json.dumps(
                plain, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode()
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise EncodingError(f"Cannot encode {type(value).__name__} as JSON: {e}") from e

        try:
            self._adapter.validate_json(data)
        except ValidationError as e:
            raise EncodingError(
                f"Encoded {type(value).__name__} does not decode as {self._type_name()}: {e}"
            ) from e
        return data

    def deserialize(self, data: bytes) -> T:
        try:
            return self._adapter.validate_json(data)
        except ValidationError as e:
            raise DecodingError(f"Cannot decode payload as {self._type_name()}: {e}") from e

    def _type_name(self) -> str:
        return getattr(self.payload_type, "__name__", str(self.payload_type))


class ProtobufSerializer(Generic[T]):
    """Binary-schema codec. Declared but not implemented."""

    def __init__(self, payload_type: Any = Any):
        self.payload_type = payload_type

    def serialize(self, value: T) -> bytes:
        raise QueueNotImplementedError("Protobuf serialization is not implemented")

    def deserialize(self, data: bytes) -> T:
        raise QueueNotImplementedError("Protobuf deserialization is not implemented")


def new_serializer(
    serializer_type: Union[SerializerType, str], payload_type: Any = Any
) -> Serializer:
    """
    Build a serializer by name.

    Args:
        serializer_type: One of SerializerType (or its string value)
        payload_type: Type the payloads are validated against

    Returns:
        Serializer instance

    Raises:
        UnknownSerializerError: If serializer_type is not supported
    """
    try:
        kind = SerializerType(serializer_type)
    except ValueError:
        supported = ", ".join(t.value for t in SerializerType)
        raise UnknownSerializerError(
            f"Unknown serializer '{serializer_type}'. Supported: {supported}"
        ) from None

    if kind is SerializerType.JSON:
        return JsonSerializer(payload_type)
    return ProtobufSerializer(payload_type)
