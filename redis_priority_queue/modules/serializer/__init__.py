"""
Serializer Module - Black Box Interface

Purpose: Convert typed payloads to and from the bytes stored as set members
Interface: Serializer.serialize(), Serializer.deserialize(), new_serializer()
Hidden: Wire codec, payload validation

Can be replaced with any codec that honours the Serializer protocol.
"""

from .serializer import (
    JsonSerializer,
    ProtobufSerializer,
    Serializer,
    SerializerType,
    new_serializer,
)

__all__ = [
    "JsonSerializer",
    "ProtobufSerializer",
    "Serializer",
    "SerializerType",
    "new_serializer",
]
