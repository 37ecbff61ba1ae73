"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for serializing/deserializing cached values.

    Serializers convert between Python objects and the text stored in
    the durable layer.
    """

    def serialize(self, value: Any) -> str:
        """Serialize value to a string.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, data: str) -> Any:
        """Deserialize a string to a value.

        Args:
            data: The text to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        ...
