"""
Message properties sent alongside a delivery unit.

Broker properties (only the partition key today) travel in the
``BrokerProperties`` header, every other entry in ``Properties``.
"""

from typing import Any, Dict, Mapping, NamedTuple, Optional

from hubshipper.constants import BROKER_PROPERTIES_HEADER, CUSTOM_PROPERTIES_HEADER

from .codec import dumps_compact

PARTITION_KEY = "PartitionKey"
PARTITION_KEY_ALIASES = frozenset({"PartitionKey", "partition_key", "partitionKey"})


class MessageProperties(NamedTuple):
    broker: Dict[str, Any]
    custom: Dict[str, Any]

    @classmethod
    def from_mapping(cls, properties: Optional[Mapping[Any, Any]]) -> "MessageProperties":
        """
        Split a caller supplied mapping into broker and custom properties.

        ``None`` and an empty mapping both give empty properties. A partition
        key given as ``None`` is kept and sent as ``null``.
        """
        broker: Dict[str, Any] = {}
        custom: Dict[str, Any] = {}

        for key, value in (properties or {}).items():
            name = str(key)
            if name in PARTITION_KEY_ALIASES:
                broker[PARTITION_KEY] = value
            else:
                custom[name] = value

        return cls(broker=broker, custom=custom)

    @property
    def partition_key(self) -> Optional[Any]:
        return self.broker.get(PARTITION_KEY)

    def broker_properties(self) -> Dict[str, Any]:
        return dict(self.broker)

    def as_headers(self) -> Dict[str, str]:
        headers = {}

        broker = self.broker_properties()
        if broker:
            headers[BROKER_PROPERTIES_HEADER] = dumps_compact(broker, ensure_ascii=True)
        if self.custom:
            headers[CUSTOM_PROPERTIES_HEADER] = dumps_compact(self.custom, ensure_ascii=True)

        return headers
