"""
Event Hubs output.

Takes chunks of ``(tag, time, record)`` entries from a log pipeline, enriches
the records, groups them into delivery units and hands each unit to the
HTTP sender. Delivery errors propagate to the caller, which owns retries.
"""

import logging
from typing import Any, Iterable, List, MutableMapping, Optional, Tuple

from hubshipper.config.settings import OutputSettings
from hubshipper.delivery.batching import assemble_units
from hubshipper.delivery.enrich import RecordEnricher
from hubshipper.delivery.http import HttpSender
from hubshipper.errors import ConfigurationError
from hubshipper.log_codes import OUTPUT_CHUNK_WRITTEN, OUTPUT_RECORD

logger = logging.getLogger(__name__)

ChunkEntry = Tuple[str, Any, MutableMapping[str, Any]]


def build_sender(settings: OutputSettings) -> HttpSender:
    """
    Build the HTTP sender described by ``settings``.

    Raises:
        ConfigurationError: If the connection string, proxy or TLS settings are invalid.
    """
    try:
        proxy_config = settings.proxy_config()
        tls_config = settings.tls_config()
    except ValueError as e:
        raise ConfigurationError(message=f"Invalid network settings: {e}") from e

    return HttpSender(
        connection_string=settings.connection_string.get_secret_value(),
        hub_name=settings.hub_name,
        expiry=settings.expiry_interval,
        proxy_config=proxy_config,
        open_timeout=settings.open_timeout,
        read_timeout=settings.read_timeout,
        tls_config=tls_config,
        ssl_verify=settings.ssl_verify,
        coerce_to_utf8=settings.coerce_to_utf8,
        replacement_string=settings.replacement_string,
    )


class EventHubsOutput:
    def __init__(self, settings: OutputSettings, sender: Optional[HttpSender] = None):
        self.settings = settings
        self.sender = sender or build_sender(settings)
        self.enricher = RecordEnricher(
            include_tag=settings.include_tag,
            include_time=settings.include_time,
            time_field_name=settings.time_field_name,
        )

    def _prepare(self, chunk: Iterable[ChunkEntry]) -> List[MutableMapping[str, Any]]:
        records = []
        for tag, time, record in chunk:
            if self.settings.print_records:
                logger.info(OUTPUT_RECORD, extra={"tag": tag, "record": record})
            records.append(self.enricher(tag, time, record))
        return records

    def write(self, chunk: Iterable[ChunkEntry]) -> int:
        """
        Deliver every record of ``chunk``.

        Args:
            chunk: ``(tag, time, record)`` entries, in delivery order.

        Returns:
            int: The number of HTTP requests sent.

        Raises:
            DeliveryError: On the first unit that could not be delivered.
        """
        records = self._prepare(chunk)

        sent = 0
        for unit in assemble_units(
            records,
            batch_enabled=self.settings.batch,
            max_batch_size=self.settings.max_batch_size,
        ):
            self.sender.send(unit, self.settings.message_properties)
            sent += 1

        logger.debug(
            OUTPUT_CHUNK_WRITTEN,
            extra={"records": len(records), "requests": sent, "batch": self.settings.batch},
        )
        return sent

    def encode_chunk(self, chunk: Iterable[ChunkEntry]) -> List[bytes]:
        """
        Encode ``chunk`` the way ``write`` would send it, without sending.
        """
        records = self._prepare(chunk)
        return [
            self.sender.build_request(unit, self.settings.message_properties).body
            for unit in assemble_units(
                records,
                batch_enabled=self.settings.batch,
                max_batch_size=self.settings.max_batch_size,
            )
        ]
