"""
Connection string parsing.

An Event Hubs connection string is a list of ``Key=Value`` segments separated
by ``;``, for example::

    Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=dGVzdA==
"""

import base64
import binascii
import logging
import re
from typing import Dict, NamedTuple

from hubshipper.errors import ConfigurationError
from hubshipper.log_codes import (
    CONNECTION_KEY_MISSING,
    CONNECTION_PARSED,
    CONNECTION_SECRET_NOT_BASE64,
)

logger = logging.getLogger(__name__)

ENDPOINT_KEY = "Endpoint"
KEY_NAME_KEY = "SharedAccessKeyName"
KEY_SECRET_KEY = "SharedAccessKey"

REQUIRED_KEYS = (ENDPOINT_KEY, KEY_NAME_KEY, KEY_SECRET_KEY)

_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


class ConnectionDescriptor(NamedTuple):
    endpoint_host: str
    key_name: str
    key_secret: bytes

    def __repr__(self) -> str:
        return (
            f"ConnectionDescriptor(endpoint_host={self.endpoint_host!r}, "
            f"key_name={self.key_name!r}, key_secret='***')"
        )


def _split_segments(connection_string: str) -> Dict[str, str]:
    parts = {}
    for segment in connection_string.split(";"):
        if not segment.strip():
            continue
        key, _, value = segment.partition("=")
        # Field names are exact; surrounding blanks in values are dropped
        parts[key] = value.strip()
    return parts


def _strip_endpoint(endpoint: str) -> str:
    host = _SCHEME_PREFIX.sub("", endpoint)
    return host.rstrip("/")


def _decode_secret(value: str) -> bytes:
    """
    Decode the base64 shared access key into the raw signing secret.

    Keys that are not valid base64 are used verbatim as UTF-8 bytes.
    """
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        logger.debug(CONNECTION_SECRET_NOT_BASE64)
        return value.encode("utf-8")


def parse_connection_string(connection_string: str) -> ConnectionDescriptor:
    """
    Parse an Event Hubs connection string.

    Args:
        connection_string (str): The ``;`` separated ``Key=Value`` string.

    Returns:
        ConnectionDescriptor: The endpoint host, key name and raw key secret.

    Raises:
        ConfigurationError: If ``Endpoint``, ``SharedAccessKeyName`` or
            ``SharedAccessKey`` is missing.
    """
    parts = _split_segments(connection_string or "")

    for key in REQUIRED_KEYS:
        if key not in parts:
            logger.error(CONNECTION_KEY_MISSING, extra={"key": key})
            raise ConfigurationError(
                message="{key} is missing from connection string", key=key
            )

    descriptor = ConnectionDescriptor(
        endpoint_host=_strip_endpoint(parts[ENDPOINT_KEY]),
        key_name=parts[KEY_NAME_KEY],
        key_secret=_decode_secret(parts[KEY_SECRET_KEY]),
    )

    logger.debug(
        CONNECTION_PARSED,
        extra={"endpoint_host": descriptor.endpoint_host, "key_name": descriptor.key_name},
    )
    return descriptor
