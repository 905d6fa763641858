from typing import NamedTuple, Optional, Union

from hubshipper.constants import DEFAULT_PROXY_PORT
from hubshipper.log_codes import (
    PROXY_RESOLVED,
    PROXY_NOT_DEFINED,
    PROXY_HOST_EMPTY,
    PROXY_PROTOCOL_INVALID,
)

import logging

logger = logging.getLogger(__name__)


DEFAULT_PROXY_SCHEME: str = "http"
PROXY_ALLOWED_PROTOCOLS = ("http", "https")

PROXY_PROTOCOL_KEY = "protocol"
PROXY_HOST_KEY = "host"
PROXY_PORT_KEY = "port"


class ProxyEndpoint(NamedTuple):
    scheme: str
    host: str
    port: int

    def as_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def as_dict(self) -> dict[str, Union[str, int]]:
        return {
            PROXY_PROTOCOL_KEY: self.scheme,
            PROXY_HOST_KEY: self.host,
            PROXY_PORT_KEY: str(self.port),
        }


class ProxyConfig(NamedTuple):
    endpoint: ProxyEndpoint

    def as_dict(self) -> dict[str, Union[str, int]]:
        return self.endpoint.as_dict()


def _should_build_proxy_config(host: Optional[str], *other_values) -> bool:
    """
    Return True if the proxy config should be built, False otherwise.

    A blank host means "no proxy", unless other proxy options were given.

    Args:
        host (Optional[str]): The proxy host.
        *other_values: Other values that may be provided.

    Returns:
        bool: True if the proxy config should be built, False otherwise.
    """
    if not host or not host.strip():
        if any(v is not None for v in other_values):
            raise ValueError(
                "Proxy host must be provided when using other proxy options."
            )
        return False

    return True


def _build_proxy_config(
    host: str,
    port: Optional[int],
    scheme: Optional[str],
) -> ProxyConfig:
    if not host or not host.strip():
        logger.error(PROXY_HOST_EMPTY)
        raise ValueError("Proxy host must not be empty")

    host = host.strip()

    scheme = (scheme or DEFAULT_PROXY_SCHEME).lower()
    if scheme not in PROXY_ALLOWED_PROTOCOLS:
        logger.error(PROXY_PROTOCOL_INVALID, extra={"protocol": scheme})
        raise ValueError(f"Invalid proxy protocol: {scheme!r}")

    port = port or DEFAULT_PROXY_PORT

    endpoint = ProxyEndpoint(
        scheme=scheme,
        host=host,
        port=port,
    )

    return ProxyConfig(endpoint=endpoint)


def get_proxy_config(
    host: Optional[str] = None,
    port: Optional[Union[int, str]] = None,
    scheme: Optional[str] = None,
) -> Optional[ProxyConfig]:
    """
    Resolve the forward proxy used for delivery requests.

    Args:
        host (Optional[str]): The proxy host. Blank or None disables the proxy.
        port (Optional[Union[int, str]]): The proxy port, 3128 when omitted.
        scheme (Optional[str]): The proxy scheme (http or https).

    Returns:
        Optional[ProxyConfig]: The proxy configuration, or None when no proxy is set.

    Raises:
        ValueError: If the proxy configuration is invalid.
    """
    if not _should_build_proxy_config(host, scheme):
        logger.debug(PROXY_NOT_DEFINED)
        return None

    port_val = None

    if port is not None and port != "":
        try:
            port_val = int(port)
        except ValueError:
            raise ValueError("Proxy port must be an integer")

    result = _build_proxy_config(host=host or "", port=port_val, scheme=scheme)
    logger.info(PROXY_RESOLVED, extra=result.as_dict())
    return result
