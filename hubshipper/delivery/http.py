"""
HTTPS delivery to the Event Hubs REST endpoint.

One ``HttpSender.send`` call is one POST to
``https://<namespace host>/<hub>/messages``. Failures are raised as
``DeliveryError`` subclasses; retrying is left to the caller.
"""

import logging
import time
from typing import Any, Dict, Mapping, NamedTuple, Optional

import httpx

from hubshipper.config.proxy import ProxyConfig
from hubshipper.config.tls import TLSConfig, get_tls_config
from hubshipper.constants import (
    CONTENT_TYPE_JSON,
    DEFAULT_EXPIRY,
    DEFAULT_OPEN_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REPLACEMENT_STRING,
)
from hubshipper.errors import (
    DeliveryConnectionError,
    DeliveryEncodingError,
    DeliveryStatusError,
    DeliveryTimeoutError,
)
from hubshipper.log_codes import REQUEST_FAILED, REQUEST_REJECTED, REQUEST_SENT
from hubshipper.meta import get_meta_http_headers

from .codec import encode_payload
from .connection import parse_connection_string
from .properties import MessageProperties
from .token import SasTokenProvider

logger = logging.getLogger(__name__)


class DeliveryRequest(NamedTuple):
    target_resource: str
    body: bytes
    headers: Dict[str, str]


def is_delivered(status_code: int) -> bool:
    """2xx and 3xx answers count as delivered."""
    return 200 <= status_code < 400


class HttpSender:
    """
    Sends delivery units to one event hub.

    Each call opens its own HTTP client, so nothing but the token cache is
    shared between calls.
    """

    def __init__(
        self,
        connection_string: str,
        hub_name: str,
        expiry: int = DEFAULT_EXPIRY,
        proxy_config: Optional[ProxyConfig] = None,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        tls_config: Optional[TLSConfig] = None,
        ssl_verify: bool = True,
        coerce_to_utf8: bool = True,
        replacement_string: str = DEFAULT_REPLACEMENT_STRING,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.descriptor = parse_connection_string(connection_string)
        self.hub_name = hub_name
        self.uri = f"https://{self.descriptor.endpoint_host}/{hub_name}/messages"

        self._proxy_config = proxy_config
        self._timeout = httpx.Timeout(read_timeout, connect=open_timeout)
        if not ssl_verify or tls_config is None:
            tls_config = get_tls_config(ssl_verify=ssl_verify)
        self._tls_config = tls_config
        self._transport = transport

        self.coerce_to_utf8 = coerce_to_utf8
        self.replacement_string = replacement_string

        self.tokens = SasTokenProvider(self.uri, self.descriptor, expiry)
        self._meta_headers = get_meta_http_headers()

    def _create_http_client(self) -> httpx.Client:
        """
        Create HTTP client with current configuration.

        Returns:
            httpx.Client: A client for a single request.
        """
        client_kwargs: Dict[str, Any] = {
            "verify": self._tls_config.verify_context,
            "timeout": self._timeout,
            "trust_env": False,
        }

        if self._proxy_config:
            client_kwargs["proxy"] = self._proxy_config.endpoint.as_url()

        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        return httpx.Client(**client_kwargs)

    def default_headers(self, now: Optional[int] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": CONTENT_TYPE_JSON,
            "Authorization": self.tokens.current_token(now),
        }
        headers.update(self._meta_headers)
        return headers

    def build_request(
        self,
        payload: Any,
        message_properties: Optional[Mapping[Any, Any]] = None,
        now: Optional[int] = None,
    ) -> DeliveryRequest:
        """
        Encode ``payload`` and assemble the headers for one delivery.

        Args:
            payload (Any): A record or a ``{"records": [...]}`` batch.
            message_properties (Optional[Mapping]): Broker and custom properties.
            now (Optional[int]): Unix timestamp used for the token check.

        Returns:
            DeliveryRequest: The target, body and headers.

        Raises:
            DeliveryEncodingError: If the properties are not JSON serializable
                or a header value is not ASCII.
        """
        body = encode_payload(
            payload,
            coerce_to_utf8=self.coerce_to_utf8,
            replacement=self.replacement_string,
        )

        headers = self.default_headers(now)
        try:
            headers.update(MessageProperties.from_mapping(message_properties).as_headers())
        except (TypeError, ValueError) as e:
            raise DeliveryEncodingError(reason=f"invalid message properties: {e}") from e

        for name, value in headers.items():
            try:
                value.encode("ascii")
            except UnicodeEncodeError as e:
                raise DeliveryEncodingError(reason=f"header {name} is not ASCII") from e

        return DeliveryRequest(target_resource=self.uri, body=body, headers=headers)

    def send(
        self,
        payload: Any,
        message_properties: Optional[Mapping[Any, Any]] = None,
    ) -> bool:
        """
        Send one delivery unit.

        Returns:
            bool: True once the endpoint accepted the unit.

        Raises:
            DeliveryEncodingError: If the request could not be built.
            DeliveryStatusError: If the endpoint answered with a status outside 2xx/3xx.
            DeliveryTimeoutError: If connecting or reading timed out.
            DeliveryConnectionError: If the request failed before a response arrived.
        """
        request = self.build_request(payload, message_properties)
        return self.perform_request(request)

    def send_payload(self, payload: Any) -> bool:
        return self.send(payload, None)

    def perform_request(self, request: DeliveryRequest) -> bool:
        started = time.monotonic()

        try:
            with self._create_http_client() as client:
                response = client.post(
                    request.target_resource,
                    content=request.body,
                    headers=request.headers,
                )
        except httpx.TimeoutException as e:
            logger.warning(REQUEST_FAILED, extra={"uri": self.uri, "reason": str(e)})
            raise DeliveryTimeoutError(reason=str(e)) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(REQUEST_FAILED, extra={"uri": self.uri, "reason": str(e)})
            raise DeliveryConnectionError(reason=str(e) or type(e).__name__) from e

        elapsed = time.monotonic() - started

        if not is_delivered(response.status_code):
            logger.warning(
                REQUEST_REJECTED,
                extra={"uri": self.uri, "status_code": response.status_code},
            )
            raise DeliveryStatusError(response)

        logger.debug(
            REQUEST_SENT,
            extra={
                "uri": self.uri,
                "status_code": response.status_code,
                "bytes": len(request.body),
                "elapsed": round(elapsed, 3),
            },
        )
        return True
