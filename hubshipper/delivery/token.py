"""
Shared Access Signature tokens for the Event Hubs REST endpoint.
"""

import base64
import hashlib
import hmac
import logging
import time
from typing import NamedTuple, Optional
from urllib.parse import quote_plus

from hubshipper.constants import DEFAULT_EXPIRY, SAS_TOKEN_SCHEME, TOKEN_REFRESH_SKEW
from hubshipper.log_codes import TOKEN_REFRESHED

from .connection import ConnectionDescriptor

logger = logging.getLogger(__name__)


class SignedToken(NamedTuple):
    value: str
    issued_at: int
    expires_at: int


def build_sas_token(resource: str, key_name: str, key_secret: bytes, expires_at: int) -> str:
    """
    Build a Shared Access Signature for ``resource`` valid until ``expires_at``.

    Args:
        resource (str): The target URI (scheme, host and path).
        key_name (str): The shared access key name.
        key_secret (bytes): The raw signing secret.
        expires_at (int): Expiry as a Unix timestamp in seconds.

    Returns:
        str: The ``Authorization`` header value.
    """
    encoded_resource = quote_plus(resource.lower(), safe="")
    string_to_sign = f"{encoded_resource}\n{expires_at}".encode("utf-8")

    digest = hmac.new(key_secret, string_to_sign, hashlib.sha256).digest()
    encoded_signature = quote_plus(base64.b64encode(digest).decode("ascii"), safe="")

    return (
        f"{SAS_TOKEN_SCHEME} sr={encoded_resource}&sig={encoded_signature}"
        f"&se={expires_at}&skn={key_name}"
    )


class SasTokenProvider:
    """
    Caches a signed token for one resource and re-signs it shortly before expiry.

    The refresh check is not locked. Concurrent callers may sign twice, but a
    token is always built completely before it replaces the cached one.
    """

    def __init__(
        self,
        resource: str,
        descriptor: ConnectionDescriptor,
        expiry_interval: int = DEFAULT_EXPIRY,
    ):
        self.resource = resource
        self.descriptor = descriptor
        self.expiry_interval = int(expiry_interval)
        self._token: Optional[SignedToken] = None

    @property
    def token(self) -> Optional[SignedToken]:
        return self._token

    def needs_refresh(self, now: int) -> bool:
        return self._token is None or now >= self._token.expires_at - TOKEN_REFRESH_SKEW

    def current_token(self, now: Optional[int] = None) -> str:
        """
        Return a token valid at ``now``, signing a new one when needed.

        Args:
            now (Optional[int]): Unix timestamp in seconds, defaults to the current time.

        Returns:
            str: The ``Authorization`` header value.
        """
        if now is None:
            now = int(time.time())

        if self.needs_refresh(now):
            expires_at = now + self.expiry_interval
            token = SignedToken(
                value=build_sas_token(
                    self.resource,
                    self.descriptor.key_name,
                    self.descriptor.key_secret,
                    expires_at,
                ),
                issued_at=now,
                expires_at=expires_at,
            )
            self._token = token
            logger.debug(
                TOKEN_REFRESHED,
                extra={"resource": self.resource, "expires_at": expires_at},
            )

        return self._token.value
