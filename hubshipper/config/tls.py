import os
import ssl
from ssl import SSLContext
from pathlib import Path
from typing import NamedTuple, Optional, Union

import certifi
from hubshipper.log_codes import (
    TLS_RESOLVED,
    TLS_VERIFY_DISABLED,
    TLS_CA_BUNDLE_RESOLVED,
)

import logging

logger = logging.getLogger(__name__)

TLS_MODE_KEY = "mode"
TLS_CA_BUNDLE_KEY = "ca_bundle"

DEFAULT_TLS_MODE: str = "default"
DISABLED_TLS_MODE: str = "disabled"
VALID_TLS_MODES = ("default", "system", "bundle")


class TLSConfig(NamedTuple):
    """
    TLS configuration containing mode, bundle path, and resolved verify setting.

    Args:
        mode (str): The TLS mode ('default', 'system', 'bundle', 'disabled').
        bundle_path (Optional[Path]): Path to custom CA bundle if mode='bundle'.
        verify_context (Union[SSLContext, bool]): The value handed to the HTTP
            client's ``verify`` option; False when peer verification is off.
    """

    mode: str
    bundle_path: Optional[Path]
    verify_context: Union[SSLContext, bool]

    @property
    def verifies_peer(self) -> bool:
        return self.verify_context is not False

    def as_dict(self) -> dict[str, Union[str, None]]:
        """
        Convert TLS configuration to dictionary representation.

        Returns:
            dict: Dictionary containing TLS configuration data.
        """
        return {
            TLS_MODE_KEY: self.mode,
            TLS_CA_BUNDLE_KEY: str(self.bundle_path) if self.bundle_path else None,
        }


def _normalize_bundle_path(path: Optional[Path]) -> Path:
    """
    Validate and normalize a CA bundle path.

    Args:
        path (Optional[Path]): The path to validate.

    Returns:
        Path: The validated and normalized path.

    Raises:
        ValueError: If the path is invalid.
    """
    if not path:
        raise ValueError("CA bundle path is empty")

    path = path.expanduser().resolve()

    if not path.exists():
        raise ValueError(f"CA bundle path does not exist: {path}")

    if not path.is_file():
        raise ValueError(f"CA bundle path is not a file: {path}")

    if not os.access(path, os.R_OK):
        raise ValueError(f"CA bundle is not readable: {path}")

    logger.debug(TLS_CA_BUNDLE_RESOLVED, extra={"path": str(path)})
    return path


def _normalize_mode(raw: Optional[str], bundle: Optional[str]) -> str:
    """
    Validate and normalize TLS mode. A bundle path without a mode implies 'bundle'.

    Raises:
        ValueError: If the mode is invalid.
    """
    if not raw:
        return "bundle" if bundle else DEFAULT_TLS_MODE

    mode = raw.strip().lower()
    if mode not in VALID_TLS_MODES:
        raise ValueError(
            f"Invalid TLS mode: {raw!r}. Valid options: {', '.join(VALID_TLS_MODES)}"
        )
    return mode


def get_tls_config(
    ssl_verify: bool = True,
    mode: Optional[str] = None,
    ca_bundle: Optional[str] = None,
) -> TLSConfig:
    """
    Resolve the TLS peer verification used for delivery requests.

    Args:
        ssl_verify (bool): Verify the endpoint certificate. False disables
            verification whatever the other options say.
        mode (Optional[str]): The TLS mode ('default', 'system', 'bundle').
        ca_bundle (Optional[str]): The CA bundle path, implies mode='bundle'.

    Returns:
        TLSConfig: The TLS configuration.

    Raises:
        ValueError: If the TLS configuration is invalid.

    TLS Modes:
        - default: Use certifi.where() (bundled CA certificates)
        - system: Use the operating system trust store
        - bundle: Use custom CA bundle file
    """
    if not ssl_verify:
        logger.warning(TLS_VERIFY_DISABLED)
        return TLSConfig(mode=DISABLED_TLS_MODE, bundle_path=None, verify_context=False)

    normalized_mode = _normalize_mode(mode, ca_bundle)

    if ca_bundle and normalized_mode != "bundle":
        raise ValueError(
            "TLS mode is not 'bundle', but a TLS bundle path was provided."
        )

    if normalized_mode == "bundle":
        bundle_path = _normalize_bundle_path(Path(ca_bundle) if ca_bundle else None)
        verify_context = ssl.create_default_context(cafile=str(bundle_path))
    elif normalized_mode == "system":
        bundle_path = None
        verify_context = ssl.create_default_context()
    else:  # normalized_mode == "default"
        bundle_path = None
        verify_context = ssl.create_default_context(cafile=certifi.where())

    result = TLSConfig(
        mode=normalized_mode,
        bundle_path=bundle_path,
        verify_context=verify_context,
    )
    logger.debug(TLS_RESOLVED, extra=result.as_dict())
    return result
