"""
Output settings.

Resolution order for every field (first non-None wins):
  1. Explicit overrides (command-line options)
  2. Environment variables (``HUBSHIPPER_<FIELD NAME>``)
  3. The ``[eventhubs]`` section of config.ini
  4. Field defaults
"""

import json
import logging
import os
from configparser import ConfigParser
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from hubshipper.constants import (
    CONFIG,
    DEFAULT_EXPIRY,
    DEFAULT_MAX_BATCH_SIZE,
    DEFAULT_OPEN_TIMEOUT,
    DEFAULT_PROXY_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REPLACEMENT_STRING,
    DEFAULT_TIME_FIELD_NAME,
    DEFAULT_TRANSPORT_TYPE,
    ENV_PREFIX,
    SUPPORTED_TRANSPORT_TYPES,
)
from hubshipper.errors import ConfigurationError
from hubshipper.log_codes import (
    SETTINGS_INVALID,
    SETTINGS_MISSING_SECTION,
    SETTINGS_RESOLVED,
)

from .proxy import ProxyConfig, get_proxy_config
from .tls import TLSConfig, get_tls_config

logger = logging.getLogger(__name__)

SETTINGS_SECTION_NAME = "eventhubs"


class OutputSettings(BaseModel):
    """
    Validated settings of an Event Hubs output.
    """

    connection_string: SecretStr
    hub_name: str = Field(min_length=1)
    transport_type: str = DEFAULT_TRANSPORT_TYPE

    include_tag: bool = False
    include_time: bool = False
    time_field_name: str = Field(default=DEFAULT_TIME_FIELD_NAME, min_length=1)

    expiry_interval: int = Field(default=DEFAULT_EXPIRY, gt=0)
    proxy_addr: Optional[str] = None
    proxy_port: int = Field(default=DEFAULT_PROXY_PORT, gt=0, le=65535)
    open_timeout: float = Field(default=DEFAULT_OPEN_TIMEOUT, gt=0)
    read_timeout: float = Field(default=DEFAULT_READ_TIMEOUT, gt=0)
    ssl_verify: bool = True
    tls_mode: Optional[str] = None
    ca_bundle: Optional[str] = None

    message_properties: Optional[Dict[str, Any]] = None
    batch: bool = False
    max_batch_size: int = Field(default=DEFAULT_MAX_BATCH_SIZE, ge=1)
    print_records: bool = False

    coerce_to_utf8: bool = True
    replacement_string: str = DEFAULT_REPLACEMENT_STRING

    @field_validator("transport_type")
    @classmethod
    def _only_https(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SUPPORTED_TRANSPORT_TYPES:
            raise ValueError(f"Only type 'https' is supported, got {value!r}")
        return value

    @field_validator("proxy_addr", "tls_mode", "ca_bundle", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("message_properties", mode="before")
    @classmethod
    def _parse_properties(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value.strip():
                return None
            return json.loads(value)
        return value

    @field_validator("message_properties")
    @classmethod
    def _properties_are_json(cls, value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if value is not None:
            try:
                json.dumps(value, allow_nan=False)
            except (TypeError, ValueError) as e:
                raise ValueError(f"message_properties must be JSON compliant: {e}") from e
        return value

    def proxy_config(self) -> Optional[ProxyConfig]:
        return get_proxy_config(host=self.proxy_addr, port=self.proxy_port)

    def tls_config(self) -> TLSConfig:
        return get_tls_config(
            ssl_verify=self.ssl_verify, mode=self.tls_mode, ca_bundle=self.ca_bundle
        )


def _settings_from_config_ini(config_path: Path) -> Dict[str, Any]:
    """
    Read raw settings from the ``[eventhubs]`` section of config.ini.

    Args:
        config_path (Path): The path to the config.ini file.

    Returns:
        Dict[str, Any]: The raw values found, keyed by field name.
    """
    # Connection strings may contain '%'
    config = ConfigParser(interpolation=None)
    config_files = config.read([config_path])

    if not config_files or not config.has_section(SETTINGS_SECTION_NAME):
        if config_files:
            logger.debug(
                SETTINGS_MISSING_SECTION, extra={"config_path": str(config_path)}
            )
        return {}

    section = config[SETTINGS_SECTION_NAME]
    return {
        name: section.get(name)
        for name in OutputSettings.model_fields
        if section.get(name) is not None
    }


def _settings_from_env() -> Dict[str, Any]:
    """
    Read raw settings from ``HUBSHIPPER_<FIELD NAME>`` environment variables.
    """
    values = {}
    for name in OutputSettings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw
    return values


def load_settings(config_path: Path = CONFIG, **overrides: Any) -> OutputSettings:
    """
    Resolve the effective output settings.

    Args:
        config_path (Path): The path to the config.ini file.
        **overrides: Explicit values; None means "not given".

    Returns:
        OutputSettings: The validated settings.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    sources = [
        ("config", _settings_from_config_ini(config_path)),
        ("environment", _settings_from_env()),
        ("cli", {k: v for k, v in overrides.items() if v is not None}),
    ]

    merged: Dict[str, Any] = {}
    origins: Dict[str, str] = {}
    for source_name, values in sources:
        merged.update(values)
        origins.update({name: source_name for name in values})

    try:
        settings = OutputSettings(**merged)
    except (ValidationError, json.JSONDecodeError) as e:
        logger.error(SETTINGS_INVALID, extra={"config_path": str(config_path)})
        raise ConfigurationError(message=f"Invalid output settings: {e}") from e

    logger.info(
        SETTINGS_RESOLVED,
        extra={"config_path": str(config_path), "origins": origins},
    )
    return settings
