# -*- coding: utf-8 -*-
import os
from pathlib import Path

DIR_NAME = ".hubshipper"


def get_system_dir() -> Path:
    """
    Get the system directory for the hubshipper configuration.

    Returns:
        Path: The system directory path.
    """
    import sys

    raw_dir = os.getenv("HUBSHIPPER_SYSTEM_CONFIG_PATH")
    app_data = os.environ.get("ALLUSERSPROFILE", None)

    if not raw_dir:
        if sys.platform.startswith("win") and app_data:
            raw_dir = app_data
        elif sys.platform.startswith("darwin"):
            raw_dir = "/Library/Application Support"
        elif sys.platform.startswith("linux"):
            raw_dir = "/etc"
        else:
            raw_dir = "/"

    return Path(raw_dir, DIR_NAME)


def get_user_dir() -> Path:
    """
    Get the user directory for the hubshipper configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()
SYSTEM_CONFIG_DIR = get_system_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG_FILE_SYSTEM = SYSTEM_CONFIG_DIR / CONFIG_FILE_NAME
CONFIG_FILE_USER = USER_CONFIG_DIR / CONFIG_FILE_NAME

CONFIG = CONFIG_FILE_SYSTEM if CONFIG_FILE_SYSTEM.exists() else CONFIG_FILE_USER

ENV_PREFIX = "HUBSHIPPER_"

# Sender defaults
DEFAULT_EXPIRY = 3600
DEFAULT_PROXY_PORT = 3128
DEFAULT_OPEN_TIMEOUT = 60
DEFAULT_READ_TIMEOUT = 60
DEFAULT_REPLACEMENT_STRING = " "

# Seconds before expiry at which a cached token is refreshed
TOKEN_REFRESH_SKEW = 60

# Output defaults
DEFAULT_TRANSPORT_TYPE = "https"
SUPPORTED_TRANSPORT_TYPES = ("https",)
DEFAULT_TIME_FIELD_NAME = "time"
DEFAULT_MAX_BATCH_SIZE = 20

# Wire format
CONTENT_TYPE_JSON = "application/json; charset=utf-8"
SAS_TOKEN_SCHEME = "SharedAccessSignature"
BROKER_PROPERTIES_HEADER = "BrokerProperties"
CUSTOM_PROPERTIES_HEADER = "Properties"
BATCH_RECORDS_KEY = "records"

# CLI defaults
DEFAULT_CHUNK_SIZE = 500
DEFAULT_TAG = "hubshipper"
DEFAULT_SEND_RETRIES = 3

EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_INVALID_CONFIGURATION = 78
EXIT_CODE_DELIVERY_FAILED = 75
