"""
Log codes for configuration and delivery operations.
"""

CONFIG = "config"

# Proxy Configuration
PROXY = f"{CONFIG}.proxy"
PROXY_RESOLVED = f"{PROXY}.resolved"
PROXY_NOT_DEFINED = f"{PROXY}.not_defined"
PROXY_HOST_EMPTY = f"{PROXY}.host_empty"
PROXY_PROTOCOL_INVALID = f"{PROXY}.invalid_protocol"

# TLS Configuration
TLS = f"{CONFIG}.tls"
TLS_RESOLVED = f"{TLS}.resolved"
TLS_VERIFY_DISABLED = f"{TLS}.verify_disabled"
TLS_CA_BUNDLE_RESOLVED = f"{TLS}.ca_bundle_resolved"

# Output settings
SETTINGS = f"{CONFIG}.settings"
SETTINGS_RESOLVED = f"{SETTINGS}.resolved"
SETTINGS_INVALID = f"{SETTINGS}.invalid"
SETTINGS_MISSING_SECTION = f"{SETTINGS}.missing_section"

# Connection string
CONNECTION = f"{CONFIG}.connection"
CONNECTION_PARSED = f"{CONNECTION}.parsed"
CONNECTION_KEY_MISSING = f"{CONNECTION}.key_missing"
CONNECTION_SECRET_NOT_BASE64 = f"{CONNECTION}.secret_not_base64"

DELIVERY = "delivery"

# Token cache
TOKEN = f"{DELIVERY}.token"
TOKEN_REFRESHED = f"{TOKEN}.refreshed"

# Payload codec
PAYLOAD = f"{DELIVERY}.payload"
PAYLOAD_ENCODING_FALLBACK = f"{PAYLOAD}.encoding_fallback"

# HTTP requests
REQUEST = f"{DELIVERY}.request"
REQUEST_SENT = f"{REQUEST}.sent"
REQUEST_REJECTED = f"{REQUEST}.rejected"
REQUEST_FAILED = f"{REQUEST}.failed"

# Output
OUTPUT = "output"
OUTPUT_RECORD = f"{OUTPUT}.record"
OUTPUT_CHUNK_WRITTEN = f"{OUTPUT}.chunk_written"
