from .batching import assemble_units, chunked
from .codec import decode_payload, encode_payload
from .connection import ConnectionDescriptor, parse_connection_string
from .enrich import RecordEnricher, enrich_record
from .http import DeliveryRequest, HttpSender
from .properties import MessageProperties
from .token import SasTokenProvider, SignedToken, build_sas_token

__all__ = [
    "assemble_units",
    "chunked",
    "decode_payload",
    "encode_payload",
    "ConnectionDescriptor",
    "parse_connection_string",
    "RecordEnricher",
    "enrich_record",
    "DeliveryRequest",
    "HttpSender",
    "MessageProperties",
    "SasTokenProvider",
    "SignedToken",
    "build_sas_token",
]
