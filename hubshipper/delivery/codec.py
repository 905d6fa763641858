"""
Payload encoding for delivery units.

Records are serialized to compact JSON. Before serialization, text that is
not valid UTF-8 (``bytes`` values, or ``str`` values carrying lone
surrogates) can be coerced by replacing every invalid run with a replacement
string. When serialization fails anyway, a fallback document describing the
failure is produced, so encoding a unit always yields a sendable body.
"""

import json
import logging
import re
from typing import Any, Optional, Set, Tuple

from hubshipper.constants import DEFAULT_REPLACEMENT_STRING
from hubshipper.log_codes import PAYLOAD_ENCODING_FALLBACK

logger = logging.getLogger(__name__)

# Undecodable bytes surface as U+DC80..U+DCFF with the surrogateescape handler
_ESCAPED_BYTES = re.compile("[\udc80-\udcff]+")
_SURROGATES = re.compile("[\ud800-\udfff]+")

JSON_SEPARATORS = (",", ":")


def coerce_text(value: Any, replacement: str = DEFAULT_REPLACEMENT_STRING) -> Any:
    """
    Return ``value`` as valid UTF-8 text when it is text-like.

    ``bytes`` are decoded as UTF-8; each run of invalid bytes becomes one
    ``replacement``. ``str`` values that cannot be encoded as UTF-8 get each
    run of surrogates replaced the same way. Anything else is returned as is.
    """
    if isinstance(value, (bytes, bytearray)):
        decoded = bytes(value).decode("utf-8", errors="surrogateescape")
        return _ESCAPED_BYTES.sub(lambda _: replacement, decoded)

    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return _SURROGATES.sub(lambda _: replacement, value)
        return value

    return value


def deep_coerce_to_utf8(
    obj: Any,
    replacement: str = DEFAULT_REPLACEMENT_STRING,
    _path: Optional[Set[int]] = None,
) -> Any:
    """
    Walk lists, tuples and mappings, coercing every key and text value.

    A container that contains itself is left as is at the point where the
    cycle closes; serialization then reports the cycle.
    """
    if not isinstance(obj, (dict, list, tuple)):
        return coerce_text(obj, replacement)

    path = _path if _path is not None else set()
    if id(obj) in path:
        return obj

    path.add(id(obj))
    try:
        if isinstance(obj, dict):
            return {
                coerce_text(key, replacement): deep_coerce_to_utf8(value, replacement, path)
                for key, value in obj.items()
            }
        return [deep_coerce_to_utf8(item, replacement, path) for item in obj]
    finally:
        path.discard(id(obj))


def dumps_compact(obj: Any, ensure_ascii: bool = False) -> str:
    return json.dumps(
        obj,
        separators=JSON_SEPARATORS,
        ensure_ascii=ensure_ascii,
        allow_nan=False,
    )


def _describe(obj: Any) -> str:
    try:
        return str(obj)
    except Exception:
        return object.__repr__(obj)


def _try_encode(
    payload: Any, coerce_to_utf8: bool, replacement: str
) -> Tuple[Optional[bytes], Optional[Exception]]:
    try:
        obj = deep_coerce_to_utf8(payload, replacement) if coerce_to_utf8 else payload
        return dumps_compact(obj).encode("utf-8"), None
    except (TypeError, ValueError, RecursionError) as e:
        return None, e


def encode_payload(
    payload: Any,
    coerce_to_utf8: bool = True,
    replacement: str = DEFAULT_REPLACEMENT_STRING,
) -> bytes:
    """
    Serialize a delivery unit to a UTF-8 JSON body.

    Args:
        payload (Any): A record, or a ``{"records": [...]}`` batch.
        coerce_to_utf8 (bool): Replace invalid UTF-8 text before serializing.
        replacement (str): Replacement for each run of invalid text.

    Returns:
        bytes: The JSON document. Never raises: when the payload cannot be
        serialized, a ``{"message": ..., "error": ...}`` document is returned.
    """
    body, error = _try_encode(payload, coerce_to_utf8, replacement)
    if error is None:
        return body

    logger.warning(PAYLOAD_ENCODING_FALLBACK, extra={"reason": str(error)})
    fallback = {
        "message": _describe(payload),
        "error": f"JSON encoding failed: {error}",
    }
    return dumps_compact(fallback, ensure_ascii=True).encode("ascii")


def decode_payload(body: bytes) -> Any:
    return json.loads(body)
