import pytest

from hubshipper.delivery.connection import (
    ConnectionDescriptor,
    REQUIRED_KEYS,
    parse_connection_string,
)
from hubshipper.errors import ConfigurationError


@pytest.mark.unit
class TestParseConnectionString:
    """
    Tests for parse_connection_string.
    """

    def test_parses_all_fields(self, connection_string: str) -> None:
        descriptor = parse_connection_string(connection_string)

        assert descriptor == ConnectionDescriptor(
            endpoint_host="ns.servicebus.windows.net",
            key_name="root",
            key_secret=b"test",
        )

    @pytest.mark.parametrize(
        "endpoint",
        [
            "sb://ns.servicebus.windows.net/",
            "sb://ns.servicebus.windows.net",
            "https://ns.servicebus.windows.net/",
            "ns.servicebus.windows.net/",
            "ns.servicebus.windows.net",
        ],
    )
    def test_endpoint_host_has_no_scheme_or_trailing_slash(self, endpoint: str) -> None:
        descriptor = parse_connection_string(
            f"Endpoint={endpoint};SharedAccessKeyName=root;SharedAccessKey=dGVzdA=="
        )

        assert descriptor.endpoint_host == "ns.servicebus.windows.net"

    def test_value_keeps_equal_signs(self) -> None:
        descriptor = parse_connection_string(
            "Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=YWJjZA=="
        )

        assert descriptor.key_secret == b"abcd"

    def test_order_and_extra_segments_do_not_matter(self) -> None:
        descriptor = parse_connection_string(
            "SharedAccessKey=dGVzdA==;EntityPath=logs;;"
            "SharedAccessKeyName=root;Endpoint=sb://ns.servicebus.windows.net/"
        )

        assert descriptor.endpoint_host == "ns.servicebus.windows.net"
        assert descriptor.key_name == "root"

    def test_non_base64_key_is_used_verbatim(self) -> None:
        descriptor = parse_connection_string(
            "Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=not base64!"
        )

        assert descriptor.key_secret == b"not base64!"

    @pytest.mark.parametrize("missing", REQUIRED_KEYS)
    def test_missing_key_raises_naming_the_key(self, missing: str) -> None:
        segments = {
            "Endpoint": "sb://ns.servicebus.windows.net/",
            "SharedAccessKeyName": "root",
            "SharedAccessKey": "dGVzdA==",
        }
        del segments[missing]
        value = ";".join(f"{k}={v}" for k, v in segments.items())

        with pytest.raises(ConfigurationError) as exc_info:
            parse_connection_string(value)

        assert exc_info.value.key == missing
        assert missing in str(exc_info.value)

    def test_key_names_are_case_exact(self) -> None:
        with pytest.raises(ConfigurationError, match="Endpoint"):
            parse_connection_string(
                "endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=dGVzdA=="
            )

    def test_empty_string_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Endpoint"):
            parse_connection_string("")

    def test_repr_hides_secret(self, connection_string: str) -> None:
        descriptor = parse_connection_string(connection_string)

        assert "test" not in repr(descriptor).replace("ns.servicebus", "")
        assert "***" in repr(descriptor)

    @pytest.mark.parametrize(
        "value",
        [
            " Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=dGVzdA==",
            "Endpoint =sb://ns.servicebus.windows.net/;SharedAccessKeyName=root;SharedAccessKey=dGVzdA==",
        ],
    )
    def test_key_names_are_not_trimmed(self, value: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_connection_string(value)

        assert exc_info.value.key == "Endpoint"

    def test_values_are_trimmed(self) -> None:
        descriptor = parse_connection_string(
            "Endpoint= sb://ns.servicebus.windows.net/ ;SharedAccessKeyName=root ;SharedAccessKey=dGVzdA==\n"
        )

        assert descriptor.endpoint_host == "ns.servicebus.windows.net"
        assert descriptor.key_name == "root"
        assert descriptor.key_secret == b"test"
