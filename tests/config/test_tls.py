import pytest
import ssl
from pathlib import Path
from unittest.mock import patch, MagicMock

from hubshipper.config.tls import (
    TLSConfig,
    get_tls_config,
    _normalize_bundle_path,
    _normalize_mode,
)


# Fixtures

VALID_TLS_MODES = ("default", "system", "bundle")


@pytest.fixture
def valid_ca_bundle_file(tmp_path: Path) -> Path:
    """
    Create a CA bundle file for testing.
    """
    bundle_file = tmp_path / "ca-bundle.crt"
    bundle_file.write_text(
        "-----BEGIN CERTIFICATE-----\nMockCertContent\n-----END CERTIFICATE-----"
    )
    return bundle_file


@pytest.fixture
def mock_certifi():
    """
    Mock certifi.where() function.
    """
    with patch("hubshipper.config.tls.certifi.where") as mock:
        mock.return_value = "/path/to/certifi/cacert.pem"
        yield mock


@pytest.fixture
def mock_create_context():
    """
    Mock ssl.create_default_context so no certificate is loaded.
    """
    with patch("hubshipper.config.tls.ssl.create_default_context") as mock:
        mock.return_value = MagicMock(spec=ssl.SSLContext)
        yield mock


@pytest.mark.unit
class TestTLSConfig:
    """
    Tests for TLSConfig NamedTuple.
    """

    def test_as_dict_with_bundle_path(self, valid_ca_bundle_file: Path) -> None:
        config = TLSConfig(
            mode="bundle",
            bundle_path=valid_ca_bundle_file,
            verify_context=MagicMock(spec=ssl.SSLContext),
        )

        assert config.as_dict() == {
            "mode": "bundle",
            "ca_bundle": str(valid_ca_bundle_file),
        }

    def test_as_dict_without_bundle_path(self) -> None:
        config = TLSConfig(mode="system", bundle_path=None, verify_context=MagicMock(spec=ssl.SSLContext))

        assert config.as_dict() == {"mode": "system", "ca_bundle": None}

    def test_verifies_peer(self) -> None:
        assert TLSConfig("default", None, MagicMock(spec=ssl.SSLContext)).verifies_peer
        assert not TLSConfig("disabled", None, False).verifies_peer


@pytest.mark.unit
class TestNormalizeMode:
    """
    Tests for _normalize_mode helper.
    """

    @pytest.mark.parametrize("mode", VALID_TLS_MODES)
    def test_accepts_valid_modes(self, mode: str) -> None:
        assert _normalize_mode(mode, None) == mode

    @pytest.mark.parametrize("mode", ["DEFAULT", " System "])
    def test_normalizes_case_and_whitespace(self, mode: str) -> None:
        assert _normalize_mode(mode, None) == mode.strip().lower()

    @pytest.mark.parametrize("mode", [None, ""])
    def test_empty_mode_defaults(self, mode) -> None:
        assert _normalize_mode(mode, None) == "default"

    def test_bundle_implies_bundle_mode(self) -> None:
        assert _normalize_mode(None, "/etc/ssl/ca.pem") == "bundle"

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(ValueError, match="Invalid TLS mode"):
            _normalize_mode("insecure", None)


@pytest.mark.unit
class TestNormalizeBundlePath:
    """
    Tests for _normalize_bundle_path helper.
    """

    def test_returns_resolved_path(self, valid_ca_bundle_file: Path) -> None:
        assert _normalize_bundle_path(valid_ca_bundle_file) == valid_ca_bundle_file.resolve()

    def test_raises_on_empty_path(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            _normalize_bundle_path(None)

    def test_raises_on_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="does not exist"):
            _normalize_bundle_path(tmp_path / "missing.pem")

    def test_raises_on_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="not a file"):
            _normalize_bundle_path(tmp_path)


@pytest.mark.unit
class TestGetTlsConfig:
    """
    Tests for get_tls_config.
    """

    def test_verification_disabled(self) -> None:
        result = get_tls_config(ssl_verify=False)

        assert result.mode == "disabled"
        assert result.verify_context is False

    def test_disabled_ignores_other_options(self) -> None:
        result = get_tls_config(ssl_verify=False, mode="bundle", ca_bundle="/missing.pem")

        assert result.verify_context is False

    def test_default_mode_uses_certifi(self, mock_certifi, mock_create_context) -> None:
        result = get_tls_config()

        mock_create_context.assert_called_once_with(cafile="/path/to/certifi/cacert.pem")
        assert result.mode == "default"
        assert result.bundle_path is None
        assert result.verify_context is mock_create_context.return_value

    def test_system_mode(self, mock_create_context) -> None:
        result = get_tls_config(mode="system")

        mock_create_context.assert_called_once_with()
        assert result.mode == "system"

    def test_bundle_mode(self, valid_ca_bundle_file: Path, mock_create_context) -> None:
        result = get_tls_config(ca_bundle=str(valid_ca_bundle_file))

        mock_create_context.assert_called_once_with(
            cafile=str(valid_ca_bundle_file.resolve())
        )
        assert result.mode == "bundle"
        assert result.bundle_path == valid_ca_bundle_file.resolve()

    def test_bundle_mode_requires_path(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            get_tls_config(mode="bundle")

    def test_bundle_path_with_other_mode_raises(self, valid_ca_bundle_file: Path) -> None:
        with pytest.raises(ValueError, match="not 'bundle'"):
            get_tls_config(mode="system", ca_bundle=str(valid_ca_bundle_file))

    def test_real_default_context(self) -> None:
        result = get_tls_config()

        assert isinstance(result.verify_context, ssl.SSLContext)
        assert result.verifies_peer
