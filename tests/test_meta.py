import unittest
from importlib.metadata import PackageNotFoundError
from unittest.mock import patch

from hubshipper.meta import get_meta_http_headers, get_user_agent, get_version


class TestMeta(unittest.TestCase):
    """Test cases for the meta module."""

    def test_get_user_agent_format(self):
        """Test that get_user_agent returns the expected format."""
        user_agent = get_user_agent()

        self.assertTrue(user_agent.startswith("hubshipper/"))
        self.assertIn("(", user_agent)
        self.assertIn("Python/", user_agent)

    @patch("hubshipper.meta.platform.system")
    @patch("hubshipper.meta.platform.machine")
    @patch("hubshipper.meta.platform.python_version")
    @patch("hubshipper.meta.get_version")
    def test_get_user_agent_values(
        self, mock_get_version, mock_python_version, mock_machine, mock_system
    ):
        """Test get_user_agent with specific platform values."""
        mock_get_version.return_value = "0.4.0"
        mock_system.return_value = "Linux"
        mock_machine.return_value = "x86_64"
        mock_python_version.return_value = "3.12.1"

        self.assertEqual(get_user_agent(), "hubshipper/0.4.0 (Linux x86_64; Python/3.12.1)")

        mock_system.return_value = "Darwin"
        mock_machine.return_value = "arm64"
        self.assertEqual(get_user_agent(), "hubshipper/0.4.0 (Darwin arm_64; Python/3.12.1)")

        mock_system.return_value = "Windows"
        mock_machine.return_value = "AMD64"
        self.assertEqual(get_user_agent(), "hubshipper/0.4.0 (Windows x86_64; Python/3.12.1)")

        mock_machine.return_value = ""
        self.assertEqual(get_user_agent(), "hubshipper/0.4.0 (Windows unknown; Python/3.12.1)")

    @patch("hubshipper.meta.get_version", return_value=None)
    def test_unknown_version(self, _):
        self.assertTrue(get_user_agent().startswith("hubshipper/unknown ("))

    @patch("hubshipper.meta.version", side_effect=PackageNotFoundError)
    def test_get_version_not_installed(self, _):
        self.assertIsNone(get_version())

    @patch("hubshipper.meta.get_user_agent", return_value="hubshipper/0.4.0 (Linux x86_64; Python/3.12.1)")
    def test_get_meta_http_headers(self, _):
        self.assertEqual(
            get_meta_http_headers(),
            {"User-Agent": "hubshipper/0.4.0 (Linux x86_64; Python/3.12.1)"},
        )
