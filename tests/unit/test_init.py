"""Unit tests for __init__.py module."""

from unittest.mock import patch
from mcp_profile_backup import main, __version__, SERVER_NAME


class TestInit:
    """Test __init__.py functionality."""

    def test_main_function_calls_server_main(self):
        with patch("mcp_profile_backup.server.main") as mock_server_main:
            main()
            mock_server_main.assert_called_once()

    def test_version_attribute_exists(self):
        assert isinstance(__version__, str)

    def test_server_name_constant(self):
        assert SERVER_NAME == "Profile Backup"

    def test_all_exports(self):
        import mcp_profile_backup

        expected_exports = ["main", "server", "__version__", "SERVER_NAME"]
        assert set(mcp_profile_backup.__all__) == set(expected_exports)
