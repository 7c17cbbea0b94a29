"""
Tests for the command line entry point.
"""

import os
from unittest.mock import Mock, patch

from ssr_runtime import __main__ as cli


class TestMain:
    """Test main() wiring."""

    def test_log_level_comes_from_server_config(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}), \
                patch.object(cli, "configure_logging") as configure_logging, \
                patch.object(cli, "run", Mock(return_value="coro")), \
                patch.object(cli.asyncio, "run", Mock(return_value=0)) as run_loop:
            assert cli.main(["/src/entry.py"]) == 0

        configure_logging.assert_called_once_with("WARNING")
        run_loop.assert_called_once_with("coro")

    def test_root_argument_sets_project_root(self, tmp_path):
        with patch.dict(os.environ), \
                patch.object(cli, "configure_logging"), \
                patch.object(cli, "run", Mock()), \
                patch.object(cli.asyncio, "run", Mock(return_value=0)):
            cli.main(["/src/entry.py", "--root", str(tmp_path)])

            assert cli.get_server_config().root == str(tmp_path)
