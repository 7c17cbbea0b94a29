"""
Pytest configuration and fixtures for SSR runtime tests.
"""
import io
import os
import sys
import asyncio
import textwrap
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add the project root to path for all tests
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from ssr_runtime.core.interfaces import CompiledResult, ITransformer  # noqa: E402
from ssr_runtime.core.module_loader import SSRModuleLoader  # noqa: E402
from ssr_runtime.graph.module_graph import ModuleGraph  # noqa: E402
from ssr_runtime.utils.config import ServerConfig, reset_server_config  # noqa: E402
from ssr_runtime.utils.logger import SSRLogger  # noqa: E402

PROJECT_ROOT = "/project"


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables."""
    test_env = {
        "SSR_ROOT": PROJECT_ROOT,
        "SSR_IS_PRODUCTION": "false",
        "SSR_CLEAR_SCREEN": "false",
        "LOG_LEVEL": "DEBUG",
    }

    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value
    reset_server_config()

    yield

    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
    reset_server_config()


class InMemoryTransformer(ITransformer):
    """Transformer serving dedented module code from a dict, counting requests."""

    def __init__(self, sources):
        self.sources = sources
        self.calls = []

    async def transform_request(self, url, ssr=True):
        self.calls.append(url)
        # Yield once so concurrent loads actually interleave.
        await asyncio.sleep(0)
        code = self.sources.get(url)
        if code is None:
            return None
        return CompiledResult(code=textwrap.dedent(code), file=PROJECT_ROOT + url)


@pytest.fixture
def sources():
    """Module url -> source mapping, filled in by each test."""
    return {}


@pytest.fixture
def transformer(sources):
    return InMemoryTransformer(sources)


@pytest.fixture
def module_graph():
    return ModuleGraph(PROJECT_ROOT)


@pytest.fixture
def server_config():
    return ServerConfig(root=PROJECT_ROOT, clear_screen=False)


@pytest.fixture
def mock_logger():
    """Provide a mock logging collaborator."""
    return Mock(spec=SSRLogger)


@pytest.fixture
def loader(module_graph, transformer, server_config, mock_logger):
    return SSRModuleLoader(
        module_graph=module_graph,
        transformer=transformer,
        config=server_config,
        logger=mock_logger,
    )


@pytest.fixture
def quiet_logger():
    """A real SSRLogger writing to an in-memory stream."""
    return SSRLogger(stream=io.StringIO())


@pytest.fixture
def clean_sys_modules():
    """Remove the test packages (named *_ssrtest*) from sys.modules afterwards."""
    yield
    for name in [name for name in sys.modules if "ssrtest" in name]:
        sys.modules.pop(name, None)
