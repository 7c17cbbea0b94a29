"""Dev-server context for the SSR runtime."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..platform.bridge import PlatformBridge
from ..utils.config import ServerConfig, get_server_config
from ..utils.logger import SSRLogger
from .module import SSRModule
from .module_loader import SSRModuleLoader

logger = logging.getLogger(__name__)


@dataclass
class SSRContext:
    """Execution context shared by every module of one SSR session."""

    global_ctx: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DevServer:
    """
    Container holding the dev server's collaborators.

    Attributes:
        config: Server configuration
        module_graph: Graph storing per-url module records
        transformer: Transform pipeline producing executable code
        logger: Logging collaborator used for evaluation errors
        bridge: Platform bridge for external modules (created if omitted)
        context: Shared SSR execution context
        io_executor: ThreadPoolExecutor used for source reads
    """

    config: ServerConfig
    module_graph: Any
    transformer: Any
    logger: SSRLogger = field(default_factory=SSRLogger)
    bridge: Optional[PlatformBridge] = None
    context: SSRContext = field(default_factory=SSRContext)
    io_executor: Optional[ThreadPoolExecutor] = None

    _loader: Optional[SSRModuleLoader] = field(default=None, init=False, repr=False)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit with executor cleanup."""
        self.close()

    @property
    def loader(self) -> SSRModuleLoader:
        if self._loader is None:
            self._loader = SSRModuleLoader(
                module_graph=self.module_graph,
                transformer=self.transformer,
                config=self.config,
                logger=self.logger,
                bridge=self.bridge,
                global_ctx=self.context.global_ctx,
            )
        return self._loader

    async def ssr_load_module(self, url: str) -> SSRModule:
        """Load a project module for server-side rendering."""
        return await self.loader.load(url)

    def close(self) -> None:
        if self.io_executor:
            logger.debug("Shutting down SSR I/O executor")
            self.io_executor.shutdown(wait=True)
            self.io_executor = None


def create_dev_server(config: Optional[ServerConfig] = None) -> DevServer:
    """
    Build a dev server wired with the in-memory graph and the source transformer.

    Args:
        config: Server configuration (defaults to the environment configuration)

    Returns:
        DevServer ready to load modules
    """
    from ..graph.module_graph import ModuleGraph
    from ..transform.source_transformer import SourceTransformer

    config = config or get_server_config()
    module_graph = ModuleGraph(config.root)
    io_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="ssr-io")
    transformer = SourceTransformer(module_graph, io_executor=io_executor)

    logger.info(f"Created SSR dev server for {config.root}")
    return DevServer(
        config=config,
        module_graph=module_graph,
        transformer=transformer,
        io_executor=io_executor,
    )
