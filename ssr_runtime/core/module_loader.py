"""
Memoized, circular-safe instantiation of SSR modules.

Concurrent loads of the same url share one task. Circular imports are broken
by handing out the importee's module object before it finished evaluating,
both when the importee is on the importer's own chain and when a concurrently
pending import chain would otherwise wait on the importer.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..platform.bridge import PlatformBridge
from ..platform.interop import public_keys, read_member
from ..utils.config import ServerConfig
from ..utils.ids import is_project_path, resolve_relative, unwrap_id
from ..utils.logger import SSRLogger
from ..utils.stacktrace import (
    format_stacktrace,
    rebind_error_stacktrace,
    ssr_rewrite_stacktrace,
)
from .exceptions import TransformUnavailableError
from .interfaces import IModuleGraph, ITransformer
from .module import SSRModule
from .sandbox import ExecutionSandbox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportMeta:
    """Import metadata visible to module code as ``__ssr_import_meta__``."""

    url: str


def _file_url(path: str) -> str:
    return Path(path).absolute().as_uri()


class SSRModuleLoader:
    """
    Instantiates project modules for server-side rendering.

    The pending tables are owned by the loader instance and live as long as
    the dev server session. All mutations of them happen between awaits, so no
    locking is required on the event loop.
    """

    def __init__(
        self,
        module_graph: IModuleGraph,
        transformer: ITransformer,
        config: Optional[ServerConfig] = None,
        logger: Optional[SSRLogger] = None,
        bridge: Optional[PlatformBridge] = None,
        sandbox: Optional[ExecutionSandbox] = None,
        global_ctx: Optional[Dict[str, Any]] = None,
    ):
        self.module_graph = module_graph
        self.transformer = transformer
        self.config = config or ServerConfig()
        self.logger = logger or SSRLogger()
        self.bridge = bridge or PlatformBridge()
        self.sandbox = sandbox or ExecutionSandbox()
        self.global_ctx = global_ctx if global_ctx is not None else {}
        self.resolve_options = self.config.resolve_options()

        self.pending_modules: Dict[str, "asyncio.Future[SSRModule]"] = {}
        self.pending_imports: Dict[str, List[str]] = {}

    async def load(self, url: str, url_stack: Iterable[str] = ()) -> SSRModule:
        """
        Load a module, sharing the in-flight instantiation if there is one.

        Args:
            url: Module identifier
            url_stack: Import chain leading to this load

        Returns:
            The instantiated module object
        """
        url = unwrap_id(url)

        # Registered before the first await so that every later request for
        # this url waits on the same task.
        pending = self.pending_modules.get(url)
        if pending is not None:
            return await pending

        task = asyncio.ensure_future(self._instantiate_tracked(url, list(url_stack)))
        self.pending_modules[url] = task
        return await task

    async def _instantiate_tracked(self, url: str, url_stack: List[str]) -> SSRModule:
        try:
            return await self.instantiate(url, url_stack)
        except Exception:
            self.pending_imports.pop(url, None)
            raise
        finally:
            self.pending_modules.pop(url, None)

    async def instantiate(self, url: str, url_stack: List[str]) -> SSRModule:
        """
        Create, evaluate and freeze the module object for ``url``.

        Raises:
            TransformUnavailableError: If no compiled code can be produced
            Exception: Whatever the module's code raised during evaluation
        """
        mod = await self.module_graph.ensure_entry_from_url(url)

        if mod.ssr_module is not None:
            return mod.ssr_module

        result = mod.ssr_transform_result or await self.transformer.transform_request(
            url, ssr=True
        )
        if not result:
            raise TransformUnavailableError(url)

        ssr_module = SSRModule()
        # Attached before evaluation so circular importers see this object.
        mod.ssr_module = ssr_module

        importer_file = mod.file or url
        import_meta = ImportMeta(url=_file_url(importer_file))

        url_stack = url_stack + [url]

        def is_circular(dep: str) -> bool:
            return dep in url_stack

        pending_deps: List[str] = []

        async def ssr_import(dep: str) -> Any:
            if not is_project_path(dep):
                return await self.bridge.load_external(
                    dep, importer_file, self.resolve_options
                )

            dep = unwrap_id(dep)
            if not is_circular(dep) and not any(
                is_circular(d) for d in self.pending_imports.get(dep, ())
            ):
                pending_deps.append(dep)
                if len(pending_deps) == 1:
                    self.pending_imports[url] = pending_deps
                try:
                    # Return the local result; re-reading the record could
                    # hand concurrent importers of a cycle different objects.
                    return await self.load(dep, url_stack)
                finally:
                    pending_deps.remove(dep)
                    if not pending_deps and self.pending_imports.get(url) is pending_deps:
                        del self.pending_imports[url]

            logger.debug(f"Circular import of {dep} from {url}")
            dep_mod = self.module_graph.url_to_module_map.get(dep)
            return dep_mod.ssr_module if dep_mod is not None else None

        async def ssr_dynamic_import(dep: str) -> Any:
            if dep.startswith("."):
                dep = resolve_relative(url, dep)
            return await ssr_import(dep)

        def ssr_export_all(source_module: Any) -> None:
            keys = source_module.keys() if isinstance(source_module, Mapping) else public_keys(source_module)
            for key in list(keys):
                if key != "default":
                    ssr_module.define_getter(
                        key, lambda key=key: read_member(source_module, key)
                    )

        try:
            await self.sandbox.run(
                result.code,
                url,
                self.global_ctx,
                ssr_module,
                import_meta,
                ssr_import,
                ssr_dynamic_import,
                ssr_export_all,
            )
        except Exception as e:
            stacktrace = ssr_rewrite_stacktrace(format_stacktrace(e), self.module_graph)
            rebind_error_stacktrace(e, stacktrace)
            self.logger.error(
                f"Error when evaluating SSR module {url}:\n{stacktrace}",
                timestamp=True,
                clear=self.config.clear_screen,
                error=e,
            )
            raise

        return ssr_module.freeze()
