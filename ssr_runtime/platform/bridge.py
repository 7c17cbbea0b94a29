"""
Platform bridge for external module loads.

Identifiers that do not refer to project files are loaded with the platform's
native loader. While such a load runs, top-level imports made by the loaded
code are resolved with the project's resolution rules through a temporary
hook that is always removed afterwards.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from ..core.exceptions import ModuleNotFoundForImporterError
from ..utils.config import ResolveOptions
from ..utils.ids import has_native_extension, is_builtin, strip_native_extension
from .import_hook import (
    dynamic_import,
    hook_import_resolve,
    restore_displaced,
    snapshot_modules,
)
from .interop import InteropModule, proxy_module
from .resolve import try_resolve

logger = logging.getLogger(__name__)


class PlatformBridge:
    """
    Loads external modules and wraps them in the default-export interop view.

    The resolution override is process-wide, so external loads are serialized
    with a lock; at most one hook is installed at any time. Module code runs
    on a worker thread so the event loop keeps serving while it executes.
    Host modules displaced from ``sys.modules`` by a vendored copy are put
    back once the load finishes; the returned module keeps the vendored copy.
    """

    def __init__(
        self,
        resolver: Callable[..., Optional[str]] = try_resolve,
        loader: Callable[..., Any] = dynamic_import,
        hook_installer: Callable[..., Callable[[], None]] = hook_import_resolve,
    ):
        self.resolver = resolver
        self.loader = loader
        self.hook_installer = hook_installer
        self._lock = asyncio.Lock()

    def _resolve(self, id: str, importer: Optional[str], options: ResolveOptions) -> str:
        resolved = self.resolver(id, importer, options, False)
        if not resolved:
            raise ModuleNotFoundForImporterError(id, importer)
        return resolved

    def _make_hook(self, options: ResolveOptions):
        def get_resolver(default_resolve):
            def resolve(id, parent, is_main, hook_options):
                if id.startswith(".") or is_builtin(id) or has_native_extension(id):
                    return default_resolve(id, parent, is_main, hook_options)
                if parent:
                    return self._resolve(id, parent, options)
                # A module loaded by absolute location is importing another
                # one; the identifier needs no project resolution.
                return id

            return resolve

        return get_resolver

    async def load_external(
        self, id: str, importer: Optional[str], options: ResolveOptions
    ) -> InteropModule:
        """
        Load an external module.

        Args:
            id: External identifier, e.g. ``json`` or ``pkg.sub``
            importer: File of the importing project module
            options: Project resolution rules

        Returns:
            The loaded module wrapped in the interop view

        Raises:
            ModuleNotFoundForImporterError: If resolution yields nothing
        """
        options = replace(options, platform_fallback=True)

        async with self._lock:
            module = await asyncio.to_thread(self._load_hooked, id, importer, options)

        return proxy_module(module)

    def _load_hooked(self, id: str, importer: Optional[str], options: ResolveOptions) -> Any:
        if has_native_extension(id):
            id = strip_native_extension(id)

        snapshot = snapshot_modules()
        unhook = self.hook_installer(self._make_hook(options))
        try:
            if is_builtin(id):
                module = self.loader(id)
            else:
                location = self._resolve(id, importer, options)
                top_level = id.split(".", 1)[0]
                if location == top_level:
                    # Namespace package, imported by name.
                    module = self.loader(id)
                else:
                    module = self.loader(location, top_level)
                    if top_level != id:
                        module = self.loader(id)
            logger.debug(f"Loaded external module '{id}' for {importer}")
        finally:
            unhook()
            for name in restore_displaced(snapshot):
                logger.warning(
                    f"External load of '{id}' replaced host module '{name}', restored it"
                )

        return module
