"""
Pass-through transformer reading module source from disk.

Source files served by this transformer are expected to already be written
against the SSR bindings (``__ssr_import__``, ``__ssr_exports__`` and so on).
"""

import os
import asyncio
import logging
from concurrent.futures import Executor
from typing import Optional

from ..core.interfaces import CompiledResult, IModuleGraph, ITransformer

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class SourceTransformer(ITransformer):
    """Reads module source through an I/O executor and caches it on the record."""

    def __init__(self, module_graph: IModuleGraph, io_executor: Optional[Executor] = None):
        self.module_graph = module_graph
        self.io_executor = io_executor

    async def transform_request(
        self, url: str, ssr: bool = True
    ) -> Optional[CompiledResult]:
        mod = await self.module_graph.ensure_entry_from_url(url)
        if not mod.file or not os.path.isfile(mod.file):
            logger.warning(f"No source file for {url}")
            return None

        loop = asyncio.get_running_loop()
        code = await loop.run_in_executor(self.io_executor, _read_source, mod.file)

        result = CompiledResult(code=code, file=mod.file)
        if ssr:
            mod.ssr_transform_result = result
        logger.debug(f"Transformed {url} ({len(code)} chars)")
        return result
