"""
In-memory module graph storing one record per module url.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from ..core.interfaces import CompiledResult, IModuleGraph

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ModuleNode:
    """
    Graph-owned record for one module.

    Attributes:
        url: Canonical module identifier
        file: Backing file path
        ssr_module: Instantiated module object, once created
        ssr_transform_result: Last transform result for SSR
    """

    url: str
    file: Optional[str] = None
    ssr_module: Optional[Any] = None
    ssr_transform_result: Optional[CompiledResult] = None


class ModuleGraph(IModuleGraph):
    """Maps project urls to module records, creating records on demand."""

    def __init__(self, root: str):
        self.root = root
        self.url_to_module_map: Dict[str, ModuleNode] = {}
        self.file_to_modules_map: Dict[str, Set[ModuleNode]] = {}

    def url_to_file(self, url: str) -> str:
        """Map a project url to its backing file; virtual ids map to themselves."""
        if url.startswith("\0") or not url.startswith("/"):
            return url
        if url == self.root or url.startswith(self.root.rstrip(os.sep) + os.sep):
            return url
        return os.path.join(self.root, url.lstrip("/"))

    async def ensure_entry_from_url(self, url: str) -> ModuleNode:
        mod = self.url_to_module_map.get(url)
        if mod is None:
            mod = ModuleNode(url=url, file=self.url_to_file(url))
            self.url_to_module_map[url] = mod
            self.file_to_modules_map.setdefault(mod.file, set()).add(mod)
            logger.debug(f"Created module record for {url}")
        return mod

    def get_module_by_url(self, url: str) -> Optional[ModuleNode]:
        return self.url_to_module_map.get(url)

    def get_modules_by_file(self, file: str) -> Set[ModuleNode]:
        return self.file_to_modules_map.get(file, set())

    def invalidate_module(self, mod: ModuleNode) -> None:
        """Drop the instantiated module and cached transform result."""
        mod.ssr_module = None
        mod.ssr_transform_result = None

    def invalidate_all(self) -> None:
        for mod in self.url_to_module_map.values():
            self.invalidate_module(mod)
        logger.info(f"Invalidated {len(self.url_to_module_map)} module records")
