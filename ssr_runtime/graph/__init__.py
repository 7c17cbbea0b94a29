"""
In-memory module graph used by the dev server.
"""

from .module_graph import ModuleGraph, ModuleNode

__all__ = ["ModuleGraph", "ModuleNode"]
