"""
On-demand module instantiation runtime for server-side rendering.

Given a module identifier, produces a live, fully-evaluated module object while
handling concurrent requests, circular dependency chains and default-export
interop for externally loaded modules.
"""

from .core.context import DevServer, SSRContext, create_dev_server
from .core.exceptions import (
    SSRError,
    TransformUnavailableError,
    ModuleNotFoundForImporterError,
    FrozenModuleError,
)
from .core.module import SSRModule
from .core.module_loader import SSRModuleLoader

__all__ = [
    "DevServer",
    "SSRContext",
    "create_dev_server",
    "SSRError",
    "TransformUnavailableError",
    "ModuleNotFoundForImporterError",
    "FrozenModuleError",
    "SSRModule",
    "SSRModuleLoader",
]
