"""
Loading of external (platform) modules for the SSR runtime.
"""

from .bridge import PlatformBridge
from .interop import InteropModule, get_default_export, proxy_module

__all__ = ["PlatformBridge", "InteropModule", "get_default_export", "proxy_module"]
