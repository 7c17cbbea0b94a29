"""
Utility modules for the SSR runtime.
"""

from .ids import unwrap_id, is_builtin, is_project_path, resolve_relative
from .config import ServerConfig, get_server_config, reset_server_config
from .logger import SSRLogger

__all__ = [
    "unwrap_id",
    "is_builtin",
    "is_project_path",
    "resolve_relative",
    "ServerConfig",
    "get_server_config",
    "reset_server_config",
    "SSRLogger",
]
