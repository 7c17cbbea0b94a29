"""
Server configuration for the SSR runtime.

This module provides environment variable-based configuration for the dev
server and the project-level resolution rules applied to external imports.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ResolveOptions:
    """
    Project-level resolution rules for external (platform) imports.

    Source extensions and package entry files are listed so that plain source
    modules are preferred over anything the platform would otherwise pick.
    """

    root: str
    dedupe: Tuple[str, ...] = ()
    preserve_symlinks: bool = False
    is_production: bool = False
    is_require: bool = True
    platform_fallback: bool = False
    extensions: Tuple[str, ...] = (".py",)
    main_fields: Tuple[str, ...] = ("__init__.py",)
    vendor_dirs: Tuple[str, ...] = ("__pypackages__",)


@dataclass
class ServerConfig:
    """
    Configuration for the development server hosting the SSR runtime.

    Attributes:
        root: Absolute project root; project identifiers are relative to it
        is_production: Production mode flag forwarded to resolution
        dedupe: Package names always resolved from the project root
        preserve_symlinks: Keep symlinked paths instead of their real location
        clear_screen: Clear the terminal before reporting evaluation errors
        vendor_dirs: Directory names searched upward for external packages
        log_level: Logging level name
    """

    root: str = field(default_factory=os.getcwd)
    is_production: bool = False
    dedupe: Tuple[str, ...] = ()
    preserve_symlinks: bool = False
    clear_screen: bool = True
    vendor_dirs: Tuple[str, ...] = ("__pypackages__",)
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not os.path.isabs(self.root):
            logger.warning(f"Project root should be absolute, got {self.root}")
            self.root = os.path.abspath(self.root)

        self.dedupe = tuple(self.dedupe)
        self.vendor_dirs = tuple(self.vendor_dirs)
        self.log_level = self.log_level.upper()

        logger.debug(
            f"Server config initialized: root={self.root}, "
            f"production={self.is_production}, dedupe={list(self.dedupe)}"
        )

    def resolve_options(self) -> ResolveOptions:
        """Build the resolution rules used for external imports."""
        return ResolveOptions(
            root=self.root,
            dedupe=self.dedupe,
            preserve_symlinks=self.preserve_symlinks,
            is_production=self.is_production,
            vendor_dirs=self.vendor_dirs,
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {name}: {raw!r}, using {default}")
    return default


def _env_list(name: str, default: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_server_config() -> ServerConfig:
    """
    Load server configuration from environment variables with fallback defaults.

    Environment Variables:
        SSR_ROOT: Project root directory (default: current directory)
        SSR_IS_PRODUCTION: Production mode (default: false)
        SSR_DEDUPE: Comma separated package names to dedupe (default: none)
        SSR_PRESERVE_SYMLINKS: Preserve symlinked paths (default: false)
        SSR_CLEAR_SCREEN: Clear screen before error reports (default: true)
        SSR_VENDOR_DIRS: Comma separated vendor directory names (default: __pypackages__)
        LOG_LEVEL: Logging level (default: INFO)

    Returns:
        ServerConfig: Configured server parameters
    """
    load_dotenv()

    config = ServerConfig(
        root=os.getenv("SSR_ROOT") or os.getcwd(),
        is_production=_env_bool("SSR_IS_PRODUCTION", False),
        dedupe=_env_list("SSR_DEDUPE"),
        preserve_symlinks=_env_bool("SSR_PRESERVE_SYMLINKS", False),
        clear_screen=_env_bool("SSR_CLEAR_SCREEN", True),
        vendor_dirs=_env_list("SSR_VENDOR_DIRS", ("__pypackages__",)),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    logger.info(
        f"Loaded server configuration: root={config.root}, "
        f"production={config.is_production}, clear_screen={config.clear_screen}"
    )

    return config


# Global configuration instance
_server_config: Optional[ServerConfig] = None


def get_server_config() -> ServerConfig:
    """
    Get global server configuration instance (singleton pattern).

    Returns:
        ServerConfig: Global configuration instance
    """
    global _server_config
    if _server_config is None:
        _server_config = load_server_config()
    return _server_config


def reset_server_config():
    """Reset the global server configuration. Useful for testing."""
    global _server_config
    _server_config = None
    logger.debug("Server configuration reset")
