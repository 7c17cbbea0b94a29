"""
Project-level resolution of external module identifiers.

External packages are looked up in vendor directories found by walking up
from the importing file (or from the project root for deduped packages),
preferring plain source modules. When nothing is found and the options allow
it, the platform's own path finder is consulted.
"""

import os
import logging
from importlib.machinery import PathFinder
from typing import Optional

from ..utils.config import ResolveOptions

logger = logging.getLogger(__name__)


def _find_in_dir(directory: str, name: str, options: ResolveOptions) -> Optional[str]:
    package_dir = os.path.join(directory, name)
    if os.path.isdir(package_dir):
        for entry in options.main_fields:
            candidate = os.path.join(package_dir, entry)
            if os.path.isfile(candidate):
                return candidate

    for ext in options.extensions:
        candidate = os.path.join(directory, name + ext)
        if os.path.isfile(candidate):
            return candidate

    return None


def _search_roots(start: str):
    current = os.path.abspath(start)
    while True:
        yield current
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent


def _platform_find(name: str) -> Optional[str]:
    spec = PathFinder.find_spec(name)
    if spec is None:
        return None
    if spec.origin is None and spec.submodule_search_locations is not None:
        # Namespace package: it has no single location, the platform imports it by name.
        return name
    if not spec.origin or not os.path.isabs(spec.origin):
        return None
    return spec.origin


def try_resolve(
    id: str,
    importer: Optional[str],
    options: ResolveOptions,
    is_main: bool = False,
) -> Optional[str]:
    """
    Resolve an external identifier to the absolute location of its top-level
    package or module.

    Args:
        id: Dotted module name, e.g. ``requests`` or ``pkg.sub``
        importer: File of the importing module, if known
        options: Project resolution rules
        is_main: Whether the module is the main entry (unused for SSR loads)

    Returns:
        Absolute path of the package entry file or module file, the bare
        top-level name for a namespace package the platform imports by name,
        or None
    """
    name = id.split(".", 1)[0]
    if not name:
        return None

    if name in options.dedupe or not importer:
        start = options.root
    else:
        start = os.path.dirname(importer)

    resolved = None
    for directory in _search_roots(start):
        for vendor in options.vendor_dirs:
            resolved = _find_in_dir(os.path.join(directory, vendor), name, options)
            if resolved:
                break
        if resolved:
            break

    if resolved is None and options.platform_fallback:
        resolved = _platform_find(name)

    if resolved is None:
        logger.debug(f"Could not resolve '{id}' from '{importer}'")
        return None

    if not options.preserve_symlinks and os.path.isabs(resolved):
        resolved = os.path.realpath(resolved)

    return resolved
