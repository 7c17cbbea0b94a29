"""
Module identifier helpers.
"""

import sys
import posixpath
from importlib.machinery import EXTENSION_SUFFIXES

VALID_ID_PREFIX = "/@id/"
NULL_BYTE_PLACEHOLDER = "__x00__"


def unwrap_id(id: str) -> str:
    """
    Canonicalize a module identifier.

    Virtual ids travel through URLs with a ``/@id/`` prefix and a placeholder
    in place of the null byte; both are removed here.

    Args:
        id: Raw module identifier

    Returns:
        Canonical module identifier
    """
    if id.startswith(VALID_ID_PREFIX):
        id = id[len(VALID_ID_PREFIX) :].replace(NULL_BYTE_PLACEHOLDER, "\0")
    return id


def is_builtin(id: str) -> bool:
    """Check whether ``id`` names a module shipped with the interpreter."""
    top_level = id.split(".", 1)[0]
    if top_level in sys.builtin_module_names:
        return True
    return top_level in getattr(sys, "stdlib_module_names", ())


def is_project_path(id: str) -> bool:
    """Project modules are referenced by relative or absolute path."""
    return id.startswith((".", "/"))


def has_native_extension(id: str) -> bool:
    """Native extension files can only be loaded by the platform's own finder."""
    return any(id.endswith(suffix) for suffix in EXTENSION_SUFFIXES)


def resolve_relative(importer_url: str, dep: str) -> str:
    """
    Resolve a relative dependency against the importing module's url.

    Args:
        importer_url: Identifier of the importing module, e.g. ``/src/a.py``
        dep: Relative dependency, e.g. ``./x``

    Returns:
        Normalized posix identifier, e.g. ``/src/x``
    """
    base = posixpath.dirname(importer_url) or "/"
    return posixpath.normpath(posixpath.join(base, dep))


def strip_native_extension(id: str) -> str:
    """Drop a native extension suffix, e.g. ``speedups.abi3.so`` -> ``speedups``."""
    for suffix in sorted(EXTENSION_SUFFIXES, key=len, reverse=True):
        if id.endswith(suffix):
            return id[: -len(suffix)]
    return id
