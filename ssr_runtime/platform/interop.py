"""
Default-export interop for externally loaded modules.

External modules come in two shapes: declarative-export modules expose a
``default`` member, dynamic-require modules are plain runtime objects that act
as their own default. Transpiled declarative-export modules loaded through the
dynamic-require path carry an ``__esModule`` marker and nest their real default
one level deeper.
"""

from collections.abc import Mapping
from typing import Any, Iterator, List

from ..core.module import ES_MODULE_FLAG

DEFAULT_KEY = "default"

_MISSING = object()


def _has(value: Any, key: str) -> bool:
    if isinstance(value, Mapping) and key in value:
        return True
    return hasattr(value, key)


def read_member(value: Any, key: str, default: Any = None) -> Any:
    if isinstance(value, Mapping):
        found = value.get(key, _MISSING)
        if found is not _MISSING:
            return found
    return getattr(value, key, default)


def public_keys(value: Any) -> List[str]:
    if isinstance(value, Mapping):
        return list(value.keys())
    exported = getattr(value, "__all__", None)
    if exported is not None:
        return list(exported)
    return [key for key in getattr(value, "__dict__", {}) if not key.startswith("_")]


def get_default_export(module_exports: Any) -> Any:
    """
    Compute the default export of a loaded module.

    Args:
        module_exports: Value returned by the platform's native loader

    Returns:
        The module's ``default`` member when present, otherwise the module
        itself, unwrapped once more if it is an ``__esModule`` wrapper
    """
    if _has(module_exports, DEFAULT_KEY):
        default_export = read_member(module_exports, DEFAULT_KEY)
    else:
        default_export = module_exports

    if default_export is not None and _has(default_export, ES_MODULE_FLAG):
        default_export = read_member(default_export, DEFAULT_KEY)

    return default_export


class InteropModule(Mapping):
    """
    Read-only view over a loaded external module.

    ``default`` yields the computed default export; any other key is read from
    the live module first and from the computed default when the module does
    not have it (or has it set to None). Both subscript and attribute access
    are supported. The underlying module is never modified.
    """

    def __init__(self, module: Any):
        object.__setattr__(self, "_module", module)
        object.__setattr__(self, "_default", get_default_export(module))

    @property
    def module(self) -> Any:
        return self._module

    def _lookup(self, key: str) -> Any:
        if key == DEFAULT_KEY:
            return self._default
        value = read_member(self._module, key)
        if value is None and self._default is not None:
            value = read_member(self._default, key)
        return value

    def __getitem__(self, key: str) -> Any:
        return self._lookup(key)

    def __getattr__(self, key: str) -> Any:
        if key.startswith("__") and key.endswith("__"):
            raise AttributeError(key)
        return self._lookup(key)

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"Cannot assign '{key}' on an interop module view")

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key == DEFAULT_KEY or _has(self._module, key)

    def __iter__(self) -> Iterator[str]:
        return iter(public_keys(self._module))

    def __len__(self) -> int:
        return len(public_keys(self._module))

    def __repr__(self) -> str:
        return f"<InteropModule of {self._module!r}>"


def proxy_module(module: Any) -> InteropModule:
    """Wrap a loaded external module in the default-export interop view."""
    return InteropModule(module)
