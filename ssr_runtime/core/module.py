"""
Module object produced by SSR instantiation.

A module object is created empty and attached to its record before the
module's code runs, so circular consumers can hold a reference to it while it
is still being populated. Once evaluation succeeds it is frozen.
"""

from collections.abc import MutableMapping
from typing import Any, Callable, Dict, Iterator

from .exceptions import FrozenModuleError

ES_MODULE_FLAG = "__esModule"


class SSRModule(MutableMapping):
    """
    Mapping from export name to value, marked as a module.

    Exports are either plain values or live accessors installed by
    ``define_getter``; an accessor re-reads its source on every access.
    """

    kind = "Module"

    def __init__(self):
        self._exports: Dict[str, Any] = {}
        self._getters: Dict[str, Callable[[], Any]] = {}
        self._order: Dict[str, None] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """Whether the defining module finished evaluating."""
        return self._frozen

    def freeze(self) -> "SSRModule":
        self._frozen = True
        return self

    def _check_writable(self, key: str) -> None:
        if self._frozen:
            raise FrozenModuleError(key)

    def define_getter(self, key: str, getter: Callable[[], Any]) -> None:
        """Install a live accessor for ``key``, replacing any plain value."""
        self._check_writable(key)
        self._exports.pop(key, None)
        self._getters[key] = getter
        self._order[key] = None

    def __getitem__(self, key: str) -> Any:
        getter = self._getters.get(key)
        if getter is not None:
            return getter()
        return self._exports[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_writable(key)
        self._getters.pop(key, None)
        self._exports[key] = value
        self._order[key] = None

    def __delitem__(self, key: str) -> None:
        self._check_writable(key)
        if key not in self._order:
            raise KeyError(key)
        self._getters.pop(key, None)
        self._exports.pop(key, None)
        del self._order[key]

    def __contains__(self, key: object) -> bool:
        return key in self._order

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._order))

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "pending"
        return f"<SSRModule [{state}] exports={list(self._order)}>"


# Attribute names starting with two underscores would be mangled inside the
# class body, so the interop flag is attached afterwards.
setattr(SSRModule, ES_MODULE_FLAG, True)
