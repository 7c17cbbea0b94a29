"""
Primitives over the platform's native import machinery.

``hook_import_resolve`` temporarily places a finder in front of
``sys.meta_path`` so that top-level imports made while an external module
loads go through project resolution rules. The finder only answers imports
made on the thread that installed it. ``dynamic_import`` is the native load
primitive; it runs module code and blocks the calling thread.
"""

import os
import sys
import logging
import threading
import importlib
import importlib.util
from importlib.abc import MetaPathFinder
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# (id, parent_file, is_main, options) -> location, id, or None
ResolveFn = Callable[[str, Optional[str], bool, Any], Optional[str]]
HookFactory = Callable[[ResolveFn], ResolveFn]


def _default_resolve(
    id: str, parent: Optional[str], is_main: bool, options: Any
) -> Optional[str]:
    # None hands the request to the remaining finders on sys.meta_path.
    return None


def _is_import_machinery(frame) -> bool:
    module_name = frame.f_globals.get("__name__", "")
    return (
        frame.f_code.co_filename.startswith("<frozen importlib")
        or module_name == "importlib"
        or module_name.startswith("importlib.")
    )


def _find_importer() -> Optional[str]:
    """Return the file of the module executing the current import statement."""
    frame = sys._getframe(1)
    while frame is not None and (
        _is_import_machinery(frame) or frame.f_code.co_name == "find_spec"
    ):
        frame = frame.f_back
    if frame is None or frame.f_globals.get("__name__") == __name__:
        # Imported directly by dynamic_import, there is no parent module.
        return None
    return frame.f_globals.get("__file__")


def _spec_from_location(fullname: str, location: str):
    submodule_search_locations = None
    if os.path.basename(location).startswith("__init__."):
        submodule_search_locations = [os.path.dirname(location)]
    return importlib.util.spec_from_file_location(
        fullname, location, submodule_search_locations=submodule_search_locations
    )


class ResolveHookFinder(MetaPathFinder):
    """Meta path finder delegating top-level imports to a resolve function."""

    def __init__(self, resolve: ResolveFn, thread_id: Optional[int] = None):
        self.resolve = resolve
        self.thread_id = thread_id

    def find_spec(self, fullname, path, target=None):
        if self.thread_id is not None and threading.get_ident() != self.thread_id:
            return None
        if path is not None:
            # Submodules resolve through their parent package's __path__.
            return None

        parent = _find_importer()
        location = self.resolve(fullname, parent, False, None)
        if not location or location == fullname or not os.path.isabs(location):
            return None

        logger.debug(f"Hooked resolution of '{fullname}' from '{parent}' -> {location}")
        return _spec_from_location(fullname, location)


def hook_import_resolve(get_resolver: HookFactory) -> Callable[[], None]:
    """
    Install a temporary resolution override.

    Args:
        get_resolver: Receives the platform's default resolve function and
            returns the overriding resolve function. Only imports made on the
            calling thread are overridden.

    Returns:
        Function removing the override; safe to call more than once
    """
    finder = ResolveHookFinder(get_resolver(_default_resolve), threading.get_ident())
    sys.meta_path.insert(0, finder)

    def unhook() -> None:
        try:
            sys.meta_path.remove(finder)
        except ValueError:
            pass

    return unhook


def dynamic_import(target: str, name: Optional[str] = None) -> Any:
    """
    Load a module through the platform's native loader.

    Args:
        target: Absolute file location, or a dotted module name
        name: Module name to register a file location under

    Returns:
        The loaded module object
    """
    if not os.path.isabs(target):
        return importlib.import_module(target)

    name = name or os.path.splitext(os.path.basename(target))[0]
    cached = sys.modules.get(name)
    if cached is not None and getattr(cached, "__file__", None) == target:
        return cached

    spec = _spec_from_location(name, target)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module '{name}' from {target}", name=name)

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def snapshot_modules() -> Dict[str, Any]:
    return dict(sys.modules)


def restore_displaced(snapshot: Dict[str, Any]) -> List[str]:
    """
    Put back ``sys.modules`` entries that a load replaced.

    Modules registered for names that were free before the load are kept.

    Args:
        snapshot: ``sys.modules`` as returned by ``snapshot_modules``

    Returns:
        Names whose previous module was restored
    """
    restored = []
    for name, previous in snapshot.items():
        current = sys.modules.get(name)
        if current is not previous:
            sys.modules[name] = previous
            restored.append(name)
    return restored
