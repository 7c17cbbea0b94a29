"""
Execution sandbox for transformed module code.

Transformed code refers to six injected bindings. The sandbox compiles the code
with top-level ``await`` allowed, runs it in a fresh namespace holding only
those bindings and the builtins, and awaits it when it suspends. Failures
propagate unchanged.
"""

import ast
import inspect
import builtins
import linecache
from typing import Any, Awaitable, Callable, Dict

SSR_GLOBAL_KEY = "__ssr_global__"
SSR_MODULE_EXPORTS_KEY = "__ssr_exports__"
SSR_IMPORT_META_KEY = "__ssr_import_meta__"
SSR_IMPORT_KEY = "__ssr_import__"
SSR_DYNAMIC_IMPORT_KEY = "__ssr_dynamic_import__"
SSR_EXPORT_ALL_KEY = "__ssr_export_all__"

BINDING_NAMES = (
    SSR_GLOBAL_KEY,
    SSR_MODULE_EXPORTS_KEY,
    SSR_IMPORT_META_KEY,
    SSR_IMPORT_KEY,
    SSR_DYNAMIC_IMPORT_KEY,
    SSR_EXPORT_ALL_KEY,
)

SANDBOX_FILENAME_PREFIX = "<ssr:"


def sandbox_filename(origin: str) -> str:
    """Filename tracebacks show for code compiled from ``origin``."""
    return f"{SANDBOX_FILENAME_PREFIX}{origin}>"


class ExecutionSandbox:
    """Compiles and runs transformed module code with the SSR bindings."""

    def compile(self, code: str, origin: str):
        filename = sandbox_filename(origin)
        source = f"{code}\n# sourceURL={origin}\n"
        linecache.cache[filename] = (
            len(source),
            None,
            source.splitlines(True),
            filename,
        )
        return compile(
            source,
            filename,
            "exec",
            flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT,
            dont_inherit=True,
        )

    async def run(
        self,
        code: str,
        origin: str,
        global_ctx: Dict[str, Any],
        exports: Any,
        import_meta: Any,
        ssr_import: Callable[[str], Awaitable[Any]],
        ssr_dynamic_import: Callable[[str], Awaitable[Any]],
        ssr_export_all: Callable[[Any], None],
    ) -> None:
        """
        Run compiled module code to completion.

        Args:
            code: Transformed source text
            origin: Module identifier, used as the trace origin
            global_ctx: Shared global context
            exports: Module object receiving the exports
            import_meta: Import metadata of the module
            ssr_import: Static dependency import function
            ssr_dynamic_import: Dynamic dependency import function
            ssr_export_all: Re-export function
        """
        compiled = self.compile(code, origin)
        namespace = dict(
            zip(
                BINDING_NAMES,
                (
                    global_ctx,
                    exports,
                    import_meta,
                    ssr_import,
                    ssr_dynamic_import,
                    ssr_export_all,
                ),
            )
        )
        namespace["__builtins__"] = builtins
        namespace["__name__"] = origin

        result = eval(compiled, namespace)
        if inspect.isawaitable(result):
            await result
