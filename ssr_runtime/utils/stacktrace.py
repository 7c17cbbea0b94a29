"""
Stack trace rewriting for errors raised by SSR module code.
"""

import re
import logging
import traceback

from ..core.sandbox import SANDBOX_FILENAME_PREFIX

logger = logging.getLogger(__name__)

SANDBOX_FRAME_RE = re.compile(
    r'File "' + re.escape(SANDBOX_FILENAME_PREFIX) + r'(?P<url>[^"]*)>", line (?P<line>\d+)'
)


def format_stacktrace(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def ssr_rewrite_stacktrace(stack: str, module_graph) -> str:
    """
    Point sandbox frames of a formatted traceback at the original files.

    Args:
        stack: Formatted traceback text
        module_graph: Graph used to look up module records by url

    Returns:
        Traceback text with sandbox origins replaced by backing files and,
        where the compiled result carries a line map, original line numbers
    """

    def replace(match: re.Match) -> str:
        url = match.group("url")
        mod = module_graph.url_to_module_map.get(url)
        if mod is None:
            return match.group(0)

        line = int(match.group("line"))
        result = getattr(mod, "ssr_transform_result", None)
        line_map = getattr(result, "map", None)
        if line_map:
            line = line_map.get(line, line)

        return f'File "{mod.file or url}", line {line}'

    return SANDBOX_FRAME_RE.sub(replace, stack)


def rebind_error_stacktrace(error: BaseException, stacktrace: str) -> None:
    """Attach the rewritten trace to the error as ``ssr_stacktrace``."""
    try:
        error.ssr_stacktrace = stacktrace
    except (AttributeError, TypeError) as e:
        logger.debug(f"Could not rebind stack trace on {type(error).__name__}: {e}")
