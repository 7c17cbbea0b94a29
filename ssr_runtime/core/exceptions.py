"""
Custom exceptions for SSR module instantiation.

This module defines the errors surfaced to callers of the module loader.
Evaluation failures are not wrapped: the original exception raised by the
module's code is re-raised with a rewritten stack trace attached.
"""


class SSRError(Exception):
    """Base exception for all SSR runtime errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransformUnavailableError(SSRError):
    """Raised when no compiled result could be produced for a module."""

    def __init__(self, url: str, details: dict = None):
        super().__init__(f"failed to load module for ssr: {url}", details)
        self.url = url


class ModuleNotFoundForImporterError(SSRError, ModuleNotFoundError):
    """Raised when an external identifier cannot be resolved."""

    code = "ERR_MODULE_NOT_FOUND"

    def __init__(self, id: str, importer: str = None):
        message = f"Cannot find module '{id}' imported from '{importer}'"
        SSRError.__init__(self, message, {"id": id, "importer": importer})
        self.name = id
        self.id = id
        self.importer = importer


class FrozenModuleError(SSRError, TypeError):
    """Raised when writing to a module object after its evaluation finished."""

    def __init__(self, key: str):
        super().__init__(f"Cannot modify export '{key}' of a frozen module")
        self.key = key


RESOLUTION_ERRORS = (ModuleNotFoundForImporterError,)
LOAD_ERRORS = (TransformUnavailableError,)


def categorize_exception(exception: BaseException) -> str:
    """
    Categorize an exception for error reporting.

    Args:
        exception: The exception to categorize

    Returns:
        Category name as string
    """
    if isinstance(exception, RESOLUTION_ERRORS):
        return "resolution"
    elif isinstance(exception, LOAD_ERRORS):
        return "transform"
    elif isinstance(exception, FrozenModuleError):
        return "frozen_module"
    elif isinstance(exception, SSRError):
        return "ssr"
    else:
        return "evaluation"


def format_error_details(exception: BaseException) -> dict:
    """
    Format exception details for structured error reporting.

    Args:
        exception: Any exception raised while loading a module

    Returns:
        Dictionary with formatted error details
    """
    details = {
        "error_type": exception.__class__.__name__,
        "message": getattr(exception, "message", str(exception)),
        "category": categorize_exception(exception),
    }

    if getattr(exception, "url", None):
        details["url"] = exception.url
    if getattr(exception, "code", None):
        details["code"] = exception.code
    if getattr(exception, "importer", None):
        details["importer"] = exception.importer
    if getattr(exception, "details", None):
        details["additional_details"] = exception.details

    return details
