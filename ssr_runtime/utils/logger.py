"""
Logging collaborator used to report module evaluation failures.
"""

import sys
import time
import logging
from typing import Optional

CLEAR_SCREEN_SEQUENCE = "\033[2J\033[3J\033[H"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for command line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class SSRLogger:
    """
    Thin wrapper over the standard logger that understands dev-server metadata.

    The ``timestamp`` flag prefixes the message with the wall clock time, the
    ``clear`` flag clears an interactive terminal before the message and the
    ``error`` value is attached to the record as structured metadata.
    """

    def __init__(self, name: str = "ssr_runtime", stream=None):
        self.logger = logging.getLogger(name)
        self.stream = stream if stream is not None else sys.stderr

    def _format(self, msg: str, timestamp: bool) -> str:
        if timestamp:
            return f"{time.strftime('%H:%M:%S')} [ssr] {msg}"
        return msg

    def _clear(self) -> None:
        isatty = getattr(self.stream, "isatty", None)
        if isatty is not None and isatty():
            self.stream.write(CLEAR_SCREEN_SEQUENCE)
            self.stream.flush()

    def _log(
        self,
        level: int,
        msg: str,
        timestamp: bool,
        clear: bool,
        error: Optional[BaseException],
    ) -> None:
        if clear:
            self._clear()
        self.logger.log(
            level, self._format(msg, timestamp), extra={"ssr_error": error}
        )

    def error(
        self,
        msg: str,
        *,
        timestamp: bool = False,
        clear: bool = False,
        error: Optional[BaseException] = None,
    ) -> None:
        self._log(logging.ERROR, msg, timestamp, clear, error)

    def warn(self, msg: str, *, timestamp: bool = False, clear: bool = False) -> None:
        self._log(logging.WARNING, msg, timestamp, clear, None)

    def info(self, msg: str, *, timestamp: bool = False, clear: bool = False) -> None:
        self._log(logging.INFO, msg, timestamp, clear, None)
