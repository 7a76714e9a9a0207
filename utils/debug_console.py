"""Rich console that mirrors CLI output into the debug log.

With ``--debug`` the CLI prints through DebugCapturingConsole, so the debug
log file reads as one timeline: server/core log records interleaved with
what the user saw in the terminal.
"""

import io
import logging
import re
from typing import Optional

from rich.console import Console as RichConsole

DEBUG_LOG_FILE = "x_publisher_debug.log"

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class DebugCapturingConsole(RichConsole):
    """Rich Console that also writes a plain text copy of output to a logger"""

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self.render_plain(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"[CONSOLE] {plain_text}")

    def render_plain(self, *objects, **kwargs) -> str:
        """Render objects the way print would, minus markup and ANSI codes"""
        buffer = io.StringIO()
        RichConsole(file=buffer, force_terminal=False, width=self.width).print(*objects, **kwargs)
        return ANSI_ESCAPE.sub("", buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """Capturing console in debug mode, plain Rich console otherwise"""
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str = DEBUG_LOG_FILE) -> logging.Logger:
    """Dedicated, non-propagating logger that appends console output to log_file"""
    logger = logging.getLogger("debug_console")
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
    logger.addHandler(file_handler)

    # Root logger may write to the same file
    logger.propagate = False
    return logger
