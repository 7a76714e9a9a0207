"""Shared utilities package for x-publisher"""

from .storage import TokenStorage
from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "TokenStorage",
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
]
