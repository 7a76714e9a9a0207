"""Debug console setup for CLI"""

from rich.console import Console
from server.server import setup_debug_logging
from utils.debug_console import create_debug_console


def setup_debug_console(debug: bool) -> Console:
    """
    Create the CLI console, capturing its output to the debug log in debug mode

    Args:
        debug: Whether debug mode is enabled

    Returns:
        Console instance (either regular or debug-enabled)
    """
    if not debug:
        return Console()

    debug_logger = setup_debug_logging()
    console = create_debug_console(debug_enabled=True, debug_logger=debug_logger)
    debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
    return console
