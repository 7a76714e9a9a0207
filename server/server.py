"""
PublisherServer class for CLI control of the FastAPI application.
"""
import logging
import os
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from utils.debug_console import DEBUG_LOG_FILE, setup_debug_logger
from .app import app

logger = logging.getLogger(__name__)


def setup_debug_logging(log_file: str = DEBUG_LOG_FILE) -> logging.Logger:
    """Send every log record to a debug file and the console

    Returns:
        Logger that captures rich console output into the same file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_path = os.path.abspath(log_file)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # httpx logs full request URLs at INFO, including query strings
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(f"Debug logging enabled - appending to {log_path}")
    return setup_debug_logger(log_path)


class PublisherServer:
    """uvicorn wrapper for CLI control"""

    def __init__(self, debug: bool = False, bind_address: Optional[str] = None,
                 port: Optional[int] = None):
        self.server = None
        self.config = None
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT

        if debug:
            setup_debug_logging()

    def run(self):
        """Run the server (blocking)"""
        logger.info(f"Starting X Post Publisher on http://{self.bind_address}:{self.port}")
        logger.info("Available endpoints: /health, /api/x/auth/*, /api/x/user, /api/x/post")
        self.config = uvicorn.Config(
            app,
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else LOG_LEVEL,
            access_log=False  # Request middleware already logs /api/ calls
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the server"""
        if self.server:
            self.server.should_exit = True
