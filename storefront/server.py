"""
StorefrontServer class for CLI control of the FastAPI application.
"""
import logging
import os
from typing import Optional

import uvicorn
from rich.logging import RichHandler

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from .app import create_app

logger = logging.getLogger(__name__)

DEBUG_LOG_FILE = "storefront_debug.log"


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    """Configure the root logger for the service

    Args:
        debug: Log at DEBUG level and append everything to a log file
        log_file: Debug log path (defaults to storefront_debug.log)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = RichHandler(rich_tracebacks=True, show_path=debug)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(message)s'))
    root_logger.addHandler(console_handler)

    if debug:
        log_file = os.path.abspath(log_file or DEBUG_LOG_FILE)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(file_handler)
        logger.info(f"Debug logging enabled - appending to {log_file}")


class StorefrontServer:
    """Server wrapper for CLI control"""

    def __init__(self, debug: bool = False, bind_address: Optional[str] = None, port: Optional[int] = None):
        self.server = None
        self.config = None
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT

        setup_logging(debug)
        # Build (and validate) the app before binding a socket
        self.app = create_app()

    def run(self):
        """Run the server (blocking)"""
        logger.info(f"Starting Storefront Customer Auth on http://{self.bind_address}:{self.port}")
        logger.info("Available endpoints: /api/auth/login, /api/auth/callback, /api/auth/logout, /api/auth/me")
        self.config = uvicorn.Config(
            self.app,
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else LOG_LEVEL,
            access_log=False  # Requests are logged by our middleware
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the server"""
        if self.server:
            self.server.should_exit = True
