"""Centralized logging configuration.

Diagnostics go to stderr so the transcript on stdout stays clean.

Usage at the entry point:
    from .logging_config import setup_process_logging
    setup_process_logging("nix-cli")

Then in any module:
    from .logging_config import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit."""

    def emit(self, record):
        super().emit(record)
        self.flush()


def setup_process_logging(
    process_name: str,
    level: int = logging.WARNING,
    console: bool = True,
) -> logging.Logger:
    """
    Set up logging for the process. Call this ONCE at the entry point.

    Args:
        process_name: Process identifier, shown in every line
        level: Minimum log level (default WARNING)
        console: Whether to log to stderr

    Returns:
        Root logger for this process
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if console:
        # Format: [HH:MM:SS] [process] [LEVEL] module: message
        handler = FlushingStreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                fmt=f"[%(asctime)s] [{process_name}] [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module. Call at module level: logger = get_logger(__name__)

    Loggers created before setup_process_logging() pick up its handlers
    once it runs.
    """
    return logging.getLogger(name)
