"""Logging setup for Groot.

Console logging goes through rich's RichHandler on stderr; file logging is
optional and always records DEBUG and above.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

# Log records go to stderr so they never mix with command output
console = Console(stderr=True)


def setup_logging(
    is_verbose: bool = False,
    log_to_console: bool = True,
    log_file_path: Optional[Union[Path, str]] = None,
) -> None:
    """Set up logging configuration.

    Args:
        is_verbose: Enable DEBUG logging on the console (default WARNING)
        log_to_console: Whether to log to the console
        log_file_path: Optional path to a log file. If None, no file logging.
    """
    log_level = logging.DEBUG if is_verbose else logging.WARNING

    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicate logs if called multiple times
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if log_to_console:
        console_handler = RichHandler(
            console=console,
            level=log_level,
            rich_tracebacks=True,
            show_time=is_verbose,
            show_path=is_verbose,
        )
        root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler_path = Path(log_file_path)
        file_handler_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
        ))
        root_logger.addHandler(file_handler)

    # The root level must admit everything any handler wants to record
    root_logger.setLevel(logging.DEBUG if (is_verbose or log_file_path) else log_level)
    logging.getLogger(__name__).debug("Logging configured (verbose=%s)", is_verbose)
