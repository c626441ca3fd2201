import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER_NAME = "bulkstream"


def setup_sdk_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Configures the logging output of the `bulkstream` package.

    The package only installs a `NullHandler` on import, so nothing is printed
    until this function is called. Two output modes are available: a 'pretty'
    mode rendered through Rich, and a plain stream mode for log collectors and
    non-interactive environments. Existing handlers are cleared, so calling this
    function more than once never duplicates log entries.

    Args:
        level (str): The logging threshold (e.g., "DEBUG", "INFO", "WARNING").
            Defaults to "INFO".
        pretty (bool): If True, log records are rendered by a `RichHandler`
            with colors, timestamps and formatted tracebacks.
        console (Optional[rich.console.Console]): Console used by the Rich
            handler. Defaults to a new `Console(stderr=True)`.
        propagate (bool): Whether records bubble up to the root logger.
            Disabled by default to avoid duplicate output in test runners.
    """
    logger = root_logging.getLogger(_ROOT_LOGGER_NAME)

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        logger.handlers.clear()

    if pretty:
        console = console or Console(stderr=True)

        handler = RichHandler(
            level=level,
            console=console,
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        formatter = root_logging.Formatter(
            fmt="[dim white]%(name)s[/dim white]: %(message)s", datefmt="[%X]"
        )
        handler.setFormatter(formatter)
        init_message = f"Logging initialized at level: [bold]{level}[/bold]"
        extra = {"markup": True}
    else:
        handler = root_logging.StreamHandler(sys.stderr)
        # Time [Level] Name: Message
        formatter = root_logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        init_message = f"Logging initialized at level: {level}"
        extra = {}

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.info(init_message, extra=extra)


def get_logger(name: Optional[str] = None) -> root_logging.Logger:
    """
    Retrieves a logger within the `bulkstream` namespace.

    Args:
        name (Optional[str]): Usually `__name__` of the calling module
            (e.g., 'bulkstream.handlers.bulk_index_writer'). If None, the
            top-level package logger is returned.

    Returns:
        logging.Logger: The requested logger.
    """
    if name is not None:
        return root_logging.getLogger(name=name)
    return root_logging.getLogger(_ROOT_LOGGER_NAME)
