"""
Rich-based logging

Logs always go to stderr: when the bridge runs as an MCP stdio server,
stdout carries the protocol stream.
"""
import logging
from typing import Optional
from pathlib import Path

from rich.logging import RichHandler
from rich.console import Console
from rich.traceback import install as install_traceback


_stdout_console = Console()
_stderr_console = Console(stderr=True)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rich_tracebacks: bool = True,
) -> None:
    """Route the root logger to stderr, plus ``log_file`` when given."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Locals stay hidden, they may hold credentials
    if rich_tracebacks:
        install_traceback(console=_stderr_console, show_locals=False, width=120)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # markup off: remote paths and stderr text may contain [brackets]
    rich_handler = RichHandler(
        console=_stderr_console,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    rich_handler.setLevel(log_level)
    root_logger.addHandler(rich_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        root_logger.addHandler(file_handler)

    # paramiko is chatty at INFO (every transport start/stop)
    logging.getLogger("paramiko").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_stdout_console() -> Console:
    """Console for command results"""
    return _stdout_console


def get_stderr_console() -> Console:
    """Console for errors and logs"""
    return _stderr_console
