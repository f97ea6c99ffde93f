"""
Core infrastructure layer
"""
from .client import RemoteClient, Credentials, ExecOutput, load_private_key
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import ConnectionFactory

__all__ = [
    "RemoteClient",
    "Credentials",
    "ExecOutput",
    "load_private_key",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "ConnectionFactory",
    "BridgeError",
    "ConfigurationError",
    "ConnectionError",
    "LocalIoError",
    "TransferError",
    "InvalidArgument",
    "RemoteExecError",
]
