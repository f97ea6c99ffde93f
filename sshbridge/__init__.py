"""
sshbridge - SSH/SFTP bridge for automated clients

Exposes a fixed set of remote operations over MCP, each backed by its own
SSH login session:
- File upload and download (SFTP)
- Directory listing (SFTP)
- Shell command execution
"""

__version__ = "1.0.5"

from .core import (
    RemoteClient,
    Credentials,
    BridgeError,
    ConfigurationError,
    ConnectionError,
    LocalIoError,
    TransferError,
    InvalidArgument,
    RemoteExecError,
)

from .domain.operations import (
    Bridge,
    OperationExecutor,
    OperationResult,
    UploadRequest,
    DownloadRequest,
    ListRequest,
    ExecRequest,
    DirEntry,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "RemoteClient",
    "Credentials",
    # Errors
    "BridgeError",
    "ConfigurationError",
    "ConnectionError",
    "LocalIoError",
    "TransferError",
    "InvalidArgument",
    "RemoteExecError",
    # Operations
    "Bridge",
    "OperationExecutor",
    "OperationResult",
    "UploadRequest",
    "DownloadRequest",
    "ListRequest",
    "ExecRequest",
    "DirEntry",
]
