"""
Remote operations domain
"""
from .models import (
    Operation,
    UploadRequest,
    DownloadRequest,
    ListRequest,
    ExecRequest,
    OperationRequest,
    DirEntry,
    OperationResult,
)
from .executor import OperationExecutor
from .service import Bridge, persist_download

__all__ = [
    "Operation",
    "UploadRequest",
    "DownloadRequest",
    "ListRequest",
    "ExecRequest",
    "OperationRequest",
    "DirEntry",
    "OperationResult",
    "OperationExecutor",
    "Bridge",
    "persist_download",
]
