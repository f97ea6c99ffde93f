"""
Bridge service - invocation boundary

One call = validate, connect, execute, close. Every classified failure is
returned as a failed OperationResult instead of propagating.
"""
import time
from pathlib import Path
from typing import Optional

from ...core.client import Credentials
from ...core.exceptions import BridgeError, LocalIoError
from ...core.interfaces import ConnectionFactory
from ...core.logging import get_logger
from .executor import OperationExecutor
from .models import (
    DownloadRequest,
    ExecRequest,
    ListRequest,
    OperationRequest,
    OperationResult,
    UploadRequest,
)

logger = get_logger(__name__)


class Bridge:
    """
    Bridge service - pure business logic.

    Holds the immutable credentials and opens a fresh session for every
    invocation. Nothing is shared between invocations.
    """

    def __init__(
        self,
        credentials: Credentials,
        connection_factory: ConnectionFactory,
        executor: Optional[OperationExecutor] = None,
    ):
        """
        Initialize bridge.

        Args:
            credentials: Connection credentials, reused by value for every call
            connection_factory: SSH connection factory
            executor: Operation executor (optional, creates default if None)
        """
        self.credentials = credentials
        self.connection_factory = connection_factory
        self.executor = executor or OperationExecutor()

    def invoke(self, request: OperationRequest) -> OperationResult:
        """
        Run one request in its own session.

        Args:
            request: Typed operation request

        Returns:
            OperationResult carrying either the payload or the classified error
        """
        operation = request.operation
        started = time.monotonic()

        try:
            # Rejected arguments never open a connection
            request.validate()
            session = self.connection_factory.create(self.credentials)
            payload = self.executor.execute(session, request)
        except BridgeError as e:
            logger.warning(
                "%s failed after %.2fs: %s: %s",
                operation.value, time.monotonic() - started, e.kind, e.message,
            )
            return OperationResult(operation=operation, error=e)

        logger.info("%s succeeded in %.2fs", operation.value, time.monotonic() - started)
        return OperationResult(operation=operation, payload=payload)

    # ============================================================
    # Convenience wrappers
    # ============================================================

    def upload(self, local_path: str, remote_path: str) -> OperationResult:
        return self.invoke(UploadRequest(local_path=local_path, remote_path=remote_path))

    def download(self, remote_path: str, local_path: str) -> OperationResult:
        return self.invoke(DownloadRequest(remote_path=remote_path, local_path=local_path))

    def list_dir(self, remote_path: str) -> OperationResult:
        return self.invoke(ListRequest(remote_path=remote_path))

    def exec(self, command: str) -> OperationResult:
        return self.invoke(ExecRequest(command=command))


def persist_download(data: bytes, local_path: str) -> Path:
    """
    Write a downloaded buffer to disk.

    Args:
        data: Bytes returned by a download
        local_path: Destination path (parent directory must exist)

    Returns:
        Destination path

    Raises:
        LocalIoError: If the file cannot be written
    """
    path = Path(local_path)
    try:
        path.write_bytes(data)
    except (OSError, ValueError) as e:
        raise LocalIoError(f"Cannot write {local_path}: {e}") from e
    return path
