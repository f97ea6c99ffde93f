"""
Operation executor

Runs exactly one request over a live session and closes the session on
every exit path.
"""
from pathlib import Path
from typing import Callable, Dict, List

import paramiko

from ...core.client import RemoteClient
from ...core.constants import DOWNLOAD_CHUNK_SIZE, TEXT_ENCODING
from ...core.exceptions import (
    ConnectionError,
    LocalIoError,
    RemoteExecError,
    TransferError,
)
from ...core.logging import get_logger
from .models import (
    DirEntry,
    DownloadRequest,
    ExecRequest,
    ListRequest,
    Operation,
    OperationRequest,
    Payload,
    UploadRequest,
)

logger = get_logger(__name__)

# What paramiko raises when an SFTP request fails or the channel drops
SFTP_ERRORS = (OSError, EOFError, paramiko.SSHException)


class OperationExecutor:
    """Dispatch a typed request to its handler"""

    def __init__(self):
        self._handlers: Dict[Operation, Callable[[RemoteClient, OperationRequest], Payload]] = {
            Operation.UPLOAD: self.upload,
            Operation.DOWNLOAD: self.download,
            Operation.LIST: self.list_dir,
            Operation.EXEC: self.exec,
        }

    def execute(self, session: RemoteClient, request: OperationRequest) -> Payload:
        """
        Execute a request and consume the session.

        Args:
            session: Connected RemoteClient (closed before this returns)
            request: Validated operation request

        Returns:
            Operation payload (text, bytes or directory entries)

        Raises:
            BridgeError: Classified failure of the operation
        """
        with session:
            if not session.is_connected:
                raise ConnectionError("Session is not connected")
            handler = self._handlers[request.operation]
            logger.debug("Running %s on %s", request.operation.value, session.credentials.target)
            return handler(session, request)

    # ============================================================
    # File transfer
    # ============================================================

    def upload(self, session: RemoteClient, request: UploadRequest) -> str:
        try:
            data = Path(request.local_path).read_bytes()
        except (OSError, ValueError) as e:
            raise LocalIoError(f"Cannot read {request.local_path}: {e}") from e

        sftp = self._open_sftp(session)
        try:
            # Closing the handle waits for the server to acknowledge the writes
            with sftp.open(request.remote_path, "wb") as remote_file:
                remote_file.set_pipelined(True)
                remote_file.write(data)
        except SFTP_ERRORS as e:
            raise TransferError(f"Upload to {request.remote_path} failed: {e}") from e

        logger.info("Uploaded %d bytes to %s", len(data), request.remote_path)
        return f"File uploaded to {request.remote_path}"

    def download(self, session: RemoteClient, request: DownloadRequest) -> bytes:
        """Read the whole remote file; persisting it is the caller's job"""
        sftp = self._open_sftp(session)
        chunks: List[bytes] = []
        try:
            with sftp.open(request.remote_path, "rb") as remote_file:
                remote_file.prefetch()
                while True:
                    chunk = remote_file.read(DOWNLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
        except SFTP_ERRORS as e:
            raise TransferError(f"Download of {request.remote_path} failed: {e}") from e

        data = b"".join(chunks)
        logger.info("Downloaded %d bytes from %s", len(data), request.remote_path)
        return data

    def list_dir(self, session: RemoteClient, request: ListRequest) -> List[DirEntry]:
        """Entries in server order, unsorted and unfiltered"""
        sftp = self._open_sftp(session)
        try:
            attrs = sftp.listdir_attr(request.remote_path)
        except SFTP_ERRORS as e:
            raise TransferError(f"List error: {e}") from e

        return [DirEntry(filename=a.filename, longname=a.longname or "") for a in attrs]

    @staticmethod
    def _open_sftp(session: RemoteClient) -> paramiko.SFTPClient:
        try:
            return session.open_sftp()
        except Exception as e:
            raise TransferError(f"SFTP error: {e}") from e

    # ============================================================
    # Command execution
    # ============================================================

    def exec(self, session: RemoteClient, request: ExecRequest) -> str:
        """
        Run the command verbatim and return its standard output.

        Any standard error output fails the operation, whatever the exit
        code and even when standard output is non-empty.

        Raises:
            RemoteExecError: If the command wrote anything to stderr
        """
        result = session.exec_with_code(request.command)
        stdout = result.stdout.decode(TEXT_ENCODING, errors="replace")

        if result.stderr:
            stderr = result.stderr.decode(TEXT_ENCODING, errors="replace")
            raise RemoteExecError(result.exit_code, stderr, stdout=stdout)

        if result.exit_code != 0:
            logger.info("Command exited with code %d and empty stderr", result.exit_code)
        return stdout
