"""
Operation request and result models
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, List, Optional, Union

from ...core.exceptions import BridgeError, InvalidArgument


class Operation(str, Enum):
    """Operation tag"""
    UPLOAD = "upload"
    DOWNLOAD = "download"
    LIST = "list"
    EXEC = "exec"


def _require(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"{name} must be a non-empty string")


@dataclass(frozen=True)
class UploadRequest:
    local_path: str
    remote_path: str

    operation: ClassVar[Operation] = Operation.UPLOAD

    def validate(self) -> None:
        _require("localPath", self.local_path)
        _require("remotePath", self.remote_path)


@dataclass(frozen=True)
class DownloadRequest:
    remote_path: str
    local_path: str

    operation: ClassVar[Operation] = Operation.DOWNLOAD

    def validate(self) -> None:
        _require("remotePath", self.remote_path)
        _require("localPath", self.local_path)


@dataclass(frozen=True)
class ListRequest:
    remote_path: str

    operation: ClassVar[Operation] = Operation.LIST

    def validate(self) -> None:
        _require("remotePath", self.remote_path)


@dataclass(frozen=True)
class ExecRequest:
    command: str

    operation: ClassVar[Operation] = Operation.EXEC

    def validate(self) -> None:
        if not isinstance(self.command, str) or not self.command.strip():
            raise InvalidArgument("Command must be a non-empty string.")


OperationRequest = Union[UploadRequest, DownloadRequest, ListRequest, ExecRequest]


@dataclass(frozen=True)
class DirEntry:
    """One directory entry, exactly as the server reported it"""
    filename: str
    longname: str

    def __str__(self) -> str:
        return f"{self.filename} ({self.longname})"


Payload = Union[str, bytes, List[DirEntry]]


@dataclass
class OperationResult:
    """Terminal outcome of one invocation: a payload or an error, never both"""
    operation: Operation
    payload: Optional[Payload] = None
    error: Optional[BridgeError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> Payload:
        """Return the payload, re-raising the classified error on failure"""
        if self.error is not None:
            raise self.error
        return self.payload

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.error.kind}: {self.error.message}"
        if isinstance(self.payload, bytes):
            return f"<{len(self.payload)} bytes>"
        if isinstance(self.payload, list):
            return "\n".join(str(entry) for entry in self.payload)
        return str(self.payload)
