"""
Unified exception definitions

Every failure an invocation can produce is one of the classes below. The
``kind`` attribute is what the dispatcher reports alongside the message.
"""
from typing import Optional


class BridgeError(Exception):
    """Base exception class"""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(BridgeError):
    """Missing or invalid startup parameters"""
    pass


class ConnectionError(BridgeError):
    """Transport or authentication failure while establishing a session"""
    pass


class LocalIoError(BridgeError):
    """Local file could not be read or written"""
    pass


class TransferError(BridgeError):
    """Failure on the SFTP channel"""
    pass


class InvalidArgument(BridgeError):
    """Malformed or empty request parameter"""
    pass


class RemoteExecError(BridgeError):
    """Remote command wrote to standard error"""

    def __init__(self, exit_code: int, stderr: str, stdout: Optional[str] = None):
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(f"Error (code {exit_code}):\n{stderr}")
