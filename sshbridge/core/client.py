from __future__ import annotations
import io
import time
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Tuple

import paramiko

from .constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_SSH_PORT,
    EXEC_POLL_INTERVAL,
    EXEC_RECV_BUFFER,
)
from .exceptions import ConnectionError, InvalidArgument
from .logging import get_logger

logger = get_logger(__name__)

# Tried in order when parsing key material
KEY_TYPES: List[type] = [paramiko.Ed25519Key, paramiko.RSAKey, paramiko.ECDSAKey]


@dataclass(frozen=True)
class Credentials:
    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    password: Optional[str] = field(default=None, repr=False)
    private_key: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_CONNECT_TIMEOUT

    @property
    def auth_method(self) -> Literal["password", "key", "none"]:
        """Password wins when both are configured"""
        if self.password:
            return "password"
        if self.private_key:
            return "key"
        return "none"

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"


@dataclass
class ExecOutput:
    """Raw result of one remote command"""
    stdout: bytes
    stderr: bytes
    exit_code: int


class RemoteClient:
    """
    Single-use wrapper around a Paramiko SSHClient:
    - one authenticated connection, opened by connect()
    - only the configured credential is offered (no agent, no ~/.ssh lookup)
    - lazily opened SFTP channel
    - close() is idempotent and also runs on context-manager exit
    """
    def __init__(
        self,
        credentials: Credentials,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ) -> None:
        self.credentials = credentials

        self.client = client_factory()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        self._sftp: Optional[paramiko.SFTPClient] = None
        self._closed = False

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        """
        Open and authenticate the connection.

        Raises:
            InvalidArgument: If host or user is empty
            ConnectionError: On any transport or authentication failure
        """
        cfg = self.credentials
        if not cfg.host or not cfg.user:
            self.close()
            raise InvalidArgument("host and user must be non-empty")

        kwargs = {
            "hostname": cfg.host,
            "port": cfg.port,
            "username": cfg.user,
            "timeout": cfg.timeout,
            "banner_timeout": cfg.timeout,
            "auth_timeout": cfg.timeout,
            "allow_agent": False,
            "look_for_keys": False,
        }

        try:
            if cfg.auth_method == "password":
                kwargs["password"] = cfg.password
            elif cfg.auth_method == "key":
                kwargs["pkey"] = load_private_key(cfg.private_key)

            logger.debug("Connecting to %s (auth: %s)", cfg.target, cfg.auth_method)
            self.client.connect(**kwargs)
        except Exception as e:
            # Never leave a half-open transport behind
            self.close()
            raise ConnectionError(f"SSH connection error: {e}") from e

        logger.debug("Session ready: %s", cfg.target)

    @property
    def is_connected(self) -> bool:
        if self._closed:
            return False
        transport = self.client.get_transport()
        return transport is not None and transport.is_active()

    # --------------------
    # Helpers
    # --------------------
    def exec_with_code(self, cmd: str) -> ExecOutput:
        """
        Run a command and collect stdout and stderr until the channel closes.

        Both streams are drained in the same polling loop so a full stderr
        window can never stall stdout (and vice versa).

        Raises:
            ConnectionError: If the exec channel cannot be opened
        """
        try:
            _, stdout, _ = self.client.exec_command(cmd)
        except Exception as e:
            raise ConnectionError(f"SSH exec error: {e}") from e

        channel = stdout.channel
        out_buf: List[bytes] = []
        err_buf: List[bytes] = []

        while not channel.exit_status_ready():
            if not self._drain(channel, out_buf, err_buf):
                time.sleep(EXEC_POLL_INTERVAL)

        # Data that arrived together with the exit status
        while self._drain(channel, out_buf, err_buf):
            pass

        exit_code = channel.recv_exit_status()
        return ExecOutput(b"".join(out_buf), b"".join(err_buf), exit_code)

    @staticmethod
    def _drain(channel: paramiko.Channel, out_buf: List[bytes], err_buf: List[bytes]) -> bool:
        """Read whatever is ready on either stream; True if anything was read"""
        has_output = False

        if channel.recv_ready():
            data = channel.recv(EXEC_RECV_BUFFER)
            if data:
                has_output = True
                out_buf.append(data)

        if channel.recv_stderr_ready():
            data = channel.recv_stderr(EXEC_RECV_BUFFER)
            if data:
                has_output = True
                err_buf.append(data)

        return has_output

    def open_sftp(self) -> paramiko.SFTPClient:
        """Return the SFTP client, opening it on first use"""
        if self._sftp is None:
            self._sftp = self.client.open_sftp()
        return self._sftp

    # --------------------
    # Teardown
    # --------------------
    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._sftp is not None:
            try:
                self._sftp.close()
            except Exception as e:
                logger.debug("Ignoring SFTP close failure: %s", e)
            self._sftp = None
        self.client.close()
        logger.debug("Session closed: %s", self.credentials.target)

    @property
    def closed(self) -> bool:
        return self._closed

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> RemoteClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def load_private_key(material: str) -> paramiko.PKey:
    """
    Parse private key text, probing Ed25519, RSA and ECDSA in turn.

    Raises:
        paramiko.SSHException: If no supported key type accepts the material
    """
    errors: List[Tuple[str, str]] = []
    for key_type in KEY_TYPES:
        try:
            return key_type.from_private_key(io.StringIO(material))
        except (paramiko.SSHException, ValueError) as e:
            errors.append((key_type.__name__, str(e)))

    detail = "; ".join(f"{name}: {err}" for name, err in errors)
    raise paramiko.SSHException(f"Unsupported or invalid private key ({detail})")
