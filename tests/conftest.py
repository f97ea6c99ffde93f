"""
In-memory stand-ins for the paramiko objects the bridge touches.

FakeServer holds the remote state (files, directories, command responses)
and hands out FakeSSHClient instances through ``client_factory``, so every
session a test opens is recorded and can be checked for closure.
"""
import errno
import io
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import pytest

from sshbridge.adapters.connection import RemoteConnectionFactory
from sshbridge.core.client import Credentials, RemoteClient
from sshbridge.domain.operations import Bridge


class FakeTransport:
    def __init__(self):
        self.active = False

    def is_active(self):
        return self.active


class FakeChannel:
    def __init__(self, stdout=(), stderr=(), exit_code=0, exit_early=False):
        self._stdout = list(stdout)
        self._stderr = list(stderr)
        self._exit_code = exit_code
        self._exit_early = exit_early

    def recv_ready(self):
        return bool(self._stdout)

    def recv(self, nbytes):
        return self._stdout.pop(0)

    def recv_stderr_ready(self):
        return bool(self._stderr)

    def recv_stderr(self, nbytes):
        return self._stderr.pop(0)

    def exit_status_ready(self):
        return self._exit_early or not (self._stdout or self._stderr)

    def recv_exit_status(self):
        return self._exit_code


class FakeReadFile(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.prefetched = False

    def prefetch(self, file_size=None):
        self.prefetched = True


class FakeWriteFile(io.BytesIO):
    def __init__(self, server, path):
        super().__init__()
        self._server = server
        self._path = path
        self.pipelined = False

    def set_pipelined(self, pipelined=True):
        self.pipelined = pipelined

    def close(self):
        if not self.closed:
            self._server.files[self._path] = self.getvalue()
        super().close()


class FakeSFTP:
    def __init__(self, server):
        self.server = server
        self.closed = False
        self.last_file = None

    def open(self, path, mode="r"):
        if "w" in mode:
            if path in self.server.readonly:
                raise PermissionError(errno.EACCES, "Permission denied")
            self.last_file = FakeWriteFile(self.server, path)
            return self.last_file
        if path not in self.server.files:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        self.last_file = FakeReadFile(self.server.files[path])
        return self.last_file

    def listdir_attr(self, path):
        if path in self.server.files:
            raise OSError(errno.ENOTDIR, "Not a directory")
        if path not in self.server.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        return [SimpleNamespace(filename=name, longname=longname) for name, longname in self.server.dirs[path]]

    def close(self):
        self.closed = True


class FakeSSHClient:
    def __init__(self, server):
        self.server = server
        self.transport = FakeTransport()
        self.connect_kwargs = None
        self.close_count = 0
        self.commands: List[str] = []
        self.sftp: Optional[FakeSFTP] = None

    def set_missing_host_key_policy(self, policy):
        self.policy = policy

    def connect(self, **kwargs):
        self.connect_kwargs = kwargs
        if self.server.connect_error is not None:
            raise self.server.connect_error
        self.transport.active = True

    def get_transport(self):
        return self.transport if self.connect_kwargs is not None else None

    def exec_command(self, command):
        if self.server.exec_error is not None:
            raise self.server.exec_error
        self.commands.append(command)
        stdout, stderr, code = self.server.responses.get(command, ([], [], 0))
        channel = FakeChannel(stdout, stderr, code, exit_early=self.server.exit_early)
        return None, SimpleNamespace(channel=channel), None

    def open_sftp(self):
        if self.server.sftp_error is not None:
            raise self.server.sftp_error
        self.sftp = FakeSFTP(self.server)
        return self.sftp

    def close(self):
        self.close_count += 1
        self.transport.active = False

    @property
    def closed(self):
        return self.close_count > 0


class FakeServer:
    """Remote side shared by every session of one test"""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.readonly: set = set()
        self.dirs: Dict[str, List[Tuple[str, str]]] = {}
        self.responses: Dict[str, Tuple[List[bytes], List[bytes], int]] = {}
        self.connect_error: Optional[Exception] = None
        self.exec_error: Optional[Exception] = None
        self.sftp_error: Optional[Exception] = None
        self.exit_early = False
        self.clients: List[FakeSSHClient] = []

    def client_factory(self):
        client = FakeSSHClient(self)
        self.clients.append(client)
        return client

    def respond(self, command, stdout=(), stderr=(), exit_code=0):
        self.responses[command] = (list(stdout), list(stderr), exit_code)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def credentials():
    return Credentials(host="example.org", user="deploy", password="secret")


@pytest.fixture
def factory(server):
    return RemoteConnectionFactory(client_factory=server.client_factory)


@pytest.fixture
def bridge(credentials, factory):
    return Bridge(credentials, factory)


@pytest.fixture
def session(server, credentials):
    client = RemoteClient(credentials, client_factory=server.client_factory)
    client.connect()
    return client
