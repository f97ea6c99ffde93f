import io
import socket

import paramiko
import pytest

from sshbridge.core.client import Credentials, RemoteClient, load_private_key
from sshbridge.core.exceptions import ConnectionError, InvalidArgument


def _rsa_key_text():
    key = paramiko.RSAKey.generate(2048)
    buf = io.StringIO()
    key.write_private_key(buf)
    return buf.getvalue()


def test_password_wins_over_key():
    both = Credentials(host="h", user="u", password="pw", private_key="KEY")
    assert both.auth_method == "password"
    assert Credentials(host="h", user="u", private_key="KEY").auth_method == "key"
    assert Credentials(host="h", user="u").auth_method == "none"


def test_credentials_repr_hides_secrets():
    creds = Credentials(host="h", user="u", password="hunter2", private_key="PRIVATE")
    assert "hunter2" not in repr(creds)
    assert "PRIVATE" not in repr(creds)
    assert creds.port == 22
    assert creds.target == "u@h:22"


def test_connect_offers_only_the_password(server, credentials):
    client = RemoteClient(credentials, client_factory=server.client_factory)
    client.connect()

    kwargs = server.clients[0].connect_kwargs
    assert kwargs["hostname"] == "example.org"
    assert kwargs["port"] == 22
    assert kwargs["username"] == "deploy"
    assert kwargs["password"] == "secret"
    assert "pkey" not in kwargs
    assert kwargs["allow_agent"] is False
    assert kwargs["look_for_keys"] is False
    assert isinstance(server.clients[0].policy, paramiko.AutoAddPolicy)
    assert client.is_connected


def test_connect_with_key_material(server):
    creds = Credentials(host="h", user="u", port=2222, private_key=_rsa_key_text())
    client = RemoteClient(creds, client_factory=server.client_factory)
    client.connect()

    kwargs = server.clients[0].connect_kwargs
    assert isinstance(kwargs["pkey"], paramiko.RSAKey)
    assert "password" not in kwargs
    assert kwargs["port"] == 2222


def test_connect_without_credentials_still_attempts(server):
    server.connect_error = paramiko.SSHException("No authentication methods available")
    client = RemoteClient(Credentials(host="h", user="u"), client_factory=server.client_factory)

    with pytest.raises(ConnectionError, match="No authentication methods available"):
        client.connect()

    assert server.clients[0].connect_kwargs is not None
    assert client.closed
    assert server.clients[0].close_count == 1


def test_invalid_key_is_a_connection_error(server):
    creds = Credentials(host="h", user="u", private_key="not a key")
    client = RemoteClient(creds, client_factory=server.client_factory)

    with pytest.raises(ConnectionError, match="Unsupported or invalid private key"):
        client.connect()

    assert server.clients[0].connect_kwargs is None
    assert server.clients[0].closed


@pytest.mark.parametrize("error", [
    socket.gaierror(-2, "Name or service not known"),
    ConnectionRefusedError(111, "Connection refused"),
    paramiko.AuthenticationException("Authentication failed."),
    socket.timeout("timed out"),
])
def test_transport_failures_become_connection_errors(server, credentials, error):
    server.connect_error = error
    client = RemoteClient(credentials, client_factory=server.client_factory)

    with pytest.raises(ConnectionError) as excinfo:
        client.connect()

    assert excinfo.value.__cause__ is error
    assert excinfo.value.message.startswith("SSH connection error:")
    assert not client.is_connected
    assert server.clients[0].close_count == 1


def test_empty_host_rejected_before_connecting(server):
    client = RemoteClient(Credentials(host="", user="u"), client_factory=server.client_factory)

    with pytest.raises(InvalidArgument):
        client.connect()

    assert server.clients[0].connect_kwargs is None


def test_exec_collects_both_streams_in_order(server, session):
    server.respond("build", stdout=[b"one ", b"two"], stderr=[b"warn1\n", b"warn2\n"], exit_code=3)

    result = session.exec_with_code("build")

    assert result.stdout == b"one two"
    assert result.stderr == b"warn1\nwarn2\n"
    assert result.exit_code == 3


def test_exec_drains_data_arriving_with_exit_status(server, session):
    server.exit_early = True
    server.respond("cat big", stdout=[b"a", b"b", b"c"])

    assert session.exec_with_code("cat big").stdout == b"abc"


def test_exec_channel_failure(server, session):
    server.exec_error = paramiko.ChannelException(2, "Connect failed")

    with pytest.raises(ConnectionError, match="SSH exec error"):
        session.exec_with_code("ls")


def test_close_is_idempotent(server, session):
    sftp = session.open_sftp()
    assert session.open_sftp() is sftp

    session.close()
    session.close()

    assert sftp.closed
    assert server.clients[0].close_count == 1
    assert not session.is_connected


def test_context_manager_closes(server, session):
    with session:
        pass
    assert server.clients[0].close_count == 1


def test_load_private_key_rejects_garbage():
    with pytest.raises(paramiko.SSHException):
        load_private_key("-----BEGIN NOTHING-----\n")
