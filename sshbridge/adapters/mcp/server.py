"""
MCP stdio server

Maps tool calls onto typed bridge requests. Each call runs in a worker
thread so the event loop keeps serving the stdio stream while paramiko
blocks.
"""
import asyncio
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from ...core.constants import SERVER_NAME
from ...core.exceptions import BridgeError
from ...core.logging import get_logger
from ...domain.operations import Bridge, OperationResult, persist_download

logger = get_logger(__name__)


# ============================================================
# Tool handlers (blocking, one session each)
# ============================================================

def _raise_on_failure(result: OperationResult) -> None:
    if not result.success:
        raise ToolError(str(result))


def handle_upload(bridge: Bridge, local_path: str, remote_path: str) -> str:
    result = bridge.upload(local_path, remote_path)
    _raise_on_failure(result)
    return result.payload


def handle_download(bridge: Bridge, remote_path: str, local_path: str) -> str:
    result = bridge.download(remote_path, local_path)
    _raise_on_failure(result)
    try:
        persist_download(result.payload, local_path)
    except BridgeError as e:
        raise ToolError(f"{e.kind}: {e.message}") from e
    return f"File downloaded to {local_path}"


def handle_list(bridge: Bridge, remote_path: str) -> str:
    result = bridge.list_dir(remote_path)
    _raise_on_failure(result)
    return str(result)


def handle_exec(bridge: Bridge, command: str) -> str:
    result = bridge.exec(command)
    _raise_on_failure(result)
    return result.payload


# ============================================================
# Server
# ============================================================

def create_server(bridge: Bridge) -> FastMCP:
    """
    Build the MCP server with the four bridge tools registered.

    Args:
        bridge: Bridge bound to the startup credentials

    Returns:
        FastMCP instance ready to run
    """
    server = FastMCP(SERVER_NAME)

    @server.tool(name="sftp_upload", description="Upload a file to remote server via SFTP")
    async def sftp_upload(
        localPath: Annotated[str, Field(description="Local file path to upload")],
        remotePath: Annotated[str, Field(description="Remote path to save the file")],
    ) -> str:
        return await asyncio.to_thread(handle_upload, bridge, localPath, remotePath)

    @server.tool(name="sftp_download", description="Download a file from remote server via SFTP")
    async def sftp_download(
        remotePath: Annotated[str, Field(description="Remote file path to download")],
        localPath: Annotated[str, Field(description="Local path to save the file")],
    ) -> str:
        return await asyncio.to_thread(handle_download, bridge, remotePath, localPath)

    @server.tool(name="sftp_list", description="List files in a remote directory via SFTP")
    async def sftp_list(
        remotePath: Annotated[str, Field(description="Remote directory path to list")],
    ) -> str:
        return await asyncio.to_thread(handle_list, bridge, remotePath)

    @server.tool(
        name="exec",
        description="Execute a shell command on the remote SSH server and return the output.",
    )
    async def exec_command(
        command: Annotated[str, Field(description="Shell command to execute on the remote SSH server")],
    ) -> str:
        return await asyncio.to_thread(handle_exec, bridge, command)

    return server


def run_server(bridge: Bridge) -> None:
    """Serve MCP over stdio until the client disconnects"""
    server = create_server(bridge)
    logger.info("%s running on stdio (%s)", SERVER_NAME, bridge.credentials.target)
    server.run(transport="stdio")
