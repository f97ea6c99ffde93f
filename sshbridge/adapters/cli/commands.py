"""
Operation CLI commands
"""
import typer
from rich.markup import escape

from ...core.exceptions import BridgeError
from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...domain.operations import OperationResult, persist_download
from ..mcp import run_server

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()


def register_commands(app: typer.Typer) -> None:
    """Register operation commands on the main app"""
    app.command(name="serve")(serve)
    app.command(name="upload")(upload)
    app.command(name="download")(download)
    app.command(name="ls")(list_dir)
    app.command(name="exec")(exec_command)


def _fail(kind: str, message: str) -> None:
    stderr_console.print(f"[red]{kind}:[/red] {escape(message)}", highlight=False, soft_wrap=True)
    raise typer.Exit(1)


def _check(result: OperationResult) -> None:
    if not result.success:
        _fail(result.error.kind, result.error.message)


def serve(ctx: typer.Context):
    """
    Run the MCP server on stdio.

    Registers the sftp_upload, sftp_download, sftp_list and exec tools.
    """
    bridge = ctx.obj.build_bridge()
    run_server(bridge)


def upload(
    ctx: typer.Context,
    local_path: str = typer.Argument(..., help="Local file to upload"),
    remote_path: str = typer.Argument(..., help="Remote destination path"),
):
    """Upload a local file over SFTP."""
    result = ctx.obj.build_bridge().upload(local_path, remote_path)
    _check(result)
    stdout_console.print(f"[green]✓[/green] {escape(result.payload)}", highlight=False, soft_wrap=True)


def download(
    ctx: typer.Context,
    remote_path: str = typer.Argument(..., help="Remote file to download"),
    local_path: str = typer.Argument(..., help="Local destination path"),
):
    """Download a remote file over SFTP."""
    result = ctx.obj.build_bridge().download(remote_path, local_path)
    _check(result)
    try:
        persist_download(result.payload, local_path)
    except BridgeError as e:
        _fail(e.kind, e.message)
    stdout_console.print(
        f"[green]✓[/green] File downloaded to {escape(local_path)} ({len(result.payload)} bytes)",
        highlight=False,
        soft_wrap=True,
    )


def list_dir(
    ctx: typer.Context,
    remote_path: str = typer.Argument(..., help="Remote directory"),
):
    """List a remote directory in server order."""
    result = ctx.obj.build_bridge().list_dir(remote_path)
    _check(result)
    for entry in result.payload:
        stdout_console.print(str(entry), markup=False, highlight=False, soft_wrap=True)


def exec_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Shell command to run remotely"),
):
    """
    Run a shell command remotely and print its stdout.

    Any output on stderr is treated as failure, whatever the exit code.
    """
    result = ctx.obj.build_bridge().exec(command)
    _check(result)
    typer.echo(result.payload, nl=False)
