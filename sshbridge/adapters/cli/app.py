"""
Main CLI application
"""
import typer
from rich.markup import escape
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ...core.exceptions import ConfigurationError
from ...core.logging import setup_logging, get_logger, get_stderr_console
from ...domain.operations import Bridge
from ..config import ConfigLoader, build_credentials
from ..connection import RemoteConnectionFactory
from .commands import register_commands

logger = get_logger(__name__)
stderr_console = get_stderr_console()

# Create main app
app = typer.Typer(
    name="sshbridge",
    add_completion=False,
    help="Expose SFTP transfer, listing and remote exec over MCP",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@dataclass
class AppContext:
    """Startup options shared by every subcommand"""
    config_file: Optional[Path] = None
    overrides: Dict[str, Any] = field(default_factory=dict)

    def build_bridge(self) -> Bridge:
        """
        Resolve configuration once and bind it to a bridge.

        Exits with status 1 on a configuration error.
        """
        try:
            config = ConfigLoader().load(toml_path=self.config_file, cli_overrides=self.overrides)
            credentials = build_credentials(config)
        except ConfigurationError as e:
            stderr_console.print(f"[red]ConfigurationError:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
            raise typer.Exit(1)

        logger.debug("Using %s (auth: %s)", credentials.target, credentials.auth_method)
        return Bridge(credentials, RemoteConnectionFactory())


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Remote host"),
    port: Optional[str] = typer.Option(None, "--port", "-P", help="SSH port (default: 22)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Login user"),
    password: Optional[str] = typer.Option(None, "--password", help="Login password"),
    key: Optional[str] = typer.Option(None, "--key", "-i", help="Private key file"),
    timeout: Optional[str] = typer.Option(None, "--timeout", help="Connect timeout in seconds (default: 10)"),
):
    """
    sshbridge - SSH/SFTP bridge for automated clients

    Connection settings come from options, SSHBRIDGE_* environment
    variables or a TOML file, in that order of priority.
    """
    setup_logging(level=log_level, log_file=log_file)

    ctx.obj = AppContext(
        config_file=config_file,
        overrides={
            "host": host,
            "port": port,
            "user": user,
            "password": password,
            "key": key,
            "timeout": timeout,
        },
    )


register_commands(app)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
