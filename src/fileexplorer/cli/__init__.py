"""fileexplorer CLI.

Commands:
    mounts    List mount points
    info      Show the filesystem holding a path
    remount   Remount a filesystem read-write or read-only
    run       Run a command, relaunching it with privileges on demand

Global options (--config, --log-level, --log-file, --log-format) are set by
eager callbacks before any command runs; the config file is loaded and
logging configured once per invocation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fileexplorer import __version__

from . import helpers as helpers
from .commands import info, mounts, remount_cmd, run
from .helpers import LogFormatOption, configure_global_logging, get_state
from .output import console

app = typer.Typer(
    name="fileexplorer",
    help="File manager toolkit with privileged command relaunch",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"fileexplorer v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the YAML configuration file",
            envvar="FILEEXPLORER_CONFIG",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="FILEEXPLORER_LOG_LEVEL",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Path for log file output",
            envvar="FILEEXPLORER_LOG_FILE",
        ),
    ] = None,
    log_format: Annotated[
        LogFormatOption | None,
        typer.Option(
            "--log-format",
            help="Log format",
            case_sensitive=False,
            envvar="FILEEXPLORER_LOG_FORMAT",
        ),
    ] = None,
) -> None:
    """fileexplorer - inspect and remount filesystems, run commands with relaunch."""
    state = get_state()
    state.config_path = config
    state.log_level = log_level
    state.log_file = log_file
    state.log_format = log_format.value if log_format is not None else None
    configure_global_logging(console)


app.command()(mounts)
app.command()(info)
app.command(name="remount")(remount_cmd)
app.command(context_settings={"allow_interspersed_args": False})(run)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "console", "helpers", "main"]
