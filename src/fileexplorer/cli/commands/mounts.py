"""Mount point commands: ``mounts``, ``info``, and ``remount``."""

from __future__ import annotations

from pathlib import Path

import typer

from fileexplorer.console.shell import ShellConsole
from fileexplorer.mounts import (
    DiskUsage,
    MountNotAllowedError,
    MountPoint,
    find_mount_point,
    read_mount_points,
    remount,
)

from ..helpers import EXIT_FAILED, EXIT_OK, OutcomeRecorder, get_config, open_runtime
from ..output import console, create_mount_info_panel, create_mounts_table


def _load_mounts() -> list[MountPoint]:
    mounts_path = get_config(console).mounts_path
    try:
        return read_mount_points(mounts_path)
    except OSError as e:
        console.print(f"[red]Cannot read mount table {mounts_path}:[/red] {e}")
        raise typer.Exit(EXIT_FAILED) from None


def _resolve_mount(path: Path) -> MountPoint:
    mount = find_mount_point(path.expanduser().resolve(), _load_mounts())
    if mount is None:
        console.print(f"[red]No mount point found for[/red] {path}")
        raise typer.Exit(EXIT_FAILED)
    return mount


def mounts() -> None:
    """List mount points."""
    console.print(create_mounts_table(_load_mounts()))


def info(
    path: Path = typer.Argument(..., help="File or directory on the filesystem"),
) -> None:
    """Show information about the filesystem holding PATH."""
    mount = _resolve_mount(path)
    try:
        usage: DiskUsage | None = DiskUsage.for_path(mount.mount_point)
    except OSError:
        usage = None
    config = get_config(console)
    privileged = ShellConsole(config.console).is_privileged()
    console.print(
        create_mount_info_panel(mount, usage, privileged, config.free_space_warning_percent)
    )


def remount_cmd(
    path: Path = typer.Argument(..., help="File or directory on the filesystem"),
    read_write: bool = typer.Option(
        True,
        "--rw/--ro",
        help="Remount read-write (default) or read-only",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not show failure messages",
    ),
    ask: bool = typer.Option(
        True,
        "--ask/--no-ask",
        help="Offer to relaunch with privileges when permission is denied",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Answer yes to the relaunch question",
    ),
) -> None:
    """Remount the filesystem holding PATH read-write or read-only.

    Exit codes: 0 remounted, 1 failed, 2 relaunch declined.
    """
    mount = _resolve_mount(path)
    recorder = OutcomeRecorder()
    mode = "read-write" if read_write else "read-only"

    def _remounted(mp: MountPoint) -> None:
        console.print(f"[green]✓[/green] {mp.mount_point} remounted {mode}")

    with open_runtime(console, assume_yes=yes) as runtime:
        try:
            done = remount(
                mount,
                read_write,
                runtime.console,
                runtime.handler,
                listener=recorder,
                on_remounted=_remounted,
                quiet=quiet or runtime.config.relaunch.quiet,
                ask_user=ask and runtime.config.relaunch.ask_user,
            )
        except MountNotAllowedError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(EXIT_FAILED) from None

    if done:
        raise typer.Exit(EXIT_OK)
    raise typer.Exit(recorder.exit_code())
