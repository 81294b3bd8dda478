"""Rich output formatting for the fileexplorer CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fileexplorer.mounts import DiskUsage, MountPoint, is_mount_allowed, is_read_write

# Shared console instance; user-facing messages go to stdout, logs to stderr
console = Console()


def format_bytes(size: int) -> str:
    """Human-readable size using binary units (1.5 GiB)."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


def mode_label(mount: MountPoint) -> str:
    return "[green]rw[/green]" if is_read_write(mount) else "[yellow]ro[/yellow]"


def create_mounts_table(mounts: Sequence[MountPoint]) -> Table:
    table = Table(title="Mount points", show_lines=False)
    table.add_column("Mount point", style="cyan", no_wrap=True)
    table.add_column("Device")
    table.add_column("Type")
    table.add_column("Mode", justify="center")
    table.add_column("Remount", justify="center")
    for mount in mounts:
        table.add_row(
            mount.mount_point,
            mount.device,
            mount.type,
            mode_label(mount),
            "yes" if is_mount_allowed(mount) else "[dim]no[/dim]",
        )
    return table


def create_mount_info_panel(
    mount: MountPoint,
    usage: DiskUsage | None,
    privileged: bool,
    warning_percent: int = 95,
) -> Panel:
    """Details of one mount point, as shown by ``fileexplorer info``.

    The usage line turns red once the used share reaches ``warning_percent``.
    """
    lines = [
        f"[bold]Mount point:[/bold] {mount.mount_point}",
        f"[bold]Device:[/bold]      {mount.device}",
        f"[bold]Type:[/bold]        {mount.type}",
        f"[bold]Options:[/bold]     {mount.options}",
        f"[bold]Dump/Pass:[/bold]   {mount.dump} / {mount.pass_number}",
        f"[bold]Mode:[/bold]        {mode_label(mount)}",
    ]
    if usage is not None:
        summary = (
            f"{format_bytes(usage.used)} of {format_bytes(usage.total)} "
            f"({usage.percent_used}%), {format_bytes(usage.free)} free"
        )
        if usage.is_low_on_space(warning_percent):
            summary = f"[bold red]{summary} (low on space)[/bold red]"
        lines.append(f"[bold]Usage:[/bold]       {summary}")
    else:
        lines.append("[bold]Usage:[/bold]       [dim]unavailable[/dim]")

    if not is_mount_allowed(mount):
        lines.append("[dim]This filesystem cannot be remounted.[/dim]")
    elif not privileged:
        lines.append("[dim]Remounting requires a privileged console.[/dim]")
    return Panel("\n".join(lines), title="Filesystem info", expand=False)
