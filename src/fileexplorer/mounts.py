"""Mount point inspection and remounting.

Reads the kernel mount table, finds the mount point holding a path, reports
disk usage, and remounts a filesystem read-write or read-only. Remounting
usually needs privileges; a failed remount goes through the failure handler
so the user can relaunch it with a privileged console.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from fileexplorer.console.exceptions import ConsoleError, attach_follow_up
from fileexplorer.console.shell import ShellCommand, ShellConsole
from fileexplorer.core.logging import OperationContext, get_logger, with_context
from fileexplorer.relaunch.handler import FailureHandler
from fileexplorer.relaunch.listener import RelaunchListener

_logger = get_logger("mounts")

DEFAULT_MOUNTS_PATH = Path("/proc/mounts")

# Pseudo filesystems exposed by the kernel; remounting them is meaningless
VIRTUAL_FILESYSTEMS = frozenset({
    "autofs",
    "binfmt_misc",
    "bpf",
    "cgroup",
    "cgroup2",
    "configfs",
    "debugfs",
    "devpts",
    "efivarfs",
    "fusectl",
    "hugetlbfs",
    "mqueue",
    "nsfs",
    "proc",
    "pstore",
    "securityfs",
    "selinuxfs",
    "sysfs",
    "tracefs",
})

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


class MountNotAllowedError(ConsoleError):
    """Raised when remounting a pseudo filesystem is requested."""


def _unescape(field: str) -> str:
    """Decode the octal escapes used for spaces and tabs in mount tables."""
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), field)


@dataclass(frozen=True)
class MountPoint:
    """One entry of the mount table."""

    mount_point: str
    device: str
    type: str
    options: str
    dump: int = 0
    pass_number: int = 0

    @property
    def option_list(self) -> list[str]:
        return self.options.split(",") if self.options else []

    @classmethod
    def parse(cls, line: str) -> MountPoint | None:
        """Parse a mount table line; None for blank, comment, or malformed lines."""
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return None
        fields = stripped.split()
        if len(fields) < 4:
            return None
        try:
            dump = int(fields[4]) if len(fields) > 4 else 0
            pass_number = int(fields[5]) if len(fields) > 5 else 0
        except ValueError:
            return None
        return cls(
            mount_point=_unescape(fields[1]),
            device=_unescape(fields[0]),
            type=fields[2],
            options=fields[3],
            dump=dump,
            pass_number=pass_number,
        )


@dataclass(frozen=True)
class DiskUsage:
    """Space usage of a mounted filesystem, in bytes."""

    total: int
    used: int
    free: int

    @property
    def percent_used(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.used * 100.0 / self.total, 1)

    def is_low_on_space(self, warning_percent: int) -> bool:
        """Whether the used share has reached the free-space warning level."""
        return self.total > 0 and self.percent_used >= warning_percent

    @classmethod
    def for_path(cls, path: str | Path) -> DiskUsage:
        usage = shutil.disk_usage(path)
        return cls(total=usage.total, used=usage.used, free=usage.free)


def parse_mounts(text: str) -> list[MountPoint]:
    """Parse a whole mount table (``/proc/mounts`` or fstab syntax)."""
    mounts: list[MountPoint] = []
    for line in text.splitlines():
        mount = MountPoint.parse(line)
        if mount is not None:
            mounts.append(mount)
    return mounts


def read_mount_points(path: Path = DEFAULT_MOUNTS_PATH) -> list[MountPoint]:
    """Read and parse the mount table at ``path``."""
    return parse_mounts(path.read_text(encoding="utf-8", errors="replace"))


def find_mount_point(path: str | Path, mounts: Iterable[MountPoint]) -> MountPoint | None:
    """Return the mount point holding ``path`` (longest matching prefix).

    When the same directory is mounted more than once, the last entry wins,
    as it is the one visible.
    """
    target = PurePosixPath(str(path))
    best: MountPoint | None = None
    best_depth = -1
    for mount in mounts:
        mount_path = PurePosixPath(mount.mount_point)
        if target != mount_path and mount_path not in target.parents:
            continue
        depth = len(mount_path.parts)
        if depth >= best_depth:
            best, best_depth = mount, depth
    return best


def is_read_write(mount: MountPoint) -> bool:
    return "rw" in mount.option_list


def is_mount_allowed(mount: MountPoint) -> bool:
    """Whether a mount point may be remounted (real filesystems only)."""
    return mount.type not in VIRTUAL_FILESYSTEMS


def remount_command(mount: MountPoint, read_write: bool, console: ShellConsole) -> ShellCommand:
    """Build the command remounting ``mount`` read-write or read-only."""
    mode = "rw" if read_write else "ro"
    return ShellCommand(["mount", "-o", f"remount,{mode}", mount.mount_point], console)


def remount(
    mount: MountPoint,
    read_write: bool,
    console: ShellConsole,
    handler: FailureHandler,
    listener: RelaunchListener | None = None,
    on_remounted: Callable[[MountPoint], Any] | None = None,
    quiet: bool = False,
    ask_user: bool = True,
) -> bool:
    """Remount a filesystem, relaunching with privileges if needed.

    Args:
        mount: Mount point to remount.
        read_write: True for read-write, False for read-only.
        console: Console running the mount command.
        handler: Receives the failure when the first attempt fails.
        listener: Relaunch outcome listener.
        on_remounted: Called with the mount point once it was remounted,
            either directly or by a relaunch.
        quiet: Suppress user-visible messages.
        ask_user: Offer a privileged relaunch on permission failures.

    Returns:
        True if the first attempt succeeded. On False the outcome of any
        relaunch is delivered to ``listener``.

    Raises:
        MountNotAllowedError: If ``mount`` is a pseudo filesystem.
    """
    with with_context(OperationContext(operation="remount", target=mount.mount_point)):
        if not is_mount_allowed(mount):
            raise MountNotAllowedError(
                f"{mount.mount_point} ({mount.type}) cannot be remounted"
            )

        command = remount_command(mount, read_write, console)
        _logger.info("mounts.remount_started", read_write=read_write, fs_type=mount.type)
        try:
            command.execute()
        except ConsoleError as e:
            if on_remounted is not None:
                attach_follow_up(e, lambda _result: on_remounted(mount))
            handler.handle(e, quiet=quiet, ask_user=ask_user, listener=listener)
            return False

        _logger.info("mounts.remounted", read_write=read_write)
        if on_remounted is not None:
            on_remounted(mount)
        return True
