"""Rules for rewriting the file paths and network targets of a contained process."""

from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass, field
from pathlib import Path

# open(2) flag bits that signal an intent to modify a file.
O_WRONLY = 1
O_RDWR = 2
O_CREAT = 64
_WRITE_FLAGS = O_WRONLY | O_RDWR | O_CREAT

# /proc paths passed through to the host unchanged.
PROC_PASSTHROUGH = (
    "/proc/sys",
    "/proc/meminfo",
    "/proc/cpuinfo",
    "/proc/filesystems",
    "/proc/mounts",
    "/proc/loadavg",
    "/proc/uptime",
    "/proc/version",
    "/proc/stat",
    "/proc/net",
    "/proc/bus",
    "/proc/irq",
    "/proc/devices",
    "/proc/misc",
    "/proc/modules",
    "/proc/partitions",
    "/proc/swaps",
    "/proc/vmstat",
    "/proc/zoneinfo",
    "/proc/kallsyms",
    "/proc/interrupts",
)

# Entries under /proc/self (or /proc/<pid>) served from the container's rootfs.
PROC_VIRTUALIZED = frozenset({"status", "stat", "cmdline"})

# Host locations the process needs in order to run at all.
SYSTEM_PREFIXES = (
    "/sys",
    "/dev",
    "/bin",
    "/sbin",
    "/usr",
    "/lib",
    "/lib64",
    "/run",
    "/tmp",
    "/var",
    "/nix",
)


@dataclass
class NatRule:
    """Rewrites a connection to ``match_host:match_port`` into ``target_host:target_port``."""

    match_host: str
    match_port: int
    target_host: str
    target_port: int

    def matches(self, host: str, port: int) -> bool:
        """Whether ``(host, port)`` is the destination this rule rewrites."""
        return self.match_port == port and self.match_host == host

    def target_ipv4(self) -> ipaddress.IPv4Address | None:
        """The target host as an IPv4 address, or ``None`` if it is not one."""
        try:
            return ipaddress.IPv4Address(self.target_host)
        except ValueError:
            return None


@dataclass
class RewriteRules:
    """How paths and network calls of a contained process are redirected."""

    rootfs: Path
    fake_pid: int = 1
    real_pid: int = 0
    allowed_ports: list[int] = field(default_factory=list)
    allowed_bind_ports: list[int] = field(default_factory=list)
    nat_rules: list[NatRule] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rootfs = Path(os.fspath(self.rootfs))

    @property
    def _rootfs_str(self) -> str:
        return str(self.rootfs)

    def _rewrite_proc_path(self, path: str) -> str | None:
        rootfs_str = self._rootfs_str
        rootfs_missing = not self.rootfs.exists()

        suffix: str | None = None
        pid_prefix = f"/proc/{self.real_pid}/"
        if path.startswith("/proc/self/"):
            suffix = path[len("/proc/self/"):]
        elif path.startswith(pid_prefix):
            suffix = path[len(pid_prefix):]

        if suffix is not None and suffix.split("/", 1)[0] in PROC_VIRTUALIZED:
            new_path = f"{rootfs_str}/proc/self/{suffix}"
            if rootfs_missing or Path(new_path).exists():
                return new_path

        if path in ("/proc/self", f"/proc/{self.real_pid}"):
            new_path = f"{rootfs_str}/proc/self"
            if rootfs_missing or Path(new_path).exists():
                return new_path

        return None

    def rewrite_path(self, path: str) -> str | None:
        """The rootfs location ``path`` should be redirected to, or ``None`` to leave it."""
        if not path or not path.startswith("/"):
            return None

        rootfs_str = self._rootfs_str
        if path.startswith(rootfs_str):
            return None

        if path.startswith("/proc"):
            if path.startswith(PROC_PASSTHROUGH):
                return None
            return self._rewrite_proc_path(path)

        if path.startswith(SYSTEM_PREFIXES):
            return None

        if "/.cell/" in path:
            return None

        new_path = f"{rootfs_str}{path}"
        if not self.rootfs.exists():
            return new_path

        candidate = Path(new_path)
        if candidate.exists() or candidate.parent.is_dir():
            return new_path
        return None

    def port_allowed(self, port: int) -> bool:
        """Whether an outbound connection to ``port`` is permitted."""
        return not self.allowed_ports or port in self.allowed_ports

    def bind_port_allowed(self, port: int) -> bool:
        """Whether binding to ``port`` is permitted."""
        return not self.allowed_bind_ports or port in self.allowed_bind_ports

    def should_copy_on_write(self, host_path: str, flags: int) -> bool:
        """Whether a host file opened with ``flags`` must first be copied into the rootfs.

        True only for write intent on an existing regular host file that the
        rootfs does not yet hold.
        """
        if not self.has_write_intent(flags):
            return False
        if not Path(host_path).is_file():
            return False
        return not Path(self.rootfs_target(host_path)).exists()

    def rootfs_target(self, host_path: str) -> str:
        """The rootfs location corresponding to an absolute host path."""
        return f"{self._rootfs_str}{host_path}"

    @staticmethod
    def has_write_intent(flags: int) -> bool:
        """Whether open flags include ``O_WRONLY``, ``O_RDWR`` or ``O_CREAT``."""
        return bool(flags & _WRITE_FLAGS)

    def lookup_nat(self, host: str, port: int) -> NatRule | None:
        """The first NAT rule matching ``(host, port)``, if any."""
        return next((rule for rule in self.nat_rules if rule.matches(host, port)), None)