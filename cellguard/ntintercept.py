"""Decoding of intercepted Winsock arguments and the log of a process's accesses."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

# Address families as numbered by Winsock.
AF_INET = 2
AF_INET6 = 23

SOCKADDR_IN_LEN = 16
SOCKADDR_IN6_LEN = 28
SUMMARY_LIMIT = 20


@dataclass
class FileAccess:
    """A file path opened by the contained process, and where it was redirected."""

    path: str
    rewritten_to: str | None = None


@dataclass
class NetAccess:
    """A connection attempt by the contained process."""

    addr: str
    port: int
    blocked: bool


def parse_winsock_addr(data: bytes, allowed_ports: Iterable[int] = ()) -> NetAccess | None:
    """Decode the ``sockaddr`` passed to ``connect()``; ``len(data)`` is its length.

    The port is blocked when ``allowed_ports`` is non-empty and does not hold
    it. Returns ``None`` for buffers too short for their family and for
    families other than IPv4 and IPv6.
    """
    if len(data) < 4:
        return None
    allowed = set(allowed_ports)
    family = int.from_bytes(data[0:2], "little")
    port = int.from_bytes(data[2:4], "big")

    if family == AF_INET and len(data) >= SOCKADDR_IN_LEN:
        addr = ".".join(str(octet) for octet in data[4:8])
    elif family == AF_INET6 and len(data) >= SOCKADDR_IN6_LEN:
        addr = f"[{data[8]:02x}{data[9]:02x}::{data[22]:02x}{data[23]:02x}]"
    else:
        return None

    blocked = bool(allowed) and port not in allowed
    return NetAccess(addr=addr, port=port, blocked=blocked)


def mapped_bind_port(
    port_mappings: Iterable[tuple[int, int]], container_port: int
) -> int | None:
    """The host port that ``(host_port, container_port)`` mappings give a bind, if any."""
    return next(
        (host for host, container in port_mappings if container == container_port), None
    )


@dataclass
class AccessLog:
    """The file and network accesses seen while a process ran."""

    file_accesses: list[FileAccess] = field(default_factory=list)
    net_accesses: list[NetAccess] = field(default_factory=list)

    @property
    def rewrite_count(self) -> int:
        """How many recorded file accesses were redirected."""
        return sum(1 for access in self.file_accesses if access.rewritten_to is not None)

    def record_file(self, path: str, rewritten_to: str | None = None) -> FileAccess:
        """Record an access to ``path``, redirected to ``rewritten_to`` if given."""
        access = FileAccess(path=path, rewritten_to=rewritten_to)
        self.file_accesses.append(access)
        return access

    def record_net(self, access: NetAccess) -> None:
        """Record a connection attempt."""
        self.net_accesses.append(access)

    def summary_lines(self) -> list[str]:
        """Report lines: connections, then path rewrites, then unique paths accessed."""
        lines: list[str] = []
        if self.net_accesses:
            lines.append(f"[cell-guard] network connections ({len(self.net_accesses)}):")
            lines.extend(
                f"  {net.addr}:{net.port}{' [BLOCKED]' if net.blocked else ''}"
                for net in self.net_accesses
            )

        if not self.file_accesses:
            return lines

        rewrites = [a for a in self.file_accesses if a.rewritten_to is not None]
        if rewrites:
            lines.append(f"[cell-guard] path rewrites ({len(rewrites)}):")
            seen: set[str] = set()
            for access in rewrites:
                if access.path not in seen:
                    seen.add(access.path)
                    lines.append(f"  {access.path} -> {access.rewritten_to}")

        unique_paths = sorted({access.path for access in self.file_accesses})
        lines.append(
            f"[cell-guard] file access summary ({len(unique_paths)} unique paths, "
            f"{len(self.file_accesses)} calls, {self.rewrite_count} rewrites):"
        )
        lines.extend(
            f"  {number}. {path}"
            for number, path in enumerate(unique_paths[:SUMMARY_LIMIT], start=1)
        )
        if len(unique_paths) > SUMMARY_LIMIT:
            lines.append(f"  ... and {len(unique_paths) - SUMMARY_LIMIT} more")
        return lines