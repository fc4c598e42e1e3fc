"""Redirecting NT-style file paths into a container's rootfs or its volume mounts."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

NT_PREFIX = "\\??\\"

# Fragments of lower-cased paths that always stay on the host.
_SKIPPED_FRAGMENTS = ("\\.cell\\", "\\windows\\", "\\program files", "\\programdata\\")

# Executables and system files are never redirected.
_SKIPPED_SUFFIXES = (".dll", ".exe", ".sys", ".drv", ".nls", ".mui")


class NtPathRewriter:
    """Decides where an NT path (``\\??\\C:\\...``) opened by a contained process should go.

    ``volume_mounts`` holds ``(container_path, host_volume_path)`` pairs in NT
    form; paths under a container path go to the matching host volume, which
    takes priority over the rootfs. Otherwise a path is redirected only when
    its first directory component exists in the rootfs.
    """

    def __init__(
        self,
        rootfs: str | os.PathLike[str],
        volume_mounts: Iterable[tuple[str, str]] = (),
    ) -> None:
        self.rootfs = os.fspath(rootfs)
        self.rootfs_nt = f"{NT_PREFIX}{self.rootfs}"
        self.volume_mounts = list(volume_mounts)

    def _volume_target(self, nt_path: str) -> str | None:
        lower = nt_path.lower()
        for container_path, host_path in self.volume_mounts:
            if lower.startswith(container_path.lower()):
                return f"{host_path}{nt_path[len(container_path):]}"
        return None

    def should_rewrite(self, nt_path: str) -> str | None:
        """The NT path ``nt_path`` should be redirected to, or ``None`` to leave it alone."""
        if not nt_path.startswith(NT_PREFIX) or nt_path.startswith(self.rootfs_nt):
            return None

        lower = nt_path.lower()
        if any(fragment in lower for fragment in _SKIPPED_FRAGMENTS):
            return None
        if lower.endswith(_SKIPPED_SUFFIXES):
            return None

        win_path = nt_path[len(NT_PREFIX):]
        if len(win_path) <= 3:
            return None

        volume_target = self._volume_target(nt_path)
        if volume_target is not None:
            return volume_target

        relative = win_path[2:] if len(win_path) > 2 and win_path[1] == ":" else win_path
        first_component = relative.lstrip("\\").split("\\", 1)[0]
        if not first_component:
            return None
        if not (Path(self.rootfs) / first_component).exists():
            return None

        return f"{self.rootfs_nt}{relative}"