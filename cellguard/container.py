"""Persisted container state and its on-disk store."""

from __future__ import annotations

import json
import os
import shutil
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


class ContainerStatus(str, Enum):
    """Lifecycle status of a container."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class ContainerState:
    """State recorded for a single container."""

    id: str
    image: str
    status: ContainerStatus
    created_at: str
    pid: int | None
    rootfs_path: Path

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "id": self.id,
            "image": self.image,
            "status": self.status.value,
            "created_at": self.created_at,
            "pid": self.pid,
            "rootfs_path": str(self.rootfs_path),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContainerState:
        """Build a state from its JSON representation; raise ``ValueError`` if malformed."""
        try:
            pid = data["pid"]
            return cls(
                id=str(data["id"]),
                image=str(data["image"]),
                status=ContainerStatus(data["status"]),
                created_at=str(data["created_at"]),
                pid=None if pid is None else int(pid),
                rootfs_path=Path(data["rootfs_path"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid container state: {exc}") from exc


class ContainerStore:
    """Container state under ``<root>/containers/<id>/state.json``."""

    def __init__(self, root: str | os.PathLike[str] | None = None) -> None:
        self.root = Path(root) if root is not None else Path.home() / ".cell"
        self._containers = self.root / "containers"
        try:
            self._containers.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(
                f"failed to create container store at {self._containers}: {exc}"
            ) from exc

    def _state_path(self, container_id: str) -> Path:
        return self._containers / container_id / "state.json"

    def _write(self, state: ContainerState) -> None:
        self._state_path(state.id).write_text(json.dumps(state.to_dict(), indent=2))

    @staticmethod
    def _read(path: Path) -> ContainerState:
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"failed to parse {path}: {exc}") from exc
        return ContainerState.from_dict(data)

    def create(self, image: str) -> ContainerState:
        """Create a container for ``image`` with a fresh 12-character id."""
        container_id = str(uuid.uuid4())[:12]
        rootfs = self._containers / container_id / "rootfs"
        rootfs.mkdir(parents=True, exist_ok=True)

        state = ContainerState(
            id=container_id,
            image=image,
            status=ContainerStatus.CREATED,
            created_at=datetime.now(timezone.utc).isoformat(),
            pid=None,
            rootfs_path=rootfs,
        )
        self._write(state)
        return state

    def get(self, id: str) -> ContainerState:
        """Load a container by exact id or unique prefix.

        Raises ``KeyError`` if nothing matches and ``ValueError`` if the
        prefix is ambiguous.
        """
        exact = self._state_path(id)
        if exact.exists():
            return self._read(exact)

        matches = [entry.name for entry in self._containers.iterdir() if entry.name.startswith(id)]
        if not matches:
            raise KeyError(f"container not found: {id}")
        if len(matches) > 1:
            raise ValueError(
                f"ambiguous container prefix '{id}': matches {len(matches)} containers"
            )
        return self._read(self._state_path(matches[0]))

    def update(self, state: ContainerState) -> None:
        """Persist an updated state."""
        self._write(state)

    def list(self) -> list[ContainerState]:
        """All containers, oldest first."""
        states = [
            self._read(entry / "state.json")
            for entry in self._containers.iterdir()
            if entry.is_dir() and (entry / "state.json").exists()
        ]
        states.sort(key=lambda state: state.created_at)
        return states

    def remove(self, id: str) -> None:
        """Remove a container (by id or prefix) and its whole directory."""
        state = self.get(id)
        shutil.rmtree(self._containers / state.id)