"""On-disk store of image manifests, one directory per image name."""

from __future__ import annotations

import json
import os
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any


class ImageStore:
    """Manifests stored as ``<root>/<name>/manifest.json``.

    A manifest is a JSON-compatible mapping that carries at least a ``name``.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create image store at {self.root}: {exc}") from exc

    def save(self, manifest: Mapping[str, Any]) -> None:
        """Write ``manifest`` under its name, replacing any earlier copy."""
        try:
            name = manifest["name"]
        except KeyError as exc:
            raise ValueError("manifest has no name") from exc
        directory = self.root / name
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "manifest.json").write_text(json.dumps(dict(manifest), indent=2))

    def load(self, name: str) -> dict[str, Any]:
        """Read the manifest of image ``name``; raise ``KeyError`` if absent."""
        path = self.root / name / "manifest.json"
        try:
            text = path.read_text()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise KeyError(f"image not found: {name}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"failed to parse manifest: {exc}") from exc

    def list(self) -> list[str]:
        """Sorted names of all stored images."""
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_dir() and (entry / "manifest.json").exists()
        )

    def remove(self, name: str) -> None:
        """Delete image ``name`` and its directory; raise ``KeyError`` if absent."""
        directory = self.root / name
        if not directory.is_dir():
            raise KeyError(f"failed to remove image: {name}")
        shutil.rmtree(directory)