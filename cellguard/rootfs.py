"""Assembling a container root filesystem from image layers."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

ESSENTIAL_DIRS = ("proc", "sys", "dev", "tmp", "etc", "var", "run")


def _copy_tree(src: Path, dest: Path) -> None:
    for entry in src.iterdir():
        target = dest / entry.name
        if entry.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            _copy_tree(entry, target)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(entry, target)


def prepare_rootfs(
    layers: Iterable[str | os.PathLike[str]], target: str | os.PathLike[str]
) -> None:
    """Copy each layer directory into ``target`` in order, later layers overwriting earlier.

    Paths that are not directories are skipped. The directories a process
    expects (``proc``, ``sys``, ``dev``, ``tmp``, ``etc``, ``var``, ``run``)
    are created afterwards if missing.
    """
    target_path = Path(target)
    target_path.mkdir(parents=True, exist_ok=True)

    for layer in layers:
        layer_path = Path(layer)
        if layer_path.is_dir():
            _copy_tree(layer_path, target_path)

    for name in ESSENTIAL_DIRS:
        (target_path / name).mkdir(parents=True, exist_ok=True)