"""Shared helpers for building archives and inspecting staged trees."""

from __future__ import annotations

import io
import tarfile
import typing as typ
import zipfile
from pathlib import Path

__all__ = ["DOCKER_ENTRIES", "RecordingHook", "read_tree", "write_tar", "write_zip"]

DOCKER_ENTRIES: dict[str, bytes | None] = {
    "docker/": None,
    "docker/Dockerfile": b"FROM alpine:3.20\nCOPY conf /etc/app\n",
    "docker/conf/": None,
    "docker/conf/app.yml": b"port: 8080\n",
    "docker/conf/blob.bin": bytes(range(256)),
    "other/readme.txt": b"not staged",
}


def write_zip(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a zip archive where ``None`` values become directory markers.

    Parameters
    ----------
    path : Path
        Destination archive path; parent directories are created.
    entries : dict[str, bytes | None]
        Entry names mapped to their contents.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, payload in entries.items():
            if payload is None:
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, payload)
    return path


def write_tar(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a gzip-compressed tar archive mirroring :func:`write_zip`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as archive:
        for name, payload in entries.items():
            info = tarfile.TarInfo(name.rstrip("/"))
            if payload is None:
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
            else:
                info.size = len(payload)
                archive.addfile(info, io.BytesIO(payload))
    return path


def read_tree(root: Path) -> dict[str, bytes]:
    """Return every file under ``root`` keyed by its POSIX relative path."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class RecordingHook:
    """Shutdown hook that records scheduled callbacks instead of running them."""

    def __init__(self) -> None:
        self.calls: list[typ.Callable[[], None]] = []

    def __call__(self, func: typ.Callable[[], None]) -> None:
        self.calls.append(func)
