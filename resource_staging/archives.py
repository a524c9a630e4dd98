"""Archive readers exposing a common entry enumeration interface.

Extraction only needs to list entries and open one for reading, so zip and
tar containers sit behind the same small :class:`ArchiveReader` protocol.
"""

from __future__ import annotations

import abc
import dataclasses
import tarfile
import typing as typ
import zipfile
from pathlib import Path

from .errors import ArchiveReadError

__all__ = [
    "ArchiveEntry",
    "ArchiveReader",
    "TarArchiveReader",
    "ZipArchiveReader",
    "archive_contains",
    "entry_relative_path",
    "is_archive",
    "open_archive",
]


@dataclasses.dataclass(slots=True, frozen=True)
class ArchiveEntry:
    """Metadata for a single archive member."""

    name: str
    is_dir: bool
    member: object = dataclasses.field(default=None, compare=False, repr=False)


class ArchiveReader(typ.Protocol):
    """Capability required to walk and read an archive."""

    path: Path

    def list_entries(self) -> typ.Iterator[ArchiveEntry]:
        """Yield every entry in archive order."""
        ...

    def open_entry(self, entry: ArchiveEntry) -> typ.BinaryIO:
        """Return a readable binary stream for ``entry``."""
        ...

    def close(self) -> None:
        """Release the underlying archive handle."""
        ...

    def __enter__(self) -> ArchiveReader: ...

    def __exit__(self, *exc_info: object) -> None: ...


class _ReaderBase(abc.ABC):
    path: Path

    @abc.abstractmethod
    def list_entries(self) -> typ.Iterator[ArchiveEntry]: ...

    @abc.abstractmethod
    def open_entry(self, entry: ArchiveEntry) -> typ.BinaryIO: ...

    @abc.abstractmethod
    def close(self) -> None: ...

    def __enter__(self) -> typ.Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ZipArchiveReader(_ReaderBase):
    """Read zip-family archives (``.zip``, ``.jar``, ``.whl``)."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._zip = zipfile.ZipFile(self.path)

    def list_entries(self) -> typ.Iterator[ArchiveEntry]:
        for info in self._zip.infolist():
            yield ArchiveEntry(info.filename, info.is_dir(), info)

    def open_entry(self, entry: ArchiveEntry) -> typ.BinaryIO:
        return typ.cast(typ.BinaryIO, self._zip.open(entry.member or entry.name))

    def close(self) -> None:
        self._zip.close()


class TarArchiveReader(_ReaderBase):
    """Read tar archives, compressed or not."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._tar = tarfile.open(self.path, mode="r:*")

    def list_entries(self) -> typ.Iterator[ArchiveEntry]:
        for member in self._tar:
            name = _strip_current_dir(member.name)
            if name:
                yield ArchiveEntry(name, member.isdir(), member)

    def open_entry(self, entry: ArchiveEntry) -> typ.BinaryIO:
        member = entry.member if entry.member is not None else entry.name
        stream = self._tar.extractfile(member)
        if stream is None:
            message = f"Tar member {entry.name!r} has no readable content"
            raise OSError(message)
        return typ.cast(typ.BinaryIO, stream)

    def close(self) -> None:
        self._tar.close()


def is_archive(path: Path) -> bool:
    """Return ``True`` when ``path`` is a readable zip or tar file."""
    path = Path(path)
    if not path.is_file():
        return False
    try:
        return zipfile.is_zipfile(path) or tarfile.is_tarfile(path)
    except OSError:
        return False


def open_archive(path: Path) -> ArchiveReader:
    """Open ``path`` with the reader matching its container format.

    Raises
    ------
    ArchiveReadError
        Raised when the archive is missing, unreadable or of an unknown
        format.
    """
    path = Path(path)
    try:
        if zipfile.is_zipfile(path):
            return ZipArchiveReader(path)
        if tarfile.is_tarfile(path):
            return TarArchiveReader(path)
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as exc:
        message = f"Failed to open archive {path}: {exc}"
        raise ArchiveReadError(message) from exc
    message = f"Unsupported or corrupt archive: {path}"
    raise ArchiveReadError(message)


def entry_relative_path(entry_name: str, prefix: str) -> str | None:
    """Return ``entry_name`` relative to ``prefix`` or ``None`` when outside it.

    Matching happens on whole path segments: ``conf`` selects ``conf`` and
    everything under ``conf/`` but not ``config.txt``. An empty prefix
    selects the whole archive. An exact match yields ``""``.

    Examples
    --------
    >>> entry_relative_path("docker/conf/app.yml", "docker/")
    'conf/app.yml'
    >>> entry_relative_path("docker/Dockerfile.dev", "docker/Dockerfile") is None
    True
    """
    base = prefix.strip("/")
    if not base:
        return entry_name.lstrip("/")
    name = entry_name.rstrip("/")
    if name == base:
        return ""
    if entry_name.startswith(f"{base}/"):
        return entry_name[len(base) + 1 :]
    return None


def archive_contains(reader: ArchiveReader, name: str) -> bool:
    """Return ``True`` when ``name`` is an entry or directory in ``reader``."""
    return any(
        entry_relative_path(entry.name, name) is not None
        for entry in reader.list_entries()
    )


def _strip_current_dir(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return "" if name == "." else name
