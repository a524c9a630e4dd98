"""Locate named resources across an ordered set of lookup scopes.

A scope maps a ``/``-separated resource name to a location URL: either
``file:///abs/path`` for a plain file or ``file:///abs/archive.zip!/inner``
for an entry packaged inside an archive. :func:`locate` walks the caller's
scopes, then the current working directory, then every ``sys.path`` entry,
and returns the first hit as a :data:`LocationDescriptor`.

Usage
-----
Resolve a resource bundled beside the calling package::

    from resource_staging.locator import PackageScope, locate

    descriptor = locate("templates/Dockerfile", [PackageScope("myapp")])
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import sys
import typing as typ
import zipfile
from pathlib import Path
from urllib.parse import quote, unquote

from .archives import archive_contains, is_archive, open_archive
from .errors import ArchiveReadError, ResourceNotFound
from .fs_utils import decode_path

__all__ = [
    "ArchiveScope",
    "ArchivedEntry",
    "DirectoryScope",
    "LocationDescriptor",
    "LookupScope",
    "PackageScope",
    "PlainFile",
    "SystemScope",
    "archive_location",
    "current_context_scope",
    "locate",
    "parse_location",
    "search_order",
]


@typ.runtime_checkable
class LookupScope(typ.Protocol):
    """Resolution context mapping resource names to location URLs."""

    def find_resource(self, name: str) -> str | None:
        """Return the location URL for ``name`` or ``None`` when absent."""
        ...


@dataclasses.dataclass(slots=True, frozen=True)
class PlainFile:
    """A resource that already exists as a file or directory on disk."""

    absolute_path: Path


@dataclasses.dataclass(slots=True, frozen=True)
class ArchivedEntry:
    """A resource packaged inside an archive."""

    archive_path: Path
    internal_path: str


LocationDescriptor = PlainFile | ArchivedEntry


def archive_location(archive: Path, internal_path: str) -> str:
    """Return the ``file:...!/inner`` URL for ``internal_path`` in ``archive``.

    The entry path is percent-encoded so a ``!`` inside it cannot be taken
    for the archive separator.
    """
    inner = quote(internal_path.lstrip("/"), safe="/")
    return f"{Path(archive).absolute().as_uri()}!/{inner}"


@dataclasses.dataclass(slots=True, frozen=True)
class DirectoryScope:
    """Look resources up beneath a directory."""

    root: Path

    def find_resource(self, name: str) -> str | None:
        candidate = Path(self.root) / name.lstrip("/")
        if not candidate.exists():
            return None
        return candidate.absolute().as_uri()


@dataclasses.dataclass(slots=True, frozen=True)
class ArchiveScope:
    """Look resources up inside a zip or tar archive."""

    archive: Path

    def find_resource(self, name: str) -> str | None:
        try:
            with open_archive(self.archive) as reader:
                found = archive_contains(reader, name)
        except ArchiveReadError:
            return None
        return archive_location(self.archive, name) if found else None


@dataclasses.dataclass(slots=True, frozen=True)
class PackageScope:
    """Look resources up inside an importable package.

    Regular packages resolve to plain files; packages imported from a zip
    archive resolve to archive entries.
    """

    package: str

    def find_resource(self, name: str) -> str | None:
        try:
            root = importlib.resources.files(self.package)
        except (ModuleNotFoundError, TypeError):
            return None
        resource = root.joinpath(*_segments(name))
        if isinstance(resource, zipfile.Path):
            if not resource.exists():
                return None
            archive = Path(typ.cast(str, resource.root.filename))
            return archive_location(archive, resource.at)
        if isinstance(resource, Path):
            return resource.absolute().as_uri() if resource.exists() else None
        return None


@dataclasses.dataclass(slots=True, frozen=True)
class SystemScope:
    """System-wide scope consulting every ``sys.path`` entry in order."""

    def find_resource(self, name: str) -> str | None:
        for entry in list(sys.path):
            scope = _scope_for_path(Path(entry or "."))
            if scope is not None and (found := scope.find_resource(name)):
                return found
        return None


def current_context_scope() -> DirectoryScope:
    """Return the scope for the current execution context."""
    return DirectoryScope(Path.cwd())


def search_order(scopes: typ.Iterable[LookupScope] = ()) -> list[LookupScope]:
    """Return ``scopes`` followed by the ambient scopes, without duplicates."""
    ordered = [*scopes, current_context_scope(), SystemScope()]
    return list(dict.fromkeys(ordered))


def locate(
    name: str, scopes: typ.Iterable[LookupScope] = ()
) -> LocationDescriptor:
    """Return the location of ``name`` in the first scope that has it.

    Parameters
    ----------
    name : str
        ``/``-separated resource name.
    scopes : Iterable[LookupScope]
        Caller scopes tried before the current working directory and the
        system-wide scope.

    Raises
    ------
    ResourceNotFound
        Raised when no scope resolves ``name``; lists every scope tried.
    """
    tried = search_order(scopes)
    for scope in tried:
        if (location := scope.find_resource(name)) is not None:
            return parse_location(location)
    raise ResourceNotFound(name, tried)


def parse_location(location: str) -> LocationDescriptor:
    """Parse a location URL into a :data:`LocationDescriptor`.

    Text before the last ``!`` names the archive; the remainder is the
    percent-encoded entry path inside it. ``jar:`` prefixes are accepted.

    Examples
    --------
    >>> parse_location("file:/opt/app.jar!/conf/")  # doctest: +SKIP
    ArchivedEntry(archive_path=PosixPath('/opt/app.jar'), internal_path='conf/')
    """
    url = location.removeprefix("jar:")
    archive_url, marker, internal = url.rpartition("!")
    if not marker:
        return PlainFile(Path(decode_path(url)))
    return ArchivedEntry(
        Path(decode_path(archive_url)), unquote(internal.lstrip("/"))
    )


def _segments(name: str) -> list[str]:
    return [part for part in name.split("/") if part]


def _scope_for_path(path: Path) -> LookupScope | None:
    if path.is_dir():
        return DirectoryScope(path)
    if is_archive(path):
        return ArchiveScope(path)
    return None
