"""Exception types raised by the resource staging helpers."""

from __future__ import annotations

import typing as typ

__all__ = [
    "ArchiveReadError",
    "ConfigurationError",
    "DirectoryCreationError",
    "ExtractionError",
    "InvalidPathFormat",
    "PathDecodingError",
    "ResourceNotFound",
    "StagingError",
]


class StagingError(RuntimeError):
    """Base class for every failure surfaced by :mod:`resource_staging`."""


class ConfigurationError(StagingError):
    """Raised when staging configuration values are missing or invalid."""


class ResourceNotFound(StagingError):
    """Raised when no lookup scope can resolve a resource name.

    Attributes
    ----------
    name : str
        Resource name that was requested.
    scopes : tuple
        Every scope consulted, in search order.
    """

    def __init__(self, name: str, scopes: typ.Sequence[object]) -> None:
        self.name = name
        self.scopes = tuple(scopes)
        tried = ", ".join(repr(scope) for scope in self.scopes) or "<none>"
        message = (
            f"Resource with path {name!r} could not be found in any of "
            f"these scopes: [{tried}]"
        )
        super().__init__(message)


class ArchiveReadError(StagingError):
    """Raised when an archive cannot be opened or parsed."""


class ExtractionError(StagingError):
    """Raised when a single archive entry fails to copy.

    Attributes
    ----------
    entry_name : str
        Name of the entry inside the archive.
    archive : str
        Filesystem path of the archive being extracted.
    """

    def __init__(self, entry_name: str, archive: str) -> None:
        self.entry_name = entry_name
        self.archive = archive
        message = (
            f"Failed to extract resource {entry_name!r} from archive {archive}"
        )
        super().__init__(message)


class DirectoryCreationError(StagingError):
    """Raised when :func:`~resource_staging.fs_utils.mkdirp` fails."""


class PathDecodingError(StagingError):
    """Raised when a location URL is not a syntactically valid URI."""


class InvalidPathFormat(StagingError):
    """Raised when a path matches neither Windows nor MinGW drive syntax."""
