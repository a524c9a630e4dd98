"""Resolve resource names to concrete filesystem paths.

This is the entry point used when preparing a build context: plain files
come back as their own absolute path, archive-packaged resources come back
as a staging directory populated from the archive.
"""

from __future__ import annotations

import typing as typ

from .extraction import ArchiveExtractor
from .locator import ArchivedEntry, LookupScope, PlainFile, locate

__all__ = ["PathResolver", "get_filename_for_resource"]


class PathResolver:
    """Turn resource names into absolute, decoded path strings.

    Parameters
    ----------
    scopes : Iterable[LookupScope]
        Caller scopes searched before the ambient ones.
    extractor : ArchiveExtractor | None
        Extractor used for archive-packaged resources.

    Examples
    --------
    >>> resolver = PathResolver([DirectoryScope(Path("assets"))])  # doctest: +SKIP
    >>> resolver.resolve("Dockerfile")  # doctest: +SKIP
    '/work/assets/Dockerfile'
    """

    def __init__(
        self,
        scopes: typ.Iterable[LookupScope] = (),
        extractor: ArchiveExtractor | None = None,
    ) -> None:
        self.scopes = tuple(scopes)
        self.extractor = extractor or ArchiveExtractor()

    def resolve(self, name: str) -> str:
        """Return the absolute filesystem path for resource ``name``.

        Errors from lookup and extraction propagate unchanged.
        """
        descriptor = locate(name, self.scopes)
        match descriptor:
            case PlainFile(absolute_path=path):
                return str(path)
            case ArchivedEntry(archive_path=archive, internal_path=internal):
                return str(self.extractor.extract(archive, internal))
        message = f"Unsupported location descriptor: {descriptor!r}"
        raise TypeError(message)


def get_filename_for_resource(name: str, *scopes: LookupScope) -> str:
    """Resolve ``name`` using ``scopes`` and the default extractor."""
    return PathResolver(scopes).resolve(name)
