"""Extract archive-packaged resources into temporary staging directories.

Every call to :meth:`ArchiveExtractor.extract` creates a fresh directory
named ``.<prefix>-tmp-<suffix>`` under the staging root, copies the matching
entries into it, and registers it for deletion at process exit.

Usage
-----
Materialise a directory packaged inside a jar::

    from pathlib import Path
    from resource_staging.extraction import ArchiveExtractor

    staged = ArchiveExtractor().extract(Path("/opt/app.jar"), "docker/")
    print(sorted(p.name for p in staged.iterdir()))
"""

from __future__ import annotations

import logging
import secrets
import shutil
import tarfile
import typing as typ
import zipfile
from pathlib import Path

from .archives import ArchiveEntry, ArchiveReader, entry_relative_path, open_archive
from .cleanup import CleanupRegistry, default_registry
from .config import StagingConfig
from .errors import ArchiveReadError, ExtractionError, StagingError
from .fs_utils import mkdirp, recursive_delete
from .locator import ArchivedEntry, parse_location

__all__ = [
    "BASE58_ALPHABET",
    "ArchiveExtractor",
    "extract_archive_resource",
    "random_suffix",
]

logger = logging.getLogger(__name__)

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

ArchiveOpener = typ.Callable[[Path], ArchiveReader]


def random_suffix(length: int = 5) -> str:
    """Return ``length`` random base58 characters."""
    return "".join(secrets.choice(BASE58_ALPHABET) for _ in range(length))


class ArchiveExtractor:
    """Copy archive entry subtrees into uniquely named staging directories.

    Parameters
    ----------
    config : StagingConfig | None
        Naming and placement settings; defaults apply when omitted.
    registry : CleanupRegistry | None
        Registry receiving each staging directory. Defaults to the
        process-wide registry.
    opener : Callable[[Path], ArchiveReader], default=open_archive
        Factory returning an :class:`~resource_staging.archives.ArchiveReader`.
    """

    def __init__(
        self,
        config: StagingConfig | None = None,
        registry: CleanupRegistry | None = None,
        opener: ArchiveOpener = open_archive,
    ) -> None:
        self.config = config or StagingConfig()
        self.registry = registry if registry is not None else default_registry()
        self._opener = opener

    def new_staging_dir(self) -> Path:
        """Create and return an empty staging directory."""
        name = self.config.staging_name(random_suffix(self.config.suffix_length))
        staging_dir = self.config.resolve_staging_root() / name
        recursive_delete(staging_dir)
        mkdirp(staging_dir)
        return staging_dir

    def extract(self, archive_path: Path, internal_path: str) -> Path:
        """Extract entries of ``archive_path`` starting with ``internal_path``.

        Entry names are matched by prefix on whole path segments, so a
        directory prefix pulls its whole subtree while ``conf`` never selects
        a sibling such as ``config.txt``. When the prefix names a single
        file, that file is written at the returned path itself.

        Parameters
        ----------
        archive_path : Path
            Archive on disk.
        internal_path : str
            Entry name prefix inside the archive.

        Returns
        -------
        Path
            Absolute path of the staging directory (or staged file).

        Raises
        ------
        ArchiveReadError
            Raised when the archive cannot be opened or parsed.
        ExtractionError
            Raised when an entry fails to copy. Extraction stops at the first
            failure.
        """
        archive_path = Path(archive_path)
        staging_dir = self.new_staging_dir()
        try:
            with self._opener(archive_path) as reader:
                for entry in reader.list_entries():
                    relative = entry_relative_path(entry.name, internal_path)
                    if relative is not None:
                        logger.debug(
                            "Copying archive resource(s) from %s!/%s to %s",
                            archive_path,
                            internal_path,
                            staging_dir,
                        )
                        _copy_entry(reader, entry, relative, staging_dir)
        except StagingError:
            recursive_delete(staging_dir)
            raise
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as exc:
            recursive_delete(staging_dir)
            message = (
                f"Failed to process archive when extracting {internal_path!r}: "
                f"{archive_path}"
            )
            raise ArchiveReadError(message) from exc

        self.registry.register(staging_dir)
        return staging_dir.absolute()


def _copy_entry(
    reader: ArchiveReader, entry: ArchiveEntry, relative: str, to_root: Path
) -> None:
    if entry.is_dir:
        return
    destination = to_root / relative if relative else to_root
    try:
        if destination == to_root:
            recursive_delete(to_root)
        mkdirp(destination.parent)
        destination.unlink(missing_ok=True)
        with reader.open_entry(entry) as source, destination.open("wb") as target:
            shutil.copyfileobj(source, target)
    except (
        OSError, KeyError, zipfile.BadZipFile, tarfile.TarError, StagingError
    ) as exc:
        logger.error(
            "Failed to extract resource %s from archive %s",
            entry.name,
            reader.path,
            exc_info=True,
        )
        raise ExtractionError(entry.name, str(reader.path)) from exc


def extract_archive_resource(
    location: str,
    config: StagingConfig | None = None,
    registry: CleanupRegistry | None = None,
) -> Path:
    """Extract the resource named by a ``file:/archive.jar!/inner`` URL.

    Raises
    ------
    ValueError
        Raised when ``location`` does not name an archive entry.
    """
    descriptor = parse_location(location)
    if not isinstance(descriptor, ArchivedEntry):
        message = f"Location does not point inside an archive: {location}"
        raise ValueError(message)
    extractor = ArchiveExtractor(config, registry)
    return extractor.extract(descriptor.archive_path, descriptor.internal_path)
