"""Public interface for the resource staging helpers."""

from .archives import ArchiveEntry, ArchiveReader, open_archive
from .cleanup import CleanupRegistry, default_registry, register_exit_cleanup
from .config import StagingConfig, load_config
from .errors import (
    ArchiveReadError,
    ConfigurationError,
    DirectoryCreationError,
    ExtractionError,
    InvalidPathFormat,
    PathDecodingError,
    ResourceNotFound,
    StagingError,
)
from .extraction import ArchiveExtractor, extract_archive_resource
from .fs_utils import decode_path, mkdirp, recursive_delete, to_portable_path_form
from .locator import (
    ArchiveScope,
    ArchivedEntry,
    DirectoryScope,
    LookupScope,
    PackageScope,
    PlainFile,
    SystemScope,
    locate,
    parse_location,
)
from .resolver import PathResolver, get_filename_for_resource

__all__ = [
    "ArchiveEntry",
    "ArchiveExtractor",
    "ArchiveReadError",
    "ArchiveReader",
    "ArchiveScope",
    "ArchivedEntry",
    "CleanupRegistry",
    "ConfigurationError",
    "DirectoryCreationError",
    "DirectoryScope",
    "ExtractionError",
    "InvalidPathFormat",
    "LookupScope",
    "PackageScope",
    "PathDecodingError",
    "PathResolver",
    "PlainFile",
    "ResourceNotFound",
    "StagingConfig",
    "StagingError",
    "SystemScope",
    "decode_path",
    "default_registry",
    "extract_archive_resource",
    "get_filename_for_resource",
    "load_config",
    "locate",
    "mkdirp",
    "open_archive",
    "parse_location",
    "recursive_delete",
    "register_exit_cleanup",
    "to_portable_path_form",
]
