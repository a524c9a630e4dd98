"""Filesystem helpers for staging and cleanup."""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from .errors import DirectoryCreationError, InvalidPathFormat, PathDecodingError

__all__ = [
    "decode_path",
    "mkdirp",
    "recursive_delete",
    "to_portable_path_form",
]

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_ILLEGAL_URI_CHARS = re.compile(r"[\x00-\x20\x7f\"<>\\^`{|}]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WINDOWS_DRIVE = re.compile(r"^(?P<drive>[A-Za-z]):(?P<rest>/.*)?$")
_MINGW_DRIVE = re.compile(r"^/(?P<drive>[A-Za-z])(?P<rest>/.*)?$")


def recursive_delete(path: Path) -> None:
    """Delete ``path`` and everything beneath it, ignoring failures.

    Children are removed before their parent directory. Missing paths are a
    no-op so repeated calls are safe, and a plain file or symlink root is
    simply unlinked.

    Examples
    --------
    >>> root = Path("/tmp/example-tree")  # doctest: +SKIP
    >>> (root / "nested").mkdir(parents=True, exist_ok=True)  # doctest: +SKIP
    >>> recursive_delete(root)  # doctest: +SKIP
    >>> root.exists()  # doctest: +SKIP
    False
    """
    path = Path(path)
    logger.debug("Removing staged path %s", path)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink(missing_ok=True)
            return
    except OSError:
        return
    shutil.rmtree(path, ignore_errors=True)


def mkdirp(directory: Path) -> None:
    """Create ``directory`` plus any missing parents.

    Raises
    ------
    DirectoryCreationError
        Raised when the directory cannot be created, including when a file
        already occupies the path.
    """
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        message = f"Failed to create directory at: {directory}"
        raise DirectoryCreationError(message) from exc


def to_portable_path_form(path: str) -> str:
    """Return the MinGW-compatible form of a Windows path.

    Both ``C:\\Users\\me`` and ``/c/Users/me`` become ``//c/Users/me``: the
    drive letter is lower-cased, its colon dropped and backslashes turned
    into forward slashes.

    Raises
    ------
    InvalidPathFormat
        Raised when ``path`` does not start with a drive letter in either
        form.

    Examples
    --------
    >>> to_portable_path_form("C:\\\\Users\\\\me\\\\file.txt")
    '//c/Users/me/file.txt'
    >>> to_portable_path_form("/c/Users/me/file.txt")
    '//c/Users/me/file.txt'
    """
    normalised = path.replace("\\", "/")
    match = _WINDOWS_DRIVE.match(normalised) or _MINGW_DRIVE.match(normalised)
    if match is None:
        message = f"Expected a Windows drive path such as 'C:\\dir' or '/c/dir': {path!r}"
        raise InvalidPathFormat(message)
    return f"//{match['drive'].lower()}{match['rest'] or ''}"


def decode_path(location: str) -> str:
    """Return the decoded filesystem path named by the URL ``location``.

    Percent escapes such as ``%20`` are converted back to the characters
    they encode.

    Raises
    ------
    PathDecodingError
        Raised when ``location`` is not a syntactically valid hierarchical
        URI.

    Examples
    --------
    >>> decode_path("file:/tmp/with%20space/file.txt")  # doctest: +SKIP
    '/tmp/with space/file.txt'
    """
    _validate_uri(location)
    try:
        parts = urlsplit(location)
    except ValueError as exc:
        message = f"Malformed resource URI: {location!r}"
        raise PathDecodingError(message) from exc

    url_path = parts.path
    if not url_path.startswith("/"):
        message = f"Resource URI has no absolute path component: {location!r}"
        raise PathDecodingError(message)
    if parts.netloc and parts.netloc.lower() != "localhost":
        url_path = f"//{parts.netloc}{url_path}"
    return url2pathname(url_path)


def _validate_uri(location: str) -> None:
    if not _SCHEME.match(location):
        message = f"Resource URI is missing a scheme: {location!r}"
        raise PathDecodingError(message)
    if bad := _ILLEGAL_URI_CHARS.search(location):
        message = (
            f"Illegal character {bad.group()!r} at index {bad.start()} "
            f"in resource URI: {location!r}"
        )
        raise PathDecodingError(message)
    if bad := _BAD_ESCAPE.search(location):
        message = (
            f"Malformed escape at index {bad.start()} in resource URI: {location!r}"
        )
        raise PathDecodingError(message)
