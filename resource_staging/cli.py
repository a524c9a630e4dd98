"""Command-line entry point for the resource staging helpers.

Examples
--------
Resolve a resource packaged in a jar, keeping the staged copy on disk::

    resource-staging resolve docker/ --scope build/libs/app.jar --keep

Convert a Windows path for MinGW tooling::

    resource-staging portable-path 'C:\\Users\\me\\context'
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import Parameter

from .archives import is_archive
from .cleanup import CleanupRegistry
from .config import load_config
from .errors import StagingError
from .extraction import ArchiveExtractor
from .fs_utils import to_portable_path_form
from .locator import ArchiveScope, DirectoryScope, LookupScope
from .resolver import PathResolver

app = cyclopts.App(
    name="resource-staging",
    help="Resolve resources to filesystem paths for build contexts.",
)


def _fail(exc: Exception) -> typ.NoReturn:
    print(f"resource-staging: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


def scope_for(path: Path) -> LookupScope:
    """Return the lookup scope for a ``--scope`` argument."""
    if is_archive(path):
        return ArchiveScope(path.absolute())
    return DirectoryScope(path.absolute())


def _discard_hook(_func: typ.Callable[[], None]) -> None:
    """Shutdown hook for ``--keep``: nothing is scheduled."""


@app.command
def resolve(
    name: str,
    *,
    scope: typ.Annotated[
        list[Path] | None,
        Parameter(help="Directory or archive searched before the defaults."),
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="TOML file with a [staging] table.")
    ] = None,
    keep: typ.Annotated[
        bool, Parameter(help="Leave staged copies on disk after exiting.")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log staging activity.")] = False,
) -> None:
    """Print the filesystem path for resource ``name``.

    Parameters
    ----------
    name:
        ``/``-separated resource name (for example ``"docker/Dockerfile"``).
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        staging_config = load_config(config)
        registry = CleanupRegistry(_discard_hook) if keep else None
        extractor = ArchiveExtractor(staging_config, registry)
        scopes = [scope_for(Path(item)) for item in scope or []]
        resolved = PathResolver(scopes, extractor).resolve(name)
    except (FileNotFoundError, StagingError) as exc:
        _fail(exc)
    print(resolved)


@app.command
def portable_path(path: str) -> None:
    """Print the MinGW-compatible form of a Windows ``path``."""
    try:
        print(to_portable_path_form(path))
    except StagingError as exc:
        _fail(exc)


def main() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
