"""Configuration model and loader for the staging helpers.

The defaults need no configuration at all; a TOML file and environment
variables only override where staging directories are created and how they
are named.

Usage
-----
Load configuration from an optional file::

    from pathlib import Path
    from resource_staging.config import load_config

    config = load_config(Path("resource-staging.toml"))
    print(f"Staging under: {config.resolve_staging_root()}")

The file holds a single ``[staging]`` table::

    [staging]
    tmp_prefix = "mytool"
    staging_root = "build/tmp"
    suffix_length = 5
"""

from __future__ import annotations

import dataclasses
import re
import typing as typ
from pathlib import Path

import tomllib

from .environment import env_path, env_text
from .errors import ConfigurationError

__all__ = [
    "DEFAULT_TMP_PREFIX",
    "PREFIX_ENV_VAR",
    "ROOT_ENV_VAR",
    "StagingConfig",
    "load_config",
]

DEFAULT_TMP_PREFIX = "resource-staging"
PREFIX_ENV_VAR = "RESOURCE_STAGING_PREFIX"
ROOT_ENV_VAR = "RESOURCE_STAGING_ROOT"

_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclasses.dataclass(slots=True)
class StagingConfig:
    """Settings controlling staging directory placement and naming.

    Parameters
    ----------
    tmp_prefix : str, default="resource-staging"
        Tool prefix embedded in ``.<prefix>-tmp-<suffix>`` directory names.
    staging_root : Path | None, optional
        Directory that receives staging directories. ``None`` means the
        current working directory at extraction time.
    suffix_length : int, default=5
        Number of random characters appended to each staging directory name.

    Examples
    --------
    >>> config = StagingConfig(tmp_prefix="demo")  # doctest: +SKIP
    >>> config.staging_name("abcde")  # doctest: +SKIP
    '.demo-tmp-abcde'
    """

    tmp_prefix: str = DEFAULT_TMP_PREFIX
    staging_root: Path | None = None
    suffix_length: int = 5

    def resolve_staging_root(self) -> Path:
        """Return the absolute directory that staging directories live under."""
        root = self.staging_root if self.staging_root is not None else Path.cwd()
        return Path(root).absolute()

    def staging_name(self, suffix: str) -> str:
        """Return the staging directory name for ``suffix``."""
        return f".{self.tmp_prefix}-tmp-{suffix}"


def load_config(config_file: Path | None = None) -> StagingConfig:
    """Load staging configuration from ``config_file`` and the environment.

    Parameters
    ----------
    config_file : Path | None
        Optional TOML file with a ``[staging]`` table.

    Returns
    -------
    StagingConfig
        Configuration with file values applied first and environment
        overrides applied last.

    Raises
    ------
    FileNotFoundError
        Raised when ``config_file`` is given but absent.
    ConfigurationError
        Raised when a value has the wrong type or an unusable format.
    """
    section: dict[str, typ.Any] = {}
    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.is_file():
            message = f"Configuration file not found at {config_file}"
            raise FileNotFoundError(message)
        section = _extract_section(_load_toml(config_file), config_file)

    tmp_prefix = env_text(PREFIX_ENV_VAR) or section.get(
        "tmp_prefix", DEFAULT_TMP_PREFIX
    )
    staging_root = env_path(ROOT_ENV_VAR)
    if staging_root is None and (root_value := section.get("staging_root")):
        staging_root = _relative_to_file(root_value, config_file)

    return StagingConfig(
        tmp_prefix=_validate_prefix(tmp_prefix),
        staging_root=staging_root,
        suffix_length=_validate_suffix_length(section.get("suffix_length", 5)),
    )


def _load_toml(path: Path) -> dict[str, typ.Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        message = f"Invalid TOML in {path}: {exc}"
        raise ConfigurationError(message) from exc


def _extract_section(data: dict[str, typ.Any], config_path: Path) -> dict[str, typ.Any]:
    section = data.get("staging", {})
    if not isinstance(section, dict):
        message = f"[staging] in {config_path} must be a table"
        raise ConfigurationError(message)
    return section


def _relative_to_file(value: object, config_file: Path | None) -> Path:
    if not isinstance(value, str):
        message = f"staging_root must be a string, got {type(value).__name__}"
        raise ConfigurationError(message)
    path = Path(value).expanduser()
    if not path.is_absolute() and config_file is not None:
        path = config_file.parent / path
    return path


def _validate_prefix(value: object) -> str:
    if not isinstance(value, str) or not _PREFIX_PATTERN.match(value):
        message = f"Invalid staging prefix: {value!r}"
        raise ConfigurationError(message)
    return value


def _validate_suffix_length(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        message = f"suffix_length must be a positive integer, got {value!r}"
        raise ConfigurationError(message)
    return value
