"""Environment helpers shared by the staging configuration loader."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigurationError

__all__ = ["env_path", "env_text"]


def env_text(name: str) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when unset or blank."""
    value = os.environ.get(name, "").strip()
    return value or None


def env_path(name: str) -> Path | None:
    """Return ``Path`` value for ``name`` or ``None`` when it is unset.

    Parameters
    ----------
    name:
        Name of the environment variable to fetch.

    Raises
    ------
    ConfigurationError
        Raised when the variable points at something other than a directory.
    """
    value = env_text(name)
    if value is None:
        return None
    path = Path(value).expanduser()
    if path.exists() and not path.is_dir():
        message = f"Environment variable '{name}' must name a directory: {path}"
        raise ConfigurationError(message)
    return path
