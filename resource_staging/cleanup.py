"""Exit-time cleanup registry for staged paths.

A :class:`CleanupRegistry` moves through three phases: it is created, it
accumulates paths as staging directories are produced, and it deletes all of
them once when the interpreter shuts down. Components that create temporary
paths receive the registry explicitly, so tests can pass one whose shutdown
hook only records.
"""

from __future__ import annotations

import atexit
import logging
import threading
import typing as typ
from pathlib import Path

from .fs_utils import recursive_delete

__all__ = ["CleanupRegistry", "default_registry", "register_exit_cleanup"]

logger = logging.getLogger(__name__)

ShutdownHook = typ.Callable[[typ.Callable[[], None]], object]


class CleanupRegistry:
    """Collect paths that must be deleted when the process exits.

    Parameters
    ----------
    hook : Callable, default=atexit.register
        Function used to schedule :meth:`run_all` for interpreter shutdown.
        It is called once, on the first registration.
    """

    def __init__(self, hook: ShutdownHook = atexit.register) -> None:
        self._hook = hook
        self._paths: list[Path] = []
        self._lock = threading.Lock()
        self._installed = False

    @property
    def pending(self) -> tuple[Path, ...]:
        """Paths registered and not yet cleaned, in registration order."""
        with self._lock:
            return tuple(self._paths)

    def register(self, path: Path) -> None:
        """Schedule ``path`` for recursive deletion at shutdown.

        Registrations are not de-duplicated.
        """
        with self._lock:
            self._paths.append(Path(path))
            if not self._installed:
                self._hook(self.run_all)
                self._installed = True
        logger.debug("Registered %s for deletion at exit", path)

    def run_all(self) -> None:
        """Delete every registered path once."""
        with self._lock:
            paths, self._paths = self._paths, []
        for path in paths:
            recursive_delete(path)


_default_registry: CleanupRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> CleanupRegistry:
    """Return the process-wide registry backed by :mod:`atexit`."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = CleanupRegistry()
        return _default_registry


def register_exit_cleanup(
    path: Path, registry: CleanupRegistry | None = None
) -> None:
    """Delete ``path`` recursively at normal process termination."""
    target = registry if registry is not None else default_registry()
    target.register(path)
