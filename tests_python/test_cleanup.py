"""Tests for the exit-time cleanup registry."""

from __future__ import annotations

from pathlib import Path

from staging_test_helpers import RecordingHook

from resource_staging import CleanupRegistry, default_registry, register_exit_cleanup


def test_hook_installed_once_on_first_registration(
    registry: CleanupRegistry, shutdown_hook: RecordingHook, tmp_path: Path
) -> None:
    """The shutdown hook is scheduled lazily and only once."""

    assert shutdown_hook.calls == [], "Nothing should be scheduled before use"

    registry.register(tmp_path / "a")
    registry.register(tmp_path / "b")

    assert shutdown_hook.calls == [registry.run_all]


def test_registrations_accumulate_without_deduplication(
    registry: CleanupRegistry, tmp_path: Path
) -> None:
    target = tmp_path / "stage"

    registry.register(target)
    registry.register(target)

    assert registry.pending == (target, target)


def test_run_all_deletes_every_registered_path(
    registry: CleanupRegistry, tmp_path: Path
) -> None:
    """Running the registry removes registered trees and empties it."""

    first = tmp_path / "first"
    (first / "nested").mkdir(parents=True)
    (first / "nested" / "file.txt").write_text("x", encoding="utf-8")
    second = tmp_path / "second.txt"
    second.write_text("y", encoding="utf-8")
    registry.register(first)
    registry.register(second)
    registry.register(tmp_path / "never-created")

    registry.run_all()

    assert not first.exists()
    assert not second.exists()
    assert registry.pending == ()


def test_register_exit_cleanup_uses_given_registry(
    registry: CleanupRegistry, tmp_path: Path
) -> None:
    register_exit_cleanup(tmp_path / "stage", registry)

    assert registry.pending == (tmp_path / "stage",)


def test_default_registry_is_shared() -> None:
    assert default_registry() is default_registry()
