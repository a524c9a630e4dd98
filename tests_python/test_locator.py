"""Tests for resource lookup across scopes."""

from __future__ import annotations

import sys
import typing as typ
import uuid
from pathlib import Path

import pytest
from staging_test_helpers import DOCKER_ENTRIES, write_zip

from resource_staging import (
    ArchiveScope,
    ArchivedEntry,
    DirectoryScope,
    PackageScope,
    PlainFile,
    ResourceNotFound,
    SystemScope,
    locate,
    parse_location,
)
from resource_staging.locator import archive_location, current_context_scope, search_order


@pytest.fixture
def package_name() -> typ.Iterator[str]:
    """Return a unique package name that is unloaded after the test."""
    name = f"staged_pkg_{uuid.uuid4().hex}"
    yield name
    for module in [key for key in sys.modules if key.split(".")[0] == name]:
        sys.modules.pop(module, None)


class TestParseLocation:
    """Tests for location URL parsing."""

    def test_plain_file(self) -> None:
        assert parse_location("file:/tmp/a%20b/c.txt") == PlainFile(Path("/tmp/a b/c.txt"))

    def test_archive_entry(self) -> None:
        descriptor = parse_location("file:/opt/my%20libs/app.jar!/docker/conf/")

        assert descriptor == ArchivedEntry(Path("/opt/my libs/app.jar"), "docker/conf/")

    def test_jar_scheme_prefix(self) -> None:
        descriptor = parse_location("jar:file:/opt/app.jar!/x.txt")

        assert descriptor == ArchivedEntry(Path("/opt/app.jar"), "x.txt")

    def test_last_separator_splits(self) -> None:
        descriptor = parse_location("file:/opt/outer!.jar!/inner.txt")

        assert descriptor == ArchivedEntry(Path("/opt/outer!.jar"), "inner.txt")

    def test_archive_location_round_trip(self, tmp_path: Path) -> None:
        archive = tmp_path / "with space.jar"

        descriptor = parse_location(archive_location(archive, "/docker/"))

        assert descriptor == ArchivedEntry(archive, "docker/")


class TestScopes:
    """Tests for individual lookup scopes."""

    def test_directory_scope(self, tmp_path: Path) -> None:
        (tmp_path / "docker").mkdir()
        (tmp_path / "docker" / "Dockerfile").write_text("FROM scratch", encoding="utf-8")
        scope = DirectoryScope(tmp_path)

        assert scope.find_resource("docker/Dockerfile") == (
            tmp_path / "docker" / "Dockerfile"
        ).as_uri()
        assert scope.find_resource("docker") == (tmp_path / "docker").as_uri()
        assert scope.find_resource("missing.txt") is None

    def test_archive_scope(self, tmp_path: Path) -> None:
        archive = write_zip(tmp_path / "app.jar", DOCKER_ENTRIES)
        scope = ArchiveScope(archive)

        assert scope.find_resource("docker/conf") == archive_location(archive, "docker/conf")
        assert scope.find_resource("docker/missing") is None

    def test_archive_scope_ignores_unreadable_archive(self, tmp_path: Path) -> None:
        assert ArchiveScope(tmp_path / "missing.jar").find_resource("x") is None

    def test_package_scope_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, package_name: str
    ) -> None:
        package_dir = tmp_path / "site" / package_name
        (package_dir / "data").mkdir(parents=True)
        (package_dir / "__init__.py").write_text("", encoding="utf-8")
        (package_dir / "data" / "Dockerfile").write_text("FROM scratch", encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path / "site"))

        scope = PackageScope(package_name)

        assert parse_location(scope.find_resource("data/Dockerfile")) == PlainFile(
            package_dir / "data" / "Dockerfile"
        )
        assert scope.find_resource("data/missing") is None

    def test_package_scope_zipimport(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, package_name: str
    ) -> None:
        archive = write_zip(
            tmp_path / "bundle.zip",
            {
                f"{package_name}/__init__.py": b"",
                f"{package_name}/data/Dockerfile": b"FROM scratch",
            },
        )
        monkeypatch.syspath_prepend(str(archive))

        location = PackageScope(package_name).find_resource("data/Dockerfile")

        assert parse_location(location) == ArchivedEntry(
            archive, f"{package_name}/data/Dockerfile"
        )

    def test_package_scope_unknown_package(self) -> None:
        assert PackageScope("no_such_package_for_staging").find_resource("x") is None

    def test_system_scope_consults_sys_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        archive = write_zip(tmp_path / "libs" / "extra.jar", {"only/in/jar.txt": b"jar"})
        monkeypatch.syspath_prepend(str(archive))

        assert SystemScope().find_resource("only/in/jar.txt") == archive_location(
            archive, "only/in/jar.txt"
        )


class TestLocate:
    """Tests for the ordered scope search."""

    def test_search_order_appends_ambient_scopes(self, workspace: Path) -> None:
        first = DirectoryScope(workspace / "a")
        second = DirectoryScope(workspace / "b")

        order = search_order([first, second, first])

        assert order == [first, second, current_context_scope(), SystemScope()]

    def test_search_order_deduplicates_ambient_scope(self, workspace: Path) -> None:
        order = search_order([DirectoryScope(workspace)])

        assert order == [DirectoryScope(workspace), SystemScope()]

    def test_first_matching_scope_wins(self, tmp_path: Path, workspace: Path) -> None:
        for name in ("first", "second"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "shared.txt").write_text(name, encoding="utf-8")

        descriptor = locate(
            "shared.txt",
            [DirectoryScope(tmp_path / "first"), DirectoryScope(tmp_path / "second")],
        )

        assert descriptor == PlainFile(tmp_path / "first" / "shared.txt")

    def test_falls_back_to_working_directory(self, workspace: Path) -> None:
        (workspace / "local.txt").write_text("local", encoding="utf-8")

        assert locate("local.txt") == PlainFile(workspace / "local.txt")

    def test_archive_scope_yields_archived_entry(self, workspace: Path) -> None:
        archive = write_zip(workspace / "app.jar", DOCKER_ENTRIES)

        descriptor = locate("docker/", [ArchiveScope(archive)])

        assert descriptor == ArchivedEntry(archive, "docker/")

    def test_missing_resource_lists_scopes(self, workspace: Path, tmp_path: Path) -> None:
        scope = DirectoryScope(tmp_path / "empty")
        name = f"missing/{uuid.uuid4().hex}.txt"

        with pytest.raises(ResourceNotFound) as excinfo:
            locate(name, [scope])

        error = excinfo.value
        assert error.name == name
        assert error.scopes == (scope, current_context_scope(), SystemScope())
        assert name in str(error)
        assert "SystemScope" in str(error)


def test_archive_entry_with_bang_round_trips(workspace: Path) -> None:
    """A ``!`` inside an entry name must not be read as the archive separator."""

    archive = write_zip(workspace / "app.jar", {"docs/hello!.txt": b"hello"})

    location = archive_location(archive, "docs/hello!.txt")

    assert location.endswith("!/docs/hello%21.txt")
    assert parse_location(location) == ArchivedEntry(archive, "docs/hello!.txt")
    assert locate("docs/hello!.txt", [ArchiveScope(archive)]) == ArchivedEntry(
        archive, "docs/hello!.txt"
    )


def test_plain_file_with_bang_stays_plain(tmp_path: Path) -> None:
    target = tmp_path / "odd!dir" / "file.txt"

    assert parse_location(target.as_uri()) == PlainFile(target)
