from pathlib import Path

import pytest

from monolock.errors import ValidationError
from monolock.project import local_lockfiles, lockfile_path


def test_single_target_names_the_lockfile(tmp_path: Path) -> None:
    assert lockfile_path(tmp_path, target_packages=["foo"]) == tmp_path / "foo.opam.locked"


def test_several_targets_use_the_project_name(tmp_path: Path) -> None:
    path = lockfile_path(tmp_path, target_packages=["foo", "bar"], project_name="proj")
    assert path == tmp_path / "proj.opam.locked"


def test_several_targets_without_project_name_fail(tmp_path: Path) -> None:
    with pytest.raises(ValidationError) as excinfo:
        lockfile_path(tmp_path, target_packages=["foo", "bar"])
    assert excinfo.value.context["packages"] == "bar, foo"
    assert excinfo.value.hint is not None


def test_local_lockfiles_are_listed_sorted(tmp_path: Path) -> None:
    for name in ("b.opam.locked", "a.opam.locked", ".hidden.opam.locked", "a.opam", "notes.txt"):
        (tmp_path / name).write_text("", encoding="utf-8")
    (tmp_path / "dir.opam.locked").mkdir()
    assert [path.name for path in local_lockfiles(tmp_path)] == ["a.opam.locked", "b.opam.locked"]


def test_local_lockfiles_of_missing_directory(tmp_path: Path) -> None:
    assert local_lockfiles(tmp_path / "missing") == []
