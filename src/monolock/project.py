"""Lockfile naming and discovery inside a project directory."""

from __future__ import annotations

from pathlib import Path

from monolock.config import LOCKFILE_EXT
from monolock.errors import ValidationError


def lockfile_path(
    repo: str | Path,
    *,
    target_packages: list[str],
    project_name: str | None = None,
) -> Path:
    """Where the lockfile for ``target_packages`` lives.

    A single target package names the lockfile after itself. Several targets
    share one lockfile named after the project.
    """
    root = Path(repo)
    if len(target_packages) == 1:
        return root / f"{target_packages[0]}{LOCKFILE_EXT}"
    if not project_name:
        raise ValidationError(
            "A project name is required to name a lockfile for several packages.",
            hint="Pass project_name, usually the name declared in dune-project.",
            context={"repo": str(root), "packages": ", ".join(sorted(target_packages))},
        )
    return root / f"{project_name}{LOCKFILE_EXT}"


def local_lockfiles(repo: str | Path) -> list[Path]:
    root = Path(repo)
    if not root.is_dir():
        return []
    return sorted(
        path
        for path in root.iterdir()
        if not path.name.startswith(".") and path.is_file() and path.name.endswith(LOCKFILE_EXT)
    )
