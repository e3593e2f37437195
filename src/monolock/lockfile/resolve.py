"""Lockfile construction from resolution outputs and conversion back to repos."""

from __future__ import annotations

from collections.abc import Iterable

from monolock.config import LOCKFILE_KIND
from monolock.duniverse import Repo, RepoUrl, repo_url_from_opam_url
from monolock.errors import LockfileError, ValidationError
from monolock.lockfile import depends
from monolock.lockfile.fields import DUNIVERSE_DIRS_FIELD
from monolock.lockfile.model import CURRENT_VERSION, DirEntry, DuniverseDirs, Lockfile
from monolock.observability import StructuredLogger
from monolock.opam.file import Depext, PinDepend
from monolock.opam.formula import filter_sort_key
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl
from monolock.summary import PackageSummary


def pin_depends_from_duniverse(repos: Iterable[Repo]) -> list[PinDepend]:
    pins: list[PinDepend] = []
    for repo in repos:
        url = repo.url.to_opam_url()
        pins.extend((package, url) for package in repo.provided_packages)
    return pins


def sort_pin_depends(pins: Iterable[PinDepend]) -> list[PinDepend]:
    return sorted(pins, key=lambda pin: pin[0])


def duniverse_dirs_from_duniverse(repos: Iterable[Repo]) -> dict[OpamUrl, DirEntry]:
    dirs: dict[OpamUrl, DirEntry] = {}
    for repo in repos:
        dirs[repo.url.to_opam_url()] = (repo.dir, tuple(repo.hashes))
    return dirs


def depext_sort_key(depext: Depext) -> tuple[object, ...]:
    names, filter_ = depext
    return (tuple(sorted(names)), filter_sort_key(filter_))


def all_depexts(
    *,
    root_depexts: Iterable[Depext],
    package_summaries: Iterable[PackageSummary],
) -> list[Depext]:
    """Merge root and transitive depexts, deduplicated and sorted."""
    merged: list[Depext] = list(root_depexts)
    for summary in package_summaries:
        merged.extend(summary.depexts)
    unique = {depext_sort_key(depext): depext for depext in merged}
    return [unique[key] for key in sorted(unique)]


def create_lockfile(
    *,
    root_packages: Iterable[str],
    package_summaries: list[PackageSummary],
    root_depexts: Iterable[Depext],
    duniverse: list[Repo],
    logger: StructuredLogger | None = None,
) -> Lockfile:
    dependencies = depends.from_package_summaries(package_summaries)
    lockfile = Lockfile(
        version=CURRENT_VERSION,
        root_packages=frozenset(root_packages),
        depends=tuple(sorted(dependencies, key=lambda dependency: dependency.package)),
        pin_depends=tuple(sort_pin_depends(pin_depends_from_duniverse(duniverse))),
        duniverse_dirs=duniverse_dirs_from_duniverse(duniverse),
        depexts=tuple(
            all_depexts(root_depexts=root_depexts, package_summaries=package_summaries)
        ),
    )
    if logger is not None:
        logger.log(
            operation="lockfile_create",
            lockfile=None,
            message="Created lockfile from resolved packages.",
            extra={
                "depends": len(lockfile.depends),
                "vendored": sum(1 for dependency in lockfile.depends if dependency.vendored),
                "pin_depends": len(lockfile.pin_depends),
                "duniverse_dirs": len(lockfile.duniverse_dirs),
                "depexts": len(lockfile.depexts),
            },
        )
    return lockfile


def _repo_url(url: OpamUrl) -> RepoUrl:
    try:
        return repo_url_from_opam_url(url)
    except ValidationError as exc:
        raise LockfileError(
            f"Invalid {LOCKFILE_KIND} lockfile pin URL {url}: {exc.message}"
        ) from exc


def _packages_per_url(pins: Iterable[PinDepend]) -> list[tuple[OpamUrl, list[Package]]]:
    grouped: dict[OpamUrl, list[Package]] = {}
    for package, url in pins:
        grouped.setdefault(url, []).append(package)
    return sorted(grouped.items(), key=lambda binding: str(binding[0]))


def to_duniverse(lockfile: Lockfile) -> list[Repo]:
    """Group pinned packages by source URL into the repos to vendor."""
    dirs: DuniverseDirs = lockfile.duniverse_dirs
    repos: list[Repo] = []
    for url, provided_packages in _packages_per_url(lockfile.pin_depends):
        entry = dirs.get(url)
        if entry is None:
            raise LockfileError(
                f"Invalid {LOCKFILE_KIND} lockfile: Missing dir for {url} in "
                f"{DUNIVERSE_DIRS_FIELD.name}"
            )
        dir_, hashes = entry
        repos.append(
            Repo(
                dir=dir_,
                url=_repo_url(url),
                hashes=hashes,
                provided_packages=tuple(provided_packages),
            )
        )
    return repos
