"""Resolved source repositories handed to the vendoring step."""

from __future__ import annotations

from dataclasses import dataclass

from monolock.errors import ValidationError
from monolock.opam.hash import OpamHash
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl


@dataclass(frozen=True, slots=True)
class GitUrl:
    repo: str
    ref: str

    def to_opam_url(self) -> OpamUrl:
        base = OpamUrl.of_string(self.repo)
        return OpamUrl(base.transport, base.path, self.ref, "git")

    def __str__(self) -> str:
        return str(self.to_opam_url())


@dataclass(frozen=True, slots=True)
class OtherUrl:
    url: str

    def to_opam_url(self) -> OpamUrl:
        return OpamUrl.of_string(self.url)

    def __str__(self) -> str:
        return self.url


RepoUrl = GitUrl | OtherUrl


def repo_url_from_opam_url(url: OpamUrl) -> RepoUrl:
    if url.backend == "git":
        if not url.hash:
            raise ValidationError(
                "Git URL must be resolved to a commit hash",
                context={"url": str(url)},
            )
        return GitUrl(repo=url.base_url, ref=url.hash)
    return OtherUrl(str(url))


@dataclass(frozen=True, slots=True)
class Repo:
    """One vendored source tree and the packages it provides."""

    dir: str
    url: RepoUrl
    hashes: tuple[OpamHash, ...]
    provided_packages: tuple[Package, ...]
