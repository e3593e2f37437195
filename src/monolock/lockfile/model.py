"""Lockfile typed model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from monolock.opam.file import Depext, PinDepend
from monolock.opam.hash import OpamHash
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl

DirEntry = tuple[str, tuple[OpamHash, ...]]
DuniverseDirs = Mapping[OpamUrl, DirEntry]


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


CURRENT_VERSION = Version(0, 2)


@dataclass(frozen=True, slots=True)
class Dependency:
    package: Package
    vendored: bool


@dataclass(frozen=True, slots=True)
class Lockfile:
    version: Version
    root_packages: frozenset[str]
    depends: tuple[Dependency, ...]
    pin_depends: tuple[PinDepend, ...]
    duniverse_dirs: DuniverseDirs = field(default_factory=dict)
    depexts: tuple[Depext, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "duniverse_dirs", MappingProxyType(dict(self.duniverse_dirs)))
