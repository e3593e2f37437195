"""Resolution-stage package summaries consumed by lockfile creation."""

from __future__ import annotations

from dataclasses import dataclass

from monolock.config import BASE_PACKAGES
from monolock.opam.file import Depext
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl


@dataclass(frozen=True, slots=True)
class PackageSummary:
    package: Package
    url_src: OpamUrl | None = None
    depexts: tuple[Depext, ...] = ()

    def is_base_package(self) -> bool:
        return self.package.name in BASE_PACKAGES

    def is_virtual(self) -> bool:
        """Virtual packages only carry metadata; there is no source to vendor."""
        return self.url_src is None

    def is_vendored(self) -> bool:
        return not self.is_base_package() and not self.is_virtual()
