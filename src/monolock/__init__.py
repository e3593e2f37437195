"""Public package entrypoint for the opam-monorepo lockfile library."""

from .duniverse import GitUrl, OtherUrl, Repo, repo_url_from_opam_url
from .errors import (
    ErrorCode,
    LockfileError,
    ManifestError,
    MonolockError,
    ValidationError,
)
from .lockfile import (
    CURRENT_VERSION,
    Dependency,
    Lockfile,
    Version,
    create_lockfile,
    from_opam,
    load_lockfile,
    save_lockfile,
    to_duniverse,
    to_opam,
)
from .observability import StructuredLogger
from .opam import OpamFile, OpamHash, OpamUrl, Package
from .summary import PackageSummary

__all__ = [
    "CURRENT_VERSION",
    "Dependency",
    "ErrorCode",
    "GitUrl",
    "Lockfile",
    "LockfileError",
    "ManifestError",
    "MonolockError",
    "OpamFile",
    "OpamHash",
    "OpamUrl",
    "OtherUrl",
    "Package",
    "PackageSummary",
    "Repo",
    "StructuredLogger",
    "ValidationError",
    "Version",
    "create_lockfile",
    "from_opam",
    "load_lockfile",
    "repo_url_from_opam_url",
    "save_lockfile",
    "to_duniverse",
    "to_opam",
]
