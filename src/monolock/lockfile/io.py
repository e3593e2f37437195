"""Lockfile parser and serializer."""

from __future__ import annotations

from pathlib import Path

from monolock.config import LOCKFILE_MAINTAINER, LOCKFILE_SYNOPSIS, OPAM_VERSION
from monolock.lockfile import depends
from monolock.lockfile.fields import (
    DUNIVERSE_DIRS_FIELD,
    ROOT_PACKAGES_FIELD,
    VERSION_FIELD,
    check_compatible,
)
from monolock.lockfile.model import Lockfile
from monolock.lockfile.resolve import sort_pin_depends
from monolock.observability import StructuredLogger
from monolock.opam.file import OpamFile
from monolock.opam.parser import parse_document
from monolock.opam.printer import format_document


def to_opam(lockfile: Lockfile) -> OpamFile:
    opam = (
        OpamFile()
        .with_opam_version(OPAM_VERSION)
        .with_synopsis(LOCKFILE_SYNOPSIS)
        .with_maintainer([LOCKFILE_MAINTAINER])
        .with_depends(depends.to_filtered_formula(lockfile.depends))
        .with_depexts(list(lockfile.depexts))
        .with_pin_depends(sort_pin_depends(lockfile.pin_depends))
    )
    opam = VERSION_FIELD.set(opam, lockfile.version)
    opam = ROOT_PACKAGES_FIELD.set(opam, lockfile.root_packages)
    return DUNIVERSE_DIRS_FIELD.set(opam, lockfile.duniverse_dirs)


def from_opam(opam: OpamFile, *, file: str | None = None) -> Lockfile:
    version = VERSION_FIELD.get(opam, file=file)
    check_compatible(version)
    root_packages = ROOT_PACKAGES_FIELD.get(opam, file=file)
    dependencies = depends.from_filtered_formula(opam.depends())
    depends_value = opam.field("depends")
    if depends_value is not None:
        depends.check_unique_packages(dependencies, depends_value)
    pin_depends = opam.pin_depends()
    duniverse_dirs = DUNIVERSE_DIRS_FIELD.get(opam, file=file)
    depexts = opam.depexts()
    return Lockfile(
        version=version,
        root_packages=root_packages,
        depends=tuple(dependencies),
        pin_depends=tuple(pin_depends),
        duniverse_dirs=duniverse_dirs,
        depexts=tuple(depexts),
    )


def serialize_lockfile(lockfile: Lockfile) -> str:
    return format_document(to_opam(lockfile))


def parse_lockfile(raw: str, *, file: str | None = None) -> Lockfile:
    opam = parse_document(raw, filename=file if file is not None else "None")
    return from_opam(opam, file=file)


def save_lockfile(
    path: str | Path,
    lockfile: Lockfile,
    *,
    logger: StructuredLogger | None = None,
) -> Path:
    lock_path = Path(path)
    lock_path.write_text(serialize_lockfile(lockfile), encoding="utf-8")
    if logger is not None:
        logger.log(
            operation="lockfile_save",
            lockfile=str(lock_path),
            message="Wrote lockfile.",
            extra={"depends": len(lockfile.depends), "pin_depends": len(lockfile.pin_depends)},
        )
    return lock_path


def load_lockfile(path: str | Path, *, logger: StructuredLogger | None = None) -> Lockfile:
    lock_path = Path(path)
    raw = lock_path.read_text(encoding="utf-8")
    lockfile = parse_lockfile(raw, file=str(lock_path))
    if logger is not None:
        logger.log(
            operation="lockfile_load",
            lockfile=str(lock_path),
            message="Loaded lockfile.",
            extra={
                "version": str(lockfile.version),
                "depends": len(lockfile.depends),
                "pin_depends": len(lockfile.pin_depends),
            },
        )
    return lockfile
