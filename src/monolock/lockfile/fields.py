"""Extension fields owned by the lockfile and their value codecs.

Each ``x-opam-monorepo-*`` field is described by an ``ExtraField`` holding the
encoder and decoder for its value. Decoders raise ``LockfileError`` pointing
at the position of the offending value.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from monolock.config import EXTRA_FIELD_PREFIX, LOCKFILE_KIND
from monolock.errors import LockfileError, ValidationError
from monolock.lockfile.model import CURRENT_VERSION, DirEntry, DuniverseDirs, Version
from monolock.opam import values
from monolock.opam.file import OpamFile
from monolock.opam.hash import OpamHash
from monolock.opam.url import OpamUrl

T = TypeVar("T")

VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+)$")


def pos_error(pos: values.Pos, message: str) -> LockfileError:
    return LockfileError(f"Error in {LOCKFILE_KIND} lockfile {pos}: {message}")


def value_error(value: values.Value, message: str) -> LockfileError:
    return pos_error(value.pos, message)


@dataclass(frozen=True, slots=True)
class ExtraField(Generic[T]):
    name: str
    encode: Callable[[T], values.Value]
    decode: Callable[[values.Value], T]

    def get(self, opam: OpamFile, *, file: str | None = None) -> T:
        value = opam.field(self.name)
        if value is None:
            file_suffix = f" {file}" if file is not None else ""
            raise LockfileError(f"Missing {self.name} field in {LOCKFILE_KIND} lockfile{file_suffix}")
        return self.decode(value)

    def set(self, opam: OpamFile, value: T) -> OpamFile:
        return opam.with_field(self.name, self.encode(value))


def make_field(
    name: str,
    *,
    encode: Callable[[T], values.Value],
    decode: Callable[[values.Value], T],
) -> ExtraField[T]:
    return ExtraField(EXTRA_FIELD_PREFIX + name, encode, decode)


# Version


def version_from_string(raw: str) -> Version:
    match = VERSION_PATTERN.fullmatch(raw)
    if match is None:
        raise LockfileError(f'Invalid lockfile version: "{raw}"')
    return Version(int(match.group(1)), int(match.group(2)))


def backward_compatible(have: Version, need: Version) -> bool:
    """Whether a tool at version ``have`` can read a lockfile written at ``need``."""
    return have.major == need.major and have.minor >= need.minor


def check_compatible(version: Version) -> None:
    # 0.1 lockfiles are still readable; revisit if backward compatibility is dropped.
    if not backward_compatible(CURRENT_VERSION, version):
        raise LockfileError(
            f"Incompatible {LOCKFILE_KIND} lockfile version {version}. "
            "Please upgrade your opam-monorepo plugin.",
            hint=f"This tool reads lockfiles up to version {CURRENT_VERSION}.",
        )


def _version_to_value(version: Version) -> values.Value:
    return values.String(str(version))


def _version_from_value(value: values.Value) -> Version:
    if not isinstance(value, values.String):
        raise value_error(value, "Expected a string")
    return version_from_string(value.value)


VERSION_FIELD: ExtraField[Version] = make_field(
    "version", encode=_version_to_value, decode=_version_from_value
)

# Root packages


def _root_packages_to_value(names: frozenset[str]) -> values.Value:
    return values.string_list(sorted(names))


def _root_packages_from_value(value: values.Value) -> frozenset[str]:
    if not isinstance(value, values.List):
        raise value_error(value, "Expected a list")
    names: set[str] = set()
    for item in value.items:
        if not isinstance(item, values.String):
            raise value_error(item, "Expected a string")
        names.add(item.value)
    return frozenset(names)


ROOT_PACKAGES_FIELD: ExtraField[frozenset[str]] = make_field(
    "root-packages", encode=_root_packages_to_value, decode=_root_packages_from_value
)

# Duniverse dirs


def _hash_from_value(value: values.Value) -> OpamHash:
    if not isinstance(value, values.String):
        raise value_error(value, "Expected a hash string representation")
    parsed = OpamHash.of_string_opt(value.value)
    if parsed is None:
        raise value_error(value, f"Invalid hash: {value.value}")
    return parsed


def _dir_entry_from_value(value: values.Value) -> tuple[OpamUrl, DirEntry]:
    items = value.items if isinstance(value, values.List) else ()
    url = items[0] if len(items) in (2, 3) else None
    dir_ = items[1] if len(items) in (2, 3) else None
    if isinstance(url, values.String) and isinstance(dir_, values.String):
        hashes: tuple[OpamHash, ...] = ()
        if len(items) == 3:
            raw_hashes = items[2]
            if not isinstance(raw_hashes, values.List):
                raise value_error(value, 'Expected a list [ "url" "repo name" [<hashes>] ]')
            hashes = tuple(_hash_from_value(item) for item in raw_hashes.items)
        return _url_from_value(url), (dir_.value, hashes)
    raise value_error(value, 'Expected a list [ "url" "repo name" [<hashes>] ]')


def _url_from_value(value: values.String) -> OpamUrl:
    try:
        return OpamUrl.of_string(value.value)
    except ValidationError as exc:
        raise value_error(value, exc.message) from exc


def _duniverse_dirs_from_value(value: values.Value) -> DuniverseDirs:
    if not isinstance(value, values.List):
        raise value_error(value, "Expected a list")
    return dict(_dir_entry_from_value(item) for item in value.items)


def _dir_entry_to_value(url: OpamUrl, dir_: str, hashes: tuple[OpamHash, ...]) -> values.Value:
    head: tuple[values.Value, ...] = (values.String(str(url)), values.String(dir_))
    if not hashes:
        return values.List(head)
    return values.List((*head, values.string_list([str(h) for h in hashes])))


def _duniverse_dirs_to_value(dirs: DuniverseDirs) -> values.Value:
    bindings = sorted(dirs.items(), key=lambda binding: str(binding[0]))
    return values.List(
        tuple(_dir_entry_to_value(url, dir_, hashes) for url, (dir_, hashes) in bindings)
    )


DUNIVERSE_DIRS_FIELD: ExtraField[DuniverseDirs] = make_field(
    "duniverse-dirs", encode=_duniverse_dirs_to_value, decode=_duniverse_dirs_from_value
)
