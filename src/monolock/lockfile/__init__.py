"""Lockfile model, codecs, and I/O."""

from .depends import from_filtered_formula, to_filtered_formula
from .fields import (
    DUNIVERSE_DIRS_FIELD,
    ROOT_PACKAGES_FIELD,
    VERSION_FIELD,
    ExtraField,
    backward_compatible,
    check_compatible,
    version_from_string,
)
from .io import (
    from_opam,
    load_lockfile,
    parse_lockfile,
    save_lockfile,
    serialize_lockfile,
    to_opam,
)
from .model import CURRENT_VERSION, Dependency, Lockfile, Version
from .resolve import (
    all_depexts,
    create_lockfile,
    duniverse_dirs_from_duniverse,
    pin_depends_from_duniverse,
    sort_pin_depends,
    to_duniverse,
)

__all__ = [
    "CURRENT_VERSION",
    "DUNIVERSE_DIRS_FIELD",
    "Dependency",
    "ExtraField",
    "Lockfile",
    "ROOT_PACKAGES_FIELD",
    "VERSION_FIELD",
    "Version",
    "all_depexts",
    "backward_compatible",
    "check_compatible",
    "create_lockfile",
    "duniverse_dirs_from_duniverse",
    "from_filtered_formula",
    "from_opam",
    "load_lockfile",
    "parse_lockfile",
    "pin_depends_from_duniverse",
    "save_lockfile",
    "serialize_lockfile",
    "sort_pin_depends",
    "to_duniverse",
    "to_filtered_formula",
    "to_opam",
    "version_from_string",
]
