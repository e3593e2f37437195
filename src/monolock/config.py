"""Constants shared by the lockfile codec and the project helpers."""

from __future__ import annotations

LOCKFILE_KIND = "opam-monorepo"
LOCKFILE_EXT = ".opam.locked"
LOCKFILE_MAINTAINER = "opam-monorepo"
LOCKFILE_SYNOPSIS = "opam-monorepo generated lockfile"
OPAM_VERSION = "2.0"

EXTRA_FIELD_PREFIX = "x-opam-monorepo-"

# Filter variable marking a dependency as vendored in the `depends` formula.
VENDOR_VARIABLE = "vendor"

# Packages provided by the compiler toolchain; never vendored.
BASE_PACKAGES = frozenset(
    {
        "base-bigarray",
        "base-bytes",
        "base-domains",
        "base-effects",
        "base-nnp",
        "base-threads",
        "base-unix",
        "dune",
        "ocaml",
        "ocaml-base-compiler",
        "ocaml-beta",
        "ocaml-config",
        "ocaml-options-vanilla",
        "ocaml-system",
        "ocaml-variants",
        "ocamlbuild",
        "ocamlfind",
    }
)
