"""opam package identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from monolock.errors import ValidationError

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_+\-]*[A-Za-z_+\-][A-Za-z0-9_+\-]*$")
VERSION_PATTERN = re.compile(r"^[A-Za-z0-9_+\-.~]+$")


def validate_name(name: str) -> str:
    if not NAME_PATTERN.fullmatch(name):
        raise ValidationError(f"Invalid package name: {name!r}")
    return name


@dataclass(frozen=True, slots=True, order=True)
class Package:
    """A ``name.version`` pair, ordered by name then version."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}.{self.version}"

    @classmethod
    def of_string(cls, raw: str) -> Package:
        name, sep, version = raw.partition(".")
        if not sep or not VERSION_PATTERN.fullmatch(version):
            raise ValidationError(f"Invalid package: {raw!r} is not of the form name.version")
        return cls(validate_name(name), version)
