"""opam checksum strings (``sha256=<hex>``)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from monolock.errors import ValidationError

HashKind = Literal["md5", "sha256", "sha512"]

DIGEST_LENGTHS: dict[str, int] = {"md5": 32, "sha256": 64, "sha512": 128}
HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True, slots=True, order=True)
class OpamHash:
    kind: HashKind
    digest: str

    def __str__(self) -> str:
        return f"{self.kind}={self.digest}"

    @classmethod
    def of_string(cls, raw: str) -> OpamHash:
        kind, sep, digest = raw.partition("=")
        if not sep:
            # Bare digests predate the kind prefix and are always md5.
            kind, digest = "md5", raw
        expected = DIGEST_LENGTHS.get(kind)
        if expected is None or len(digest) != expected or not HEX_PATTERN.fullmatch(digest):
            raise ValidationError(f"Invalid hash: {raw}")
        return cls(kind, digest)  # type: ignore[arg-type]

    @classmethod
    def of_string_opt(cls, raw: str) -> OpamHash | None:
        try:
            return cls.of_string(raw)
        except ValidationError:
            return None
