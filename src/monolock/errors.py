"""Errors raised by monolock.

``E_LOCKFILE`` covers lockfile contents that cannot be read back: a missing or
malformed extension field, an incompatible version, an unexpected ``depends``
shape, or a pin without a matching vendored directory. ``E_MANIFEST`` is for
opam text that does not parse or a standard field of the wrong shape.
``E_VALIDATION`` rejects malformed in-memory inputs such as package strings,
hashes, URLs and project naming.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    VALIDATION = "E_VALIDATION"
    LOCKFILE = "E_LOCKFILE"
    MANIFEST = "E_MANIFEST"


class MonolockError(Exception):
    """Base error: a message plus a code, an optional hint and string context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(MonolockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class LockfileError(MonolockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.LOCKFILE, hint=hint, context=context)


class ManifestError(MonolockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MANIFEST, hint=hint, context=context)


__all__ = [
    "ErrorCode",
    "LockfileError",
    "ManifestError",
    "MonolockError",
    "ValidationError",
]
