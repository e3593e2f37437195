"""opam source URLs (``git+https://host/repo.git#ref``)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from monolock.errors import ValidationError

Backend = Literal["http", "rsync", "git", "hg", "darcs"]

VERSION_CONTROL: frozenset[str] = frozenset({"git", "hg", "darcs"})
URL_PATTERN = re.compile(
    r"^(?:(?P<backend>git|hg|darcs|http|rsync)\+)?"
    r"(?P<transport>[A-Za-z][A-Za-z0-9.\-]*)://(?P<path>[^#]*)(?:#(?P<hash>.*))?$"
)
_TRANSPORT_BACKENDS: dict[str, Backend] = {
    "git": "git",
    "hg": "hg",
    "darcs": "darcs",
    "http": "http",
    "https": "http",
    "ftp": "http",
    "file": "rsync",
    "rsync": "rsync",
    "ssh": "rsync",
}


def _backend_from_suffix(path: str) -> Backend | None:
    if path.endswith(".git"):
        return "git"
    if path.endswith(".hg"):
        return "hg"
    return None


@dataclass(frozen=True, slots=True)
class OpamUrl:
    transport: str
    path: str
    hash: str | None = None
    backend: Backend = "http"

    def __str__(self) -> str:
        suffix = f"#{self.hash}" if self.hash else ""
        if self.backend in VERSION_CONTROL and self.transport != self.backend:
            return f"{self.backend}+{self.transport}://{self.path}{suffix}"
        return f"{self.transport}://{self.path}{suffix}"

    @property
    def base_url(self) -> str:
        return f"{self.transport}://{self.path}"

    @classmethod
    def of_string(cls, raw: str) -> OpamUrl:
        if not raw:
            raise ValidationError("Invalid URL: empty string")
        match = URL_PATTERN.fullmatch(raw)
        if match is None:
            if "://" in raw:
                raise ValidationError(f"Invalid URL: unsupported scheme in {raw!r}")
            path, _, ref = raw.partition("#")
            backend = _backend_from_suffix(path) or "rsync"
            return cls("file", path, ref or None, backend)
        transport = match.group("transport")
        path = match.group("path")
        backend = match.group("backend") or _backend_from_suffix(path)
        if backend is None:
            backend = _TRANSPORT_BACKENDS.get(transport)
        if backend is None:
            raise ValidationError(f"Invalid URL: unsupported transport {transport!r} in {raw!r}")
        return cls(transport, path, match.group("hash") or None, backend)  # type: ignore[arg-type]
