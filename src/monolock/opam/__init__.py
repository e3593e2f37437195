"""Minimal opam manifest support: value tree, parser, printer, and typed fields."""

from .file import Depext, OpamFile, PinDepend
from .hash import OpamHash
from .package import Package
from .parser import parse_document
from .printer import format_document, format_value
from .url import OpamUrl

__all__ = [
    "Depext",
    "OpamFile",
    "OpamHash",
    "OpamUrl",
    "Package",
    "PinDepend",
    "format_document",
    "format_value",
    "parse_document",
]
