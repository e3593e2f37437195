"""Position-tagged opam value tree.

Every node produced by the parser records the span of text it came from so
that decoders can point at the offending part of a file. Nodes built in
memory carry ``DEFAULT_POS``. Positions never take part in equality: two
trees compare equal when their shapes and payloads match.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

RelOp = Literal["=", "!=", ">=", "<=", ">", "<"]
LogOpKind = Literal["&", "|"]
PfxLogOpKind = Literal["!", "?"]
EnvOp = Literal["=", "+=", "=+", ":=", "=:", "=+="]


@dataclass(frozen=True, slots=True)
class Pos:
    filename: str = "None"
    start: tuple[int, int] = (0, 0)
    stop: tuple[int, int] = (0, 0)

    def __str__(self) -> str:
        (startl, startc), (stopl, stopc) = self.start, self.stop
        return f"{self.filename}, [{startl}:{startc}]-[{stopl}:{stopc}]"


DEFAULT_POS = Pos()


def _pos_field() -> Any:
    return field(default=DEFAULT_POS, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Int:
    value: int
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class String:
    value: str
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Ident:
    name: str
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Relop:
    op: RelOp
    lhs: Value
    rhs: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class PrefixRelop:
    op: RelOp
    operand: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Logop:
    op: LogOpKind
    lhs: Value
    rhs: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class PfxLogop:
    op: PfxLogOpKind
    operand: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class EnvBinding:
    lhs: Value
    op: EnvOp
    rhs: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class List:
    items: tuple[Value, ...]
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Group:
    items: tuple[Value, ...]
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Option:
    value: Value
    options: tuple[Value, ...]
    pos: Pos = _pos_field()


Value = (
    Bool
    | Int
    | String
    | Ident
    | Relop
    | PrefixRelop
    | Logop
    | PfxLogop
    | EnvBinding
    | List
    | Group
    | Option
)

ATOMIC_TYPES = (Bool, Int, String, Ident)


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    value: Value
    pos: Pos = _pos_field()


@dataclass(frozen=True, slots=True)
class Section:
    kind: str
    name: str | None
    items: tuple[Item, ...]
    pos: Pos = _pos_field()


Item = Field | Section


def string_list(strings: list[str] | tuple[str, ...]) -> List:
    return List(tuple(String(s) for s in strings))


__all__ = [
    "ATOMIC_TYPES",
    "Bool",
    "DEFAULT_POS",
    "EnvBinding",
    "Field",
    "Group",
    "Ident",
    "Int",
    "Item",
    "List",
    "Logop",
    "Option",
    "PfxLogop",
    "Pos",
    "PrefixRelop",
    "Relop",
    "Section",
    "String",
    "Value",
    "string_list",
]
