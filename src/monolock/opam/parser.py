"""opam manifest parser built on lark."""

from __future__ import annotations

import re
from functools import lru_cache

from lark import Lark, Token, Transformer, UnexpectedInput, v_args
from lark.tree import Meta

from monolock.errors import ManifestError
from monolock.opam import values
from monolock.opam.file import OpamFile

GRAMMAR = r'''
start: _item*

_item: field
     | section

field: IDENT ":" value
section: IDENT STRING? "{" _item* "}"

?value: disj

?disj: conj
     | disj "|" conj            -> or_op

?conj: unary
     | conj "&" unary           -> and_op

?unary: "!" unary               -> not_op
      | "?" unary               -> defined_op
      | RELOP primary           -> prefix_relop
      | comparison

?comparison: postfix
           | primary RELOP primary -> relop
           | atom ENVOP atom    -> env_binding

?postfix: primary
        | postfix "{" value* "}" -> option

?primary: atom
        | "(" value* ")"        -> group
        | "[" value* "]"        -> list

?atom: STRING                   -> string
     | IDENT                    -> ident
     | INT                      -> int

RELOP: "!=" | ">=" | "<=" | "=" | "<" | ">"
ENVOP: "=+=" | "+=" | "=+" | ":=" | "=:"
IDENT: /[A-Za-z_][A-Za-z0-9_+\-]*(:[A-Za-z0-9_+\-]+)*/
INT: /-?[0-9]+/
STRING: /"""(?:.|\n)*?"""|"(?:\\.|\\\n|[^"\\])*"/s
COMMENT: /#[^\n]*/
BLOCK_COMMENT: /\(\*(?:.|\n)*?\*\)/s

%import common.WS
%ignore WS
%ignore COMMENT
%ignore BLOCK_COMMENT
'''

_ESCAPE = re.compile(r"\\(?:\n[ \t]*|[0-9]{3}|x[0-9a-fA-F]{2}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", " ": " "}


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR, parser="lalr", propagate_positions=True, maybe_placeholders=False)


def unescape(raw: str) -> str:
    """Strip the quotes of a lexed string literal and resolve its escapes."""
    body = raw[3:-3] if raw.startswith('"""') and len(raw) >= 6 else raw[1:-1]

    def _replace(match: re.Match[str]) -> str:
        escape = match.group(0)[1:]
        if escape.startswith("\n"):
            return ""
        if len(escape) == 3 and escape.isdigit():
            return chr(int(escape))
        if escape.startswith("x") and len(escape) == 3:
            return chr(int(escape[1:], 16))
        return _SIMPLE_ESCAPES.get(escape, escape)

    return _ESCAPE.sub(_replace, body)


@v_args(meta=True)
class _ValueBuilder(Transformer):
    def __init__(self, filename: str) -> None:
        super().__init__()
        self.filename = filename

    def _pos(self, meta: Meta) -> values.Pos:
        if getattr(meta, "empty", True):
            return values.Pos(filename=self.filename)
        return values.Pos(
            filename=self.filename,
            start=(meta.line, meta.column - 1),
            stop=(meta.end_line, meta.end_column - 1),
        )

    def start(self, meta: Meta, children: list[values.Item]) -> tuple[values.Item, ...]:
        return tuple(children)

    def field(self, meta: Meta, children: list[object]) -> values.Field:
        name, value = children
        return values.Field(str(name), value, self._pos(meta))  # type: ignore[arg-type]

    def section(self, meta: Meta, children: list[object]) -> values.Section:
        kind = str(children[0])
        rest = children[1:]
        name: str | None = None
        if rest and isinstance(rest[0], Token) and rest[0].type == "STRING":
            name = unescape(str(rest[0]))
            rest = rest[1:]
        items = tuple(item for item in rest if isinstance(item, (values.Field, values.Section)))
        return values.Section(kind, name, items, self._pos(meta))

    def or_op(self, meta: Meta, children: list[values.Value]) -> values.Logop:
        lhs, rhs = children
        return values.Logop("|", lhs, rhs, self._pos(meta))

    def and_op(self, meta: Meta, children: list[values.Value]) -> values.Logop:
        lhs, rhs = children
        return values.Logop("&", lhs, rhs, self._pos(meta))

    def not_op(self, meta: Meta, children: list[values.Value]) -> values.PfxLogop:
        return values.PfxLogop("!", children[0], self._pos(meta))

    def defined_op(self, meta: Meta, children: list[values.Value]) -> values.PfxLogop:
        return values.PfxLogop("?", children[0], self._pos(meta))

    def prefix_relop(self, meta: Meta, children: list[object]) -> values.PrefixRelop:
        op, operand = children
        return values.PrefixRelop(str(op), operand, self._pos(meta))  # type: ignore[arg-type]

    def relop(self, meta: Meta, children: list[object]) -> values.Relop:
        lhs, op, rhs = children
        return values.Relop(str(op), lhs, rhs, self._pos(meta))  # type: ignore[arg-type]

    def env_binding(self, meta: Meta, children: list[object]) -> values.EnvBinding:
        lhs, op, rhs = children
        return values.EnvBinding(lhs, str(op), rhs, self._pos(meta))  # type: ignore[arg-type]

    def option(self, meta: Meta, children: list[values.Value]) -> values.Option:
        return values.Option(children[0], tuple(children[1:]), self._pos(meta))

    def group(self, meta: Meta, children: list[values.Value]) -> values.Group:
        return values.Group(tuple(children), self._pos(meta))

    def list(self, meta: Meta, children: list[values.Value]) -> values.List:
        return values.List(tuple(children), self._pos(meta))

    def string(self, meta: Meta, children: list[Token]) -> values.String:
        return values.String(unescape(str(children[0])), self._pos(meta))

    def ident(self, meta: Meta, children: list[Token]) -> values.Value:
        name = str(children[0])
        if name in ("true", "false"):
            return values.Bool(name == "true", self._pos(meta))
        return values.Ident(name, self._pos(meta))

    def int(self, meta: Meta, children: list[Token]) -> values.Int:
        return values.Int(int(str(children[0])), self._pos(meta))


def parse_items(text: str, *, filename: str = "None") -> tuple[values.Item, ...]:
    try:
        tree = _parser().parse(text)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", 0) or 0
        column = max((getattr(exc, "column", 1) or 1) - 1, 0)
        pos = values.Pos(filename=filename, start=(line, column), stop=(line, column))
        raise ManifestError(
            f"Parse error in {pos}: unexpected input",
            hint=exc.get_context(text).strip() or None,
            context={"file": filename},
        ) from exc
    items = _ValueBuilder(filename).transform(tree)
    return tuple(items)


def parse_document(text: str, *, filename: str = "None") -> OpamFile:
    """Parse opam manifest text into an ``OpamFile`` with positioned values."""
    return OpamFile(items=parse_items(text, filename=filename), filename=filename)
