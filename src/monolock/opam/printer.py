"""Render opam value trees back to manifest text."""

from __future__ import annotations

from monolock.opam import values
from monolock.opam.file import OpamFile

INDENT = "  "


def escape_string(raw: str) -> str:
    escaped = raw.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def format_value(value: values.Value) -> str:
    if isinstance(value, values.Bool):
        return "true" if value.value else "false"
    if isinstance(value, values.Int):
        return str(value.value)
    if isinstance(value, values.String):
        return escape_string(value.value)
    if isinstance(value, values.Ident):
        return value.name
    if isinstance(value, values.Relop):
        return f"{format_value(value.lhs)} {value.op} {format_value(value.rhs)}"
    if isinstance(value, values.PrefixRelop):
        return f"{value.op} {format_value(value.operand)}"
    if isinstance(value, values.Logop):
        return f"{format_value(value.lhs)} {value.op} {format_value(value.rhs)}"
    if isinstance(value, values.PfxLogop):
        return f"{value.op}{format_value(value.operand)}"
    if isinstance(value, values.EnvBinding):
        return f"{format_value(value.lhs)} {value.op} {format_value(value.rhs)}"
    if isinstance(value, values.List):
        return "[" + " ".join(format_value(item) for item in value.items) + "]"
    if isinstance(value, values.Group):
        return "(" + " ".join(format_value(item) for item in value.items) + ")"
    options = " ".join(format_value(option) for option in value.options)
    return f"{format_value(value.value)} {{{options}}}"


def _is_multiline(value: values.List) -> bool:
    return any(not isinstance(item, values.ATOMIC_TYPES) for item in value.items)


def _format_field(item: values.Field, depth: int) -> list[str]:
    prefix = INDENT * depth
    if isinstance(item.value, values.List) and _is_multiline(item.value):
        lines = [f"{prefix}{item.name}: ["]
        lines.extend(f"{prefix}{INDENT}{format_value(entry)}" for entry in item.value.items)
        lines.append(f"{prefix}]")
        return lines
    return [f"{prefix}{item.name}: {format_value(item.value)}"]


def _format_items(items: tuple[values.Item, ...], depth: int) -> list[str]:
    lines: list[str] = []
    for item in items:
        if isinstance(item, values.Field):
            lines.extend(_format_field(item, depth))
            continue
        prefix = INDENT * depth
        header = item.kind if item.name is None else f"{item.kind} {escape_string(item.name)}"
        lines.append(f"{prefix}{header} {{")
        lines.extend(_format_items(item.items, depth + 1))
        lines.append(f"{prefix}}}")
    return lines


def format_document(opam: OpamFile) -> str:
    lines = _format_items(opam.items, 0)
    return "\n".join(lines) + "\n" if lines else ""
