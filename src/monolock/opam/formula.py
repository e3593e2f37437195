"""Filtered package formulas and filters, and their opam value encoding.

A ``depends:`` field is a formula over package atoms. Each atom carries a
package name and a condition, itself a formula over version constraints
(``= "1.0"``) and filters (``vendor``, ``os = "linux"``). ``And``/``Or``
nodes are binary and left-nested the way opam builds them; ``Block`` keeps
explicit parentheses from the source text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from monolock.errors import ManifestError
from monolock.opam import values
from monolock.opam.values import RelOp

# Filters


@dataclass(frozen=True, slots=True)
class FBool:
    value: bool


@dataclass(frozen=True, slots=True)
class FString:
    value: str


@dataclass(frozen=True, slots=True)
class FIdent:
    """A variable reference, optionally qualified by packages (``foo+bar:installed``)."""

    packages: tuple[str | None, ...]
    variable: str
    converter: tuple[str, str] | None = None

    def __str__(self) -> str:
        if not self.packages:
            return self.variable
        qualifier = "+".join(package or "_" for package in self.packages)
        return f"{qualifier}:{self.variable}"

    @classmethod
    def of_string(cls, raw: str) -> FIdent:
        qualifier, sep, variable = raw.rpartition(":")
        if not sep:
            return cls((), raw)
        packages = tuple(None if p == "_" else p for p in qualifier.split("+"))
        return cls(packages, variable)


@dataclass(frozen=True, slots=True)
class FOp:
    lhs: Filter
    op: RelOp
    rhs: Filter


@dataclass(frozen=True, slots=True)
class FAnd:
    lhs: Filter
    rhs: Filter


@dataclass(frozen=True, slots=True)
class FOr:
    lhs: Filter
    rhs: Filter


@dataclass(frozen=True, slots=True)
class FNot:
    operand: Filter


@dataclass(frozen=True, slots=True)
class FDefined:
    operand: Filter


Filter = FBool | FString | FIdent | FOp | FAnd | FOr | FNot | FDefined

# Formulas


@dataclass(frozen=True, slots=True)
class Empty:
    pass


EMPTY = Empty()


@dataclass(frozen=True, slots=True)
class Atom:
    value: Any


@dataclass(frozen=True, slots=True)
class And:
    lhs: Formula
    rhs: Formula


@dataclass(frozen=True, slots=True)
class Or:
    lhs: Formula
    rhs: Formula


@dataclass(frozen=True, slots=True)
class Block:
    inner: Formula


Formula = Empty | Atom | And | Or | Block


@dataclass(frozen=True, slots=True)
class PackageConstraint:
    name: str
    condition: Formula


@dataclass(frozen=True, slots=True)
class VersionConstraint:
    op: RelOp
    operand: Filter


@dataclass(frozen=True, slots=True)
class FilterCondition:
    filter: Filter


def ands(formulas: list[Formula]) -> Formula:
    result: Formula = EMPTY
    for formula in formulas:
        if formula == EMPTY:
            continue
        result = formula if result == EMPTY else And(result, formula)
    return result


def ands_to_list(formula: Formula) -> list[Formula]:
    if isinstance(formula, Empty):
        return []
    if isinstance(formula, And):
        return ands_to_list(formula.lhs) + ands_to_list(formula.rhs)
    if isinstance(formula, Block) and isinstance(formula.inner, And):
        return ands_to_list(formula.inner)
    return [formula]


def filter_ands(filters: list[Filter]) -> Filter:
    if not filters:
        return FBool(True)
    result = filters[0]
    for filter_ in filters[1:]:
        result = FAnd(result, filter_)
    return result


def filter_sort_key(filter_: Filter) -> tuple[Any, ...]:
    """Total ordering over filters, by constructor first and payload second."""
    if isinstance(filter_, FBool):
        return (0, filter_.value)
    if isinstance(filter_, FString):
        return (1, filter_.value)
    if isinstance(filter_, FIdent):
        packages = tuple((0, "") if p is None else (1, p) for p in filter_.packages)
        return (2, packages, filter_.variable, filter_.converter or ())
    if isinstance(filter_, FOp):
        return (3, filter_sort_key(filter_.lhs), filter_.op, filter_sort_key(filter_.rhs))
    if isinstance(filter_, FAnd):
        return (4, filter_sort_key(filter_.lhs), filter_sort_key(filter_.rhs))
    if isinstance(filter_, FOr):
        return (5, filter_sort_key(filter_.lhs), filter_sort_key(filter_.rhs))
    if isinstance(filter_, FNot):
        return (6, filter_sort_key(filter_.operand))
    return (7, filter_sort_key(filter_.operand))


# Decoding


def _expected(value: values.Value, what: str) -> ManifestError:
    return ManifestError(f"Expected {what} in {value.pos}")


def filter_from_value(value: values.Value) -> Filter:
    if isinstance(value, values.Bool):
        return FBool(value.value)
    if isinstance(value, values.String):
        return FString(value.value)
    if isinstance(value, values.Int):
        return FString(str(value.value))
    if isinstance(value, values.Ident):
        return FIdent.of_string(value.name)
    if isinstance(value, values.Relop):
        return FOp(filter_from_value(value.lhs), value.op, filter_from_value(value.rhs))
    if isinstance(value, values.Logop):
        lhs, rhs = filter_from_value(value.lhs), filter_from_value(value.rhs)
        return FAnd(lhs, rhs) if value.op == "&" else FOr(lhs, rhs)
    if isinstance(value, values.PfxLogop):
        operand = filter_from_value(value.operand)
        return FNot(operand) if value.op == "!" else FDefined(operand)
    if isinstance(value, values.Group) and len(value.items) == 1:
        return filter_from_value(value.items[0])
    raise _expected(value, "a filter expression")


def condition_from_value(value: values.Value) -> Formula:
    if isinstance(value, values.PrefixRelop):
        return Atom(VersionConstraint(value.op, filter_from_value(value.operand)))
    if isinstance(value, values.Logop):
        lhs, rhs = condition_from_value(value.lhs), condition_from_value(value.rhs)
        return And(lhs, rhs) if value.op == "&" else Or(lhs, rhs)
    if isinstance(value, values.Group):
        return Block(ands([condition_from_value(item) for item in value.items]))
    return Atom(FilterCondition(filter_from_value(value)))


def _package_item_from_value(value: values.Value) -> Formula:
    if isinstance(value, values.String):
        return Atom(PackageConstraint(value.value, EMPTY))
    if isinstance(value, values.Option) and isinstance(value.value, values.String):
        condition = ands([condition_from_value(option) for option in value.options])
        return Atom(PackageConstraint(value.value.value, condition))
    if isinstance(value, values.Logop):
        lhs = _package_item_from_value(value.lhs)
        rhs = _package_item_from_value(value.rhs)
        return And(lhs, rhs) if value.op == "&" else Or(lhs, rhs)
    if isinstance(value, values.Group):
        return Block(ands([_package_item_from_value(item) for item in value.items]))
    raise _expected(value, "a package formula")


def filtered_formula_from_value(value: values.Value) -> Formula:
    if isinstance(value, values.List):
        return ands([_package_item_from_value(item) for item in value.items])
    return _package_item_from_value(value)


# Encoding


def _group_if(value: values.Value, wrap: bool) -> values.Value:
    return values.Group((value,)) if wrap else value


def _binary(
    op: values.LogOpKind,
    lhs: Any,
    rhs: Any,
    encode: Callable[[Any], values.Value],
    kind: Callable[[Any], values.LogOpKind | None],
) -> values.Logop:
    # `&` binds tighter than `|` and both associate to the left.
    lhs_kind, rhs_kind = kind(lhs), kind(rhs)
    return values.Logop(
        op,
        _group_if(encode(lhs), op == "&" and lhs_kind == "|"),
        _group_if(encode(rhs), rhs_kind is not None and (op == "&" or rhs_kind == op)),
    )


def _filter_kind(filter_: Filter) -> values.LogOpKind | None:
    if isinstance(filter_, FAnd):
        return "&"
    if isinstance(filter_, FOr):
        return "|"
    return None


def _formula_kind(formula: Formula) -> values.LogOpKind | None:
    if isinstance(formula, And):
        return "&"
    if isinstance(formula, Or):
        return "|"
    return None


def _atomic(value: values.Value) -> values.Value:
    return value if isinstance(value, values.ATOMIC_TYPES) else values.Group((value,))


def filter_to_value(filter_: Filter) -> values.Value:
    if isinstance(filter_, FBool):
        return values.Bool(filter_.value)
    if isinstance(filter_, FString):
        return values.String(filter_.value)
    if isinstance(filter_, FIdent):
        return values.Ident(str(filter_))
    if isinstance(filter_, FOp):
        return values.Relop(
            filter_.op,
            _atomic(filter_to_value(filter_.lhs)),
            _atomic(filter_to_value(filter_.rhs)),
        )
    if isinstance(filter_, (FAnd, FOr)):
        op: values.LogOpKind = "&" if isinstance(filter_, FAnd) else "|"
        return _binary(
            op, filter_.lhs, filter_.rhs, filter_to_value, _filter_kind
        )
    operand = _atomic(filter_to_value(filter_.operand))
    return values.PfxLogop("!" if isinstance(filter_, FNot) else "?", operand)


def condition_to_value(formula: Formula) -> values.Value:
    if isinstance(formula, Atom):
        payload = formula.value
        if isinstance(payload, VersionConstraint):
            return values.PrefixRelop(payload.op, _atomic(filter_to_value(payload.operand)))
        return filter_to_value(payload.filter)
    if isinstance(formula, (And, Or)):
        op: values.LogOpKind = "&" if isinstance(formula, And) else "|"
        return _binary(
            op, formula.lhs, formula.rhs, condition_to_value, _formula_kind
        )
    if isinstance(formula, Block):
        return values.Group((condition_to_value(formula.inner),))
    raise ValueError("cannot encode an empty condition")


def _package_item_to_value(formula: Formula) -> values.Value:
    if isinstance(formula, Atom):
        constraint: PackageConstraint = formula.value
        name = values.String(constraint.name)
        if constraint.condition == EMPTY:
            return name
        return values.Option(name, (condition_to_value(constraint.condition),))
    if isinstance(formula, (And, Or)):
        op: values.LogOpKind = "&" if isinstance(formula, And) else "|"
        return _binary(
            op, formula.lhs, formula.rhs, _package_item_to_value, _formula_kind
        )
    if isinstance(formula, Block):
        return values.Group(
            tuple(_package_item_to_value(item) for item in ands_to_list(formula.inner))
        )
    raise ValueError("cannot encode an empty package formula")


def filtered_formula_to_value(formula: Formula) -> values.List:
    return values.List(tuple(_package_item_to_value(item) for item in ands_to_list(formula)))
