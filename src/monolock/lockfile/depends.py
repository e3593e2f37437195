"""Encoding of resolved dependencies as an opam ``depends`` formula.

Every dependency is pinned with an equality constraint. Vendored ones are
additionally guarded by the ``vendor`` filter variable::

    depends: [
      "dune" {= "3.0.0"}
      "fmt" {= "0.9.0" & vendor}
    ]

The decoder accepts the vendor variable on either side of the ``&`` since
older lockfiles were not consistent about the order.
"""

from __future__ import annotations

from monolock.config import LOCKFILE_KIND, VENDOR_VARIABLE
from monolock.errors import LockfileError
from monolock.lockfile.fields import value_error
from monolock.lockfile.model import Dependency
from monolock.opam import values
from monolock.opam.formula import (
    EMPTY,
    And,
    Atom,
    FIdent,
    FilterCondition,
    Formula,
    FString,
    PackageConstraint,
    VersionConstraint,
    ands,
    ands_to_list,
)
from monolock.opam.package import Package
from monolock.summary import PackageSummary

INVALID_DEPENDS = (
    f"Invalid {LOCKFILE_KIND} lockfile: depends should be expressed as a list equality "
    "constraints optionally with a `vendor` variable"
)


def from_package_summaries(summaries: list[PackageSummary]) -> list[Dependency]:
    return [
        Dependency(package=summary.package, vendored=summary.is_vendored())
        for summary in summaries
    ]


def variable_equal(a: FIdent, b: str) -> bool:
    return str(a) == b


def _version_equality(condition: Formula) -> str | None:
    if not isinstance(condition, Atom) or not isinstance(condition.value, VersionConstraint):
        return None
    constraint = condition.value
    if constraint.op != "=" or not isinstance(constraint.operand, FString):
        return None
    return constraint.operand.value


def _is_vendor_filter(condition: Formula) -> bool:
    if not isinstance(condition, Atom) or not isinstance(condition.value, FilterCondition):
        return False
    filter_ = condition.value.filter
    return (
        isinstance(filter_, FIdent)
        and not filter_.packages
        and filter_.converter is None
        and variable_equal(filter_, VENDOR_VARIABLE)
    )


def _dependency_from_atom(atom: Formula) -> Dependency:
    if not isinstance(atom, Atom) or not isinstance(atom.value, PackageConstraint):
        raise LockfileError(INVALID_DEPENDS)
    name, condition = atom.value.name, atom.value.condition

    version = _version_equality(condition)
    if version is not None:
        return Dependency(package=Package(name, version), vendored=False)

    if isinstance(condition, And):
        for constraint, variable in (
            (condition.lhs, condition.rhs),
            (condition.rhs, condition.lhs),
        ):
            version = _version_equality(constraint)
            if version is not None and _is_vendor_filter(variable):
                return Dependency(package=Package(name, version), vendored=True)

    raise LockfileError(INVALID_DEPENDS)


def from_filtered_formula(formula: Formula) -> list[Dependency]:
    return [_dependency_from_atom(atom) for atom in ands_to_list(formula)]


def _one_to_formula(dependency: Dependency) -> Formula:
    package = dependency.package
    version_constraint = Atom(VersionConstraint("=", FString(package.version)))
    condition: Formula = version_constraint
    if dependency.vendored:
        condition = And(version_constraint, Atom(FilterCondition(FIdent((), VENDOR_VARIABLE))))
    return Atom(PackageConstraint(package.name, condition))


def to_filtered_formula(dependencies: list[Dependency] | tuple[Dependency, ...]) -> Formula:
    ordered = sorted(dependencies, key=lambda dependency: dependency.package)
    if not ordered:
        return EMPTY
    return ands([_one_to_formula(dependency) for dependency in ordered])


def check_unique_packages(dependencies: list[Dependency], value: values.Value) -> None:
    seen: set[str] = set()
    for dependency in dependencies:
        name = dependency.package.name
        if name in seen:
            raise value_error(value, f"Duplicate package {name} in depends")
        seen.add(name)
