"""In-memory opam manifest with typed accessors for the standard fields."""

from __future__ import annotations

from dataclasses import dataclass, replace

from monolock.errors import ManifestError, ValidationError
from monolock.opam import values
from monolock.opam.formula import (
    EMPTY,
    FBool,
    Filter,
    Formula,
    filter_ands,
    filter_from_value,
    filter_to_value,
    filtered_formula_from_value,
    filtered_formula_to_value,
)
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl

Depext = tuple[frozenset[str], Filter]
PinDepend = tuple[Package, OpamUrl]


@dataclass(frozen=True, slots=True)
class OpamFile:
    items: tuple[values.Item, ...] = ()
    filename: str = "None"

    def field(self, name: str) -> values.Value | None:
        for item in self.items:
            if isinstance(item, values.Field) and item.name == name:
                return item.value
        return None

    def with_field(self, name: str, value: values.Value) -> OpamFile:
        new_field = values.Field(name, value)
        items = list(self.items)
        for index, item in enumerate(items):
            if isinstance(item, values.Field) and item.name == name:
                items[index] = new_field
                return replace(self, items=tuple(items))
        return replace(self, items=(*items, new_field))

    def without_field(self, name: str) -> OpamFile:
        items = tuple(
            item
            for item in self.items
            if not (isinstance(item, values.Field) and item.name == name)
        )
        return replace(self, items=items)

    def field_names(self) -> list[str]:
        return [item.name for item in self.items if isinstance(item, values.Field)]

    # Standard fields

    def with_opam_version(self, version: str) -> OpamFile:
        return self.with_field("opam-version", values.String(version))

    def synopsis(self) -> str | None:
        value = self.field("synopsis")
        return _string(value, "synopsis") if value is not None else None

    def with_synopsis(self, synopsis: str) -> OpamFile:
        return self.with_field("synopsis", values.String(synopsis))

    def maintainer(self) -> list[str]:
        value = self.field("maintainer")
        if value is None:
            return []
        if isinstance(value, values.String):
            return [value.value]
        if isinstance(value, values.List):
            return [_string(item, "maintainer") for item in value.items]
        raise _bad_field(value, "maintainer", "expected a string or a list of strings")

    def with_maintainer(self, maintainers: list[str]) -> OpamFile:
        if len(maintainers) == 1:
            return self.with_field("maintainer", values.String(maintainers[0]))
        return self.with_field("maintainer", values.string_list(maintainers))

    def depends(self) -> Formula:
        value = self.field("depends")
        if value is None:
            return EMPTY
        return filtered_formula_from_value(value)

    def with_depends(self, formula: Formula) -> OpamFile:
        if formula == EMPTY:
            return self.without_field("depends")
        return self.with_field("depends", filtered_formula_to_value(formula))

    def pin_depends(self) -> list[PinDepend]:
        value = self.field("pin-depends")
        if value is None:
            return []
        if not isinstance(value, values.List):
            raise _bad_field(value, "pin-depends", "expected a list")
        if _is_pin_pair(value):
            return [_pin_from_value(value)]
        return [_pin_from_value(item) for item in value.items]

    def with_pin_depends(self, pins: list[PinDepend]) -> OpamFile:
        if not pins:
            return self.without_field("pin-depends")
        items = tuple(
            values.List((values.String(str(package)), values.String(str(url))))
            for package, url in pins
        )
        return self.with_field("pin-depends", values.List(items))

    def depexts(self) -> list[Depext]:
        value = self.field("depexts")
        if value is None:
            return []
        if not isinstance(value, values.List):
            raise _bad_field(value, "depexts", "expected a list")
        return [_depext_from_value(item) for item in value.items]

    def with_depexts(self, depexts: list[Depext]) -> OpamFile:
        if not depexts:
            return self.without_field("depexts")
        return self.with_field("depexts", values.List(tuple(_depext_to_value(d) for d in depexts)))


def _bad_field(value: values.Value, name: str, message: str) -> ManifestError:
    return ManifestError(f"Bad format for field `{name}` in {value.pos}: {message}")


def _string(value: values.Value, name: str) -> str:
    if not isinstance(value, values.String):
        raise _bad_field(value, name, "expected a string")
    return value.value


def _is_pin_pair(value: values.List) -> bool:
    return len(value.items) == 2 and all(isinstance(item, values.String) for item in value.items)


def _pin_from_value(value: values.Value) -> PinDepend:
    if not isinstance(value, values.List) or not _is_pin_pair(value):
        raise _bad_field(value, "pin-depends", 'expected a list ["package.version" "url"]')
    raw_package, raw_url = (item.value for item in value.items)  # type: ignore[union-attr]
    try:
        return Package.of_string(raw_package), OpamUrl.of_string(raw_url)
    except ValidationError as exc:
        raise _bad_field(value, "pin-depends", str(exc)) from exc


def _depext_from_value(value: values.Value) -> Depext:
    filter_: Filter = FBool(True)
    if isinstance(value, values.Option):
        filter_ = filter_ands([filter_from_value(option) for option in value.options])
        value = value.value
    if not isinstance(value, values.List):
        raise _bad_field(value, "depexts", "expected a list of system package names")
    names = frozenset(_string(item, "depexts") for item in value.items)
    return names, filter_


def _depext_to_value(depext: Depext) -> values.Value:
    names, filter_ = depext
    packages = values.string_list(sorted(names))
    if filter_ == FBool(True):
        return packages
    return values.Option(packages, (filter_to_value(filter_),))
