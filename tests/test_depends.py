import pytest

from monolock.errors import LockfileError
from monolock.lockfile.depends import (
    INVALID_DEPENDS,
    from_filtered_formula,
    from_package_summaries,
    to_filtered_formula,
)
from monolock.lockfile.model import Dependency
from monolock.opam.file import OpamFile
from monolock.opam.formula import EMPTY
from monolock.opam.package import Package
from monolock.opam.parser import parse_document
from monolock.opam.printer import format_document
from monolock.summary import PackageSummary


def _decode(depends: str) -> list[Dependency]:
    return from_filtered_formula(parse_document(f"depends: {depends}\n").depends())


def test_vendored_dependencies_are_decoded_in_either_order() -> None:
    assert _decode('["fmt" {= "0.9.0" & vendor} "cmdliner" {vendor & = "1.2.0"}]') == [
        Dependency(Package("fmt", "0.9.0"), vendored=True),
        Dependency(Package("cmdliner", "1.2.0"), vendored=True),
    ]


def test_bare_equality_is_not_vendored() -> None:
    assert _decode('["dune" {= "3.0.0"}]') == [Dependency(Package("dune", "3.0.0"), vendored=False)]


@pytest.mark.parametrize(
    "depends",
    [
        '["fmt" {!= "0.9.0"}]',
        '["fmt"]',
        '["fmt" {vendor}]',
        '["fmt" {= "0.9.0" & vendor & with-test}]',
        '["fmt" {= "0.9.0" & with-test}]',
        '["fmt" {= "0.9.0" | vendor}]',
        '["a" {= "1"} | "b" {= "1"}]',
    ],
)
def test_other_shapes_are_rejected(depends: str) -> None:
    with pytest.raises(LockfileError) as excinfo:
        _decode(depends)
    assert excinfo.value.message == INVALID_DEPENDS


def test_encoding_sorts_and_marks_vendored_packages() -> None:
    formula = to_filtered_formula(
        [
            Dependency(Package("fmt", "0.9.0"), vendored=True),
            Dependency(Package("dune", "3.0.0"), vendored=False),
        ]
    )
    assert format_document(OpamFile().with_depends(formula)) == (
        'depends: [\n  "dune" {= "3.0.0"}\n  "fmt" {= "0.9.0" & vendor}\n]\n'
    )


def test_no_dependencies_encode_to_an_empty_formula() -> None:
    assert to_filtered_formula([]) == EMPTY
    assert from_filtered_formula(EMPTY) == []


def test_encode_then_decode_keeps_dependencies() -> None:
    dependencies = [
        Dependency(Package("dune", "3.0.0"), vendored=False),
        Dependency(Package("fmt", "0.9.0"), vendored=True),
    ]
    assert from_filtered_formula(to_filtered_formula(dependencies)) == dependencies


def test_vendored_flag_comes_from_package_summaries(package_summaries: list[PackageSummary]) -> None:
    summaries = [
        *package_summaries,
        PackageSummary(package=Package("conf-gmp", "4")),
        PackageSummary(package=Package("dune", "3.0.0"), url_src=package_summaries[0].url_src),
    ]
    assert [dependency.vendored for dependency in from_package_summaries(summaries)] == [
        True,
        False,
        False,
        False,
    ]
