"""Shared test fixtures."""

from __future__ import annotations

import pytest

from monolock.duniverse import GitUrl, Repo
from monolock.opam.formula import FIdent, FOp, FString
from monolock.opam.hash import OpamHash
from monolock.opam.package import Package
from monolock.opam.url import OpamUrl
from monolock.summary import PackageSummary

FOO_URL = "https://github.com/example/foo.git"
FMT_URL = "https://github.com/example/fmt.git"
DEBIAN = FOp(FIdent((), "os-family"), "=", FString("debian"))


@pytest.fixture
def foo_hash() -> OpamHash:
    return OpamHash("sha256", "5f" * 32)


@pytest.fixture
def package_summaries() -> list[PackageSummary]:
    return [
        PackageSummary(
            package=Package("foo", "1.0"),
            url_src=OpamUrl.of_string(f"{FOO_URL}#v1.0"),
            depexts=((frozenset({"libgmp-dev"}), DEBIAN),),
        ),
        PackageSummary(package=Package("ocamlfind", "1.9")),
    ]


@pytest.fixture
def duniverse(foo_hash: OpamHash) -> list[Repo]:
    return [
        Repo(
            dir="foo",
            url=GitUrl(repo=FOO_URL, ref="0123456789abcdef0123456789abcdef01234567"),
            hashes=(foo_hash,),
            provided_packages=(Package("foo", "1.0"), Package("foo-extra", "1.0")),
        ),
        Repo(
            dir="fmt",
            url=GitUrl(repo=FMT_URL, ref="fedcba9876543210fedcba9876543210fedcba98"),
            hashes=(),
            provided_packages=(Package("fmt", "0.9.0"),),
        ),
    ]
