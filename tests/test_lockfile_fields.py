import pytest

from monolock.errors import LockfileError
from monolock.lockfile.fields import (
    DUNIVERSE_DIRS_FIELD,
    ROOT_PACKAGES_FIELD,
    VERSION_FIELD,
    backward_compatible,
    check_compatible,
    version_from_string,
)
from monolock.lockfile.model import Version
from monolock.opam.file import OpamFile
from monolock.opam.hash import OpamHash
from monolock.opam.parser import parse_document
from monolock.opam.url import OpamUrl

SHA = "0123456789abcdef0123456789abcdef01234567"
DIGEST = "c" * 64


@pytest.mark.parametrize(
    ("have", "need", "expected"),
    [
        (Version(0, 2), Version(0, 1), True),
        (Version(0, 2), Version(0, 2), True),
        (Version(0, 2), Version(0, 3), False),
        (Version(1, 0), Version(0, 9), False),
    ],
)
def test_backward_compatible(have: Version, need: Version, expected: bool) -> None:
    assert backward_compatible(have, need) is expected


def test_version_strings() -> None:
    assert version_from_string("0.2") == Version(0, 2)
    assert str(Version(0, 2)) == "0.2"
    with pytest.raises(LockfileError, match='Invalid lockfile version: "0.2.1"'):
        version_from_string("0.2.1")


def test_newer_lockfiles_are_incompatible() -> None:
    check_compatible(Version(0, 1))
    with pytest.raises(LockfileError) as excinfo:
        check_compatible(Version(0, 3))
    assert excinfo.value.message == (
        "Incompatible opam-monorepo lockfile version 0.3. "
        "Please upgrade your opam-monorepo plugin."
    )
    assert excinfo.value.hint is not None


def test_version_field_round_trip() -> None:
    opam = VERSION_FIELD.set(OpamFile(), Version(0, 2))
    assert opam.field_names() == ["x-opam-monorepo-version"]
    assert VERSION_FIELD.get(opam) == Version(0, 2)


def test_missing_field_names_the_file() -> None:
    with pytest.raises(LockfileError) as excinfo:
        ROOT_PACKAGES_FIELD.get(OpamFile(), file="foo.opam.locked")
    assert excinfo.value.message == (
        "Missing x-opam-monorepo-root-packages field in opam-monorepo lockfile foo.opam.locked"
    )


def test_root_packages_are_written_sorted() -> None:
    opam = ROOT_PACKAGES_FIELD.set(OpamFile(), frozenset({"zarith", "foo"}))
    expected = parse_document('x-opam-monorepo-root-packages: ["foo" "zarith"]\n')
    assert opam.items == expected.items
    assert ROOT_PACKAGES_FIELD.get(expected) == frozenset({"foo", "zarith"})


def test_root_packages_reject_non_strings_with_position() -> None:
    opam = parse_document("x-opam-monorepo-root-packages: [foo]\n", filename="a.opam.locked")
    with pytest.raises(LockfileError) as excinfo:
        ROOT_PACKAGES_FIELD.get(opam)
    assert excinfo.value.message.startswith("Error in opam-monorepo lockfile a.opam.locked, [1:")
    assert excinfo.value.message.endswith(": Expected a string")


def test_duniverse_dirs_accept_two_and_three_element_entries() -> None:
    opam = parse_document(
        "x-opam-monorepo-duniverse-dirs: [\n"
        f'  ["https://github.com/example/foo.git#{SHA}" "foo" ["sha256={DIGEST}"]]\n'
        '  ["https://example.com/bar-1.0.tbz" "bar"]\n'
        "]\n"
    )
    dirs = DUNIVERSE_DIRS_FIELD.get(opam)
    foo_url = OpamUrl.of_string(f"https://github.com/example/foo.git#{SHA}")
    bar_url = OpamUrl.of_string("https://example.com/bar-1.0.tbz")
    assert dirs == {
        foo_url: ("foo", (OpamHash("sha256", DIGEST),)),
        bar_url: ("bar", ()),
    }


def test_duniverse_dirs_omit_empty_hash_lists_and_sort_by_url() -> None:
    dirs = {
        OpamUrl.of_string("https://example.com/z.tbz"): ("z", ()),
        OpamUrl.of_string("https://example.com/a.tbz"): ("a", (OpamHash("sha256", DIGEST),)),
    }
    value = DUNIVERSE_DIRS_FIELD.encode(dirs)
    assert DUNIVERSE_DIRS_FIELD.decode(value) == dirs
    reparsed = parse_document(
        "x-opam-monorepo-duniverse-dirs: [\n"
        f'  ["https://example.com/a.tbz" "a" ["sha256={DIGEST}"]]\n'
        '  ["https://example.com/z.tbz" "z"]\n'
        "]\n"
    ).field("x-opam-monorepo-duniverse-dirs")
    assert value == reparsed


@pytest.mark.parametrize(
    ("entry", "message"),
    [
        ('["url-only"]', 'Expected a list [ "url" "repo name" [<hashes>] ]'),
        ('["https://example.com/a.tbz" "a" "sha256=x"]', 'Expected a list [ "url" "repo name" [<hashes>] ]'),
        ('["https://example.com/a.tbz" "a" [sha256]]', "Expected a hash string representation"),
        ('["https://example.com/a.tbz" "a" ["sha256=x"]]', "Invalid hash: sha256=x"),
    ],
)
def test_duniverse_dirs_errors(entry: str, message: str) -> None:
    opam = parse_document(f"x-opam-monorepo-duniverse-dirs: [{entry}]\n", filename="l.opam.locked")
    with pytest.raises(LockfileError) as excinfo:
        DUNIVERSE_DIRS_FIELD.get(opam)
    assert excinfo.value.message.startswith("Error in opam-monorepo lockfile l.opam.locked")
    assert excinfo.value.message.endswith(message)
