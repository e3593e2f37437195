from monolock.errors import (
    ErrorCode,
    LockfileError,
    ManifestError,
    MonolockError,
    ValidationError,
)
from monolock.lockfile.fields import pos_error, value_error
from monolock.opam import values


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        LockfileError("lock mismatch"),
        ManifestError("bad manifest"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.LOCKFILE.value,
        ErrorCode.MANIFEST.value,
    ]
    assert all(isinstance(error, MonolockError) for error in errors)


def test_error_to_dict_includes_hint_and_context() -> None:
    error = LockfileError(
        "Missing dir.",
        hint="Regenerate the lockfile.",
        context={"url": "git+https://example.invalid/x.git#abc"},
    )
    payload = error.to_dict()
    assert payload["code"] == "E_LOCKFILE"
    assert payload["hint"] == "Regenerate the lockfile."
    assert payload["context"] == {"url": "git+https://example.invalid/x.git#abc"}
    assert "Hint: Regenerate the lockfile." in str(error)
    assert error.message == "Missing dir."


def test_in_memory_values_use_placeholder_position() -> None:
    error = value_error(values.String("x"), "Expected a list")
    assert str(error) == "Error in opam-monorepo lockfile None, [0:0]-[0:0]: Expected a list"


def test_position_errors_report_file_and_span() -> None:
    pos = values.Pos(filename="foo.opam.locked", start=(3, 2), stop=(3, 9))
    error = pos_error(pos, "Expected a string")
    assert error.message == (
        "Error in opam-monorepo lockfile foo.opam.locked, [3:2]-[3:9]: Expected a string"
    )


def test_positions_do_not_affect_value_equality() -> None:
    located = values.String("x", values.Pos(filename="a", start=(1, 0), stop=(1, 3)))
    assert located == values.String("x")
