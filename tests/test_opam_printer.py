from monolock.opam import values
from monolock.opam.file import OpamFile
from monolock.opam.parser import parse_document
from monolock.opam.printer import escape_string, format_document, format_value


def test_format_value_renders_formula_atoms() -> None:
    value = values.Option(
        values.String("fmt"),
        (
            values.Logop(
                "&",
                values.PrefixRelop("=", values.String("0.9.0")),
                values.Ident("vendor"),
            ),
        ),
    )
    assert format_value(value) == '"fmt" {= "0.9.0" & vendor}'


def test_escape_string_escapes_quotes_backslashes_and_newlines() -> None:
    assert escape_string('a "b" \\ c\nd') == '"a \\"b\\" \\\\ c\\nd"'


def test_lists_of_compound_values_print_one_item_per_line() -> None:
    opam = OpamFile().with_field(
        "depends",
        values.List(
            (
                values.Option(values.String("a"), (values.PrefixRelop("=", values.String("1")),)),
                values.String("b"),
            )
        ),
    )
    assert format_document(opam) == 'depends: [\n  "a" {= "1"}\n  "b"\n]\n'


def test_lists_of_atoms_print_inline() -> None:
    opam = OpamFile().with_field("x-opam-monorepo-root-packages", values.string_list(["a", "b"]))
    assert format_document(opam) == 'x-opam-monorepo-root-packages: ["a" "b"]\n'


def test_printed_documents_parse_back_to_the_same_tree() -> None:
    text = (
        'opam-version: "2.0"\n'
        'depends: [\n  "a" {= "1" & vendor}\n  "b" {>= "2" & (with-test | with-doc)}\n]\n'
        'available: !(os = "win32") & ?foo\n'
        'x-empty: []\n'
        'url {\n  src: "https://example.com/x.tgz"\n}\n'
    )
    first = parse_document(text)
    second = parse_document(format_document(first))
    assert second.items == first.items


def test_empty_document_prints_nothing() -> None:
    assert format_document(OpamFile()) == ""
