import pytest
from flatfile_explorer.core.field_utils import (
    canonicalize_display_columns,
    decode_escapes,
    default_column_names,
    make_byte_predicate,
    make_prefix_comment_predicate,
)


def test_byte_predicate_matches_only_given_characters():
    is_delim = make_byte_predicate("\t,")

    assert is_delim(ord("\t"))
    assert is_delim(ord(","))
    assert not is_delim(ord(" "))


def test_byte_predicate_requires_characters():
    with pytest.raises(ValueError):
        make_byte_predicate("")


def test_prefix_comment_predicate():
    is_comment = make_prefix_comment_predicate("##")

    assert is_comment(b"## METRICS CLASS")
    assert not is_comment(b"# single")
    assert not is_comment(b"")


def test_empty_prefix_disables_comments():
    is_comment = make_prefix_comment_predicate("")

    assert not is_comment(b"# not a comment any more")


def test_decode_escapes():
    assert decode_escapes(r"\t,") == "\t,"
    assert decode_escapes(r"\s\t") == " \t"
    assert decode_escapes(r"a\\b") == "a\\b"
    assert decode_escapes(r"\n") == r"\n"


def test_default_column_names():
    assert default_column_names(3) == ["col_1", "col_2", "col_3"]
    assert default_column_names(0) == []


def test_canonicalize_display_columns_dedupes_and_filters():
    assert canonicalize_display_columns(["b", "a", "b", "zz"], available=["a", "b"]) == ["b", "a"]
