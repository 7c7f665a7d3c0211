import pandas as pd
import pytest
from flatfile_explorer.core.parser import parse_lines
from flatfile_explorer.core.schema_io import (
    apply_layout,
    dump_layout,
    layout_column_names,
    load_layout,
    save_layout,
    tokenizer_config_from_layout,
)

LAYOUT_YAML = b"""
version: cdna-v1
tokenizer:
  group_delimiters: false
  delimiters: "\\t"
  comment_prefix: "##"
columns:
  - {name: gene, dtype: str, meaning: Gene symbol}
  - {name: coding_bases, dtype: int}
  - {name: pct_coding, dtype: float}
  - {dtype: int}
  - utr_bases
"""


def test_load_layout_from_yaml_bytes():
    layout = load_layout(LAYOUT_YAML)

    assert layout["version"] == "cdna-v1"
    assert layout["tokenizer"]["group_delimiters"] is False
    assert layout["tokenizer"]["skip_blank_lines"] is True
    assert layout["tokenizer"]["delimiters"] == "\t"
    assert layout_column_names(layout) == ["gene", "coding_bases", "pct_coding", "utr_bases"]
    assert layout["columns"][3]["dtype"] == "str"


def test_load_layout_defaults():
    layout = load_layout({})

    assert layout["version"] == "flatfile-layout-v1"
    assert layout["tokenizer"]["delimiters"] == " \t"
    assert layout["tokenizer"]["comment_prefix"] == "#"
    assert layout["tokenizer"]["word_count"] is None
    assert layout["columns"] == []


def test_load_layout_rejects_unsupported_types():
    with pytest.raises(TypeError):
        load_layout(42)


def test_save_and_reload_layout(tmp_path):
    path = tmp_path / "layout.yaml"
    layout = load_layout(LAYOUT_YAML)

    save_layout(layout, path)

    assert load_layout(path) == layout
    assert load_layout(str(path)) == layout
    assert "coding_bases" in dump_layout(layout)


def test_tokenizer_config_from_layout_drives_tokenizer():
    config = tokenizer_config_from_layout(load_layout(LAYOUT_YAML))

    df = parse_lines(["## comment", "BRCA1\t\t0.5", "TP53\t12\t0.25"], config=config)

    assert df.values.tolist() == [["BRCA1", "", "0.5"], ["TP53", "12", "0.25"]]


@pytest.mark.parametrize("word_count", [0, -3, "many", None, [2]])
def test_unusable_word_count_means_infer(word_count):
    layout = load_layout({"tokenizer": {"word_count": word_count}})

    assert layout["tokenizer"]["word_count"] is None
    assert tokenizer_config_from_layout(layout).word_count is None


def test_word_count_from_yaml_string_is_kept():
    layout = load_layout(b"tokenizer:\n  word_count: \"3\"\n")

    assert layout["tokenizer"]["word_count"] == 3
    assert parse_lines(["a b"], config=tokenizer_config_from_layout(layout)).values.tolist() == [["a", "b", None]]


def test_apply_layout_renames_and_coerces():
    layout = load_layout(LAYOUT_YAML)
    df = parse_lines(["BRCA1 12 0.5", "TP53 x 1.5"])

    typed = apply_layout(df, layout)

    assert list(typed.columns) == ["gene", "coding_bases", "pct_coding"]
    assert typed["coding_bases"].tolist()[0] == 12
    assert pd.isna(typed["coding_bases"].tolist()[1])
    assert typed["pct_coding"].tolist() == [0.5, 1.5]
    assert str(typed["gene"].dtype) == "string"


def test_apply_layout_drops_fractional_ints():
    layout = load_layout({"columns": [{"name": "n", "dtype": "int"}]})

    typed = apply_layout(pd.DataFrame({"col_1": ["3", "2.5"]}), layout)

    assert typed["n"].tolist()[0] == 3
    assert pd.isna(typed["n"].tolist()[1])


def test_apply_layout_without_columns_is_noop():
    df = parse_lines(["a b"])

    assert apply_layout(df, load_layout({})) is df
