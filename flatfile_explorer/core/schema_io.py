#!/usr/bin/env python3
"""
flatfile_explorer.core.schema_io
--------------------------------
Layout load/save helpers. A layout is a small YAML file holding the tokenizer
settings for a family of files and, optionally, names and dtypes for their columns:

    version: flatfile-layout-v1
    tokenizer:
      group_delimiters: true
      skip_blank_lines: true
      delimiters: " \\t"
      comment_prefix: "#"
    columns:
      - {name: gene, dtype: str, meaning: Gene symbol}
      - {name: coding_bases, dtype: int}
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import yaml

from .constants import (
    DEFAULT_COMMENT_PREFIX,
    DEFAULT_DELIMITERS,
    DEFAULT_ENCODING,
    DEFAULT_LAYOUT_VERSION,
    LAYOUT_DTYPES,
)
from .field_utils import make_byte_predicate, make_prefix_comment_predicate
from .tokenizer import TokenizerConfig


def _default_tokenizer_section() -> Dict[str, Any]:
    return {
        "group_delimiters": True,
        "skip_blank_lines": True,
        "delimiters": DEFAULT_DELIMITERS.decode("latin-1"),
        "comment_prefix": DEFAULT_COMMENT_PREFIX.decode("utf-8"),
        "word_count": None,
        "encoding": DEFAULT_ENCODING,
    }


def _sanitize_word_count(value: Any) -> int | None:
    """Positive field count, or None (infer from the first line) for 0, negatives and non-numbers."""
    try:
        count = int(value or 0)
    except (TypeError, ValueError):
        return None
    return count if count > 0 else None


def load_layout(src: Any) -> Dict[str, Any]:
    """Load a layout from a Path, str path, YAML bytes, or a dict that already looks like one.
    Returns a dict with keys: version (str), tokenizer (dict), columns (list of {name, dtype, meaning}).
    Unknown dtypes fall back to "str"; columns without a name are dropped.
    """
    if isinstance(src, dict):
        layout = src
    else:
        text: str
        if isinstance(src, (str, Path)):
            text = Path(src).read_text(encoding="utf-8")
        elif isinstance(src, (bytes, bytearray)):
            text = bytes(src).decode("utf-8", errors="ignore")
        else:
            raise TypeError("Unsupported layout source type")
        layout = yaml.safe_load(text) or {}
        if not isinstance(layout, dict):
            raise TypeError("Layout YAML must be a mapping")

    version = str(layout.get("version", DEFAULT_LAYOUT_VERSION))

    tokenizer = _default_tokenizer_section()
    tok_src = layout.get("tokenizer") or {}
    if isinstance(tok_src, dict):
        for key in tokenizer:
            if key in tok_src:
                tokenizer[key] = tok_src[key]
    tokenizer["group_delimiters"] = bool(tokenizer["group_delimiters"])
    tokenizer["skip_blank_lines"] = bool(tokenizer["skip_blank_lines"])
    tokenizer["word_count"] = _sanitize_word_count(tokenizer["word_count"])

    columns: List[Dict[str, str]] = []
    for c in layout.get("columns") or []:
        if isinstance(c, str):
            c = {"name": c}
        if not isinstance(c, dict):
            continue
        name = str(c.get("name") or "").strip()
        if not name:
            continue
        dtype = str(c.get("dtype") or "str")
        if dtype not in LAYOUT_DTYPES:
            dtype = "str"
        columns.append({"name": name, "dtype": dtype, "meaning": str(c.get("meaning") or "")})
    return {"version": version, "tokenizer": tokenizer, "columns": columns}


def dump_layout(layout: Dict[str, Any]) -> str:
    """Return layout as a YAML string."""
    return yaml.safe_dump(layout, sort_keys=False, allow_unicode=True)


def save_layout(layout: Dict[str, Any], path: Path) -> None:
    path.write_text(dump_layout(layout), encoding="utf-8")


def tokenizer_config_from_layout(layout: Dict[str, Any]) -> TokenizerConfig:
    tok = (layout or {}).get("tokenizer") or _default_tokenizer_section()
    return TokenizerConfig(
        group_delimiters=tok.get("group_delimiters", True),
        skip_blank_lines=tok.get("skip_blank_lines", True),
        delimiter_predicate=make_byte_predicate(tok.get("delimiters") or DEFAULT_DELIMITERS),
        comment_predicate=make_prefix_comment_predicate(tok.get("comment_prefix")),
        word_count=tok.get("word_count"),
        encoding=tok.get("encoding") or DEFAULT_ENCODING,
    )


def layout_column_names(layout: Dict[str, Any]) -> List[str]:
    return [c["name"] for c in (layout or {}).get("columns") or []]


def apply_layout(df: pd.DataFrame, layout: Dict[str, Any]) -> pd.DataFrame:
    """Rename positional columns to the layout's names and coerce their dtypes.
    Extra frame columns keep their names; values that do not parse become missing.
    """
    columns = (layout or {}).get("columns") or []
    if df.empty or not columns:
        return df
    out = df.copy()
    rename = {old: spec["name"] for old, spec in zip(out.columns, columns)}
    out = out.rename(columns=rename)
    for spec in columns:
        name = spec["name"]
        if name not in out.columns:
            continue
        dtype = LAYOUT_DTYPES.get(spec.get("dtype", "str"), "string")
        if dtype == "string":
            out[name] = out[name].astype("string")
            continue
        num = pd.to_numeric(out[name], errors="coerce")
        if dtype == "Int64":
            num = num.where(num.isna() | (num % 1 == 0))
        out[name] = num.astype(dtype)
    return out
