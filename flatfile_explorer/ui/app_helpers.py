#!/usr/bin/env python3
"""
flatfile_explorer.ui.app_helpers
--------------------------------
UI helper functions extracted from app.py to keep the main orchestrator thin and readable.
"""
from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Dict, List, Tuple

import pandas as pd
import streamlit as st

from flatfile_explorer.core.constants import DEFAULT_DELIMITERS
from flatfile_explorer.core.field_utils import (
    canonicalize_display_columns,
    decode_escapes,
    make_byte_predicate,
    make_prefix_comment_predicate,
)
from flatfile_explorer.core.schema_io import dump_layout, tokenizer_config_from_layout
from flatfile_explorer.core.tokenizer import TokenizerConfig


def _escape_for_display(chars: str) -> str:
    return chars.replace("\\", "\\\\").replace("\t", "\\t")


def render_tokenizer_sidebar(layout: Dict[str, Any]) -> Tuple[TokenizerConfig, Dict[str, Any]]:
    """Render tokenizer options seeded from the layout.
    Returns the resulting config and the same settings as a layout "tokenizer" section.
    """
    st.sidebar.header("Tokenizer")
    tok = layout.get("tokenizer") or {}
    base = tokenizer_config_from_layout(layout)

    group = st.sidebar.toggle(
        "Group consecutive delimiters",
        value=bool(tok.get("group_delimiters", True)),
        help="Off: every delimiter separates a field, so runs of delimiters produce empty fields.",
    )
    skip_blank = st.sidebar.toggle("Skip blank lines", value=bool(tok.get("skip_blank_lines", True)))
    delims = st.sidebar.text_input(
        "Delimiters",
        value=_escape_for_display(tok.get("delimiters") or DEFAULT_DELIMITERS.decode("latin-1")),
        help=r"Each character is a delimiter. Use \t for tab and \s for space.",
    )
    comment = st.sidebar.text_input(
        "Comment prefix",
        value=str(tok.get("comment_prefix") or ""),
        help="Lines starting with this text are skipped. Leave empty to keep every line.",
    )
    word_count = st.sidebar.number_input(
        "Fields per line (0 = infer)", min_value=0, value=int(tok.get("word_count") or 0), step=1
    )

    delim_chars = decode_escapes(delims) or DEFAULT_DELIMITERS.decode("latin-1")
    section = dict(
        tok,
        group_delimiters=group,
        skip_blank_lines=skip_blank,
        delimiters=delim_chars,
        comment_prefix=comment,
        word_count=int(word_count) or None,
    )
    config = base.replace(
        group_delimiters=group,
        skip_blank_lines=skip_blank,
        delimiter_predicate=make_byte_predicate(delim_chars),
        comment_predicate=make_prefix_comment_predicate(comment),
        word_count=section["word_count"],
    )
    return config, section


def compute_display_columns(df: pd.DataFrame, layout_columns: List[Dict[str, Any]]) -> List[str]:
    """Layout-named columns first in layout order, then any remaining positional columns."""
    named = [c.get("name") for c in (layout_columns or []) if c.get("name")]
    return canonicalize_display_columns(named + list(df.columns), available=list(df.columns))


def render_records(df: pd.DataFrame, layout: Dict[str, Any], short_mask: pd.Series) -> pd.DataFrame:
    """Render the parsed records with a search box; returns the filtered frame.
    short_mask flags rows with unset trailing fields and shares df's index.
    """
    st.subheader("Records")
    query = st.text_input("Search records", key="search_records")
    dfc = df
    if query:
        q = query.lower()
        dfc = df[df.apply(lambda r: any(q in str(v).lower() for v in r.values), axis=1)]
    cols = compute_display_columns(dfc, layout.get("columns") or [])
    st.dataframe(dfc[cols], hide_index=True, use_container_width=True)
    short = dfc[short_mask.loc[dfc.index]]
    if not short.empty:
        with st.expander(f"Short rows ({len(short)})", expanded=False):
            st.caption("These lines had fewer fields than expected; trailing fields are empty.")
            st.dataframe(short[cols], hide_index=True, use_container_width=True)
    return dfc


def render_errors(errors: pd.DataFrame) -> None:
    if errors is None or errors.empty:
        return
    st.subheader("Malformed rows")
    st.warning(f"{len(errors)} line(s) had more fields than expected and were skipped.")
    st.dataframe(errors, hide_index=True, use_container_width=True)


def build_jsonl(df: pd.DataFrame) -> str:
    buf = io.StringIO()
    for row in df.to_dict(orient="records"):
        clean = {k: (None if pd.isna(v) else v) for k, v in row.items()}
        buf.write(json.dumps(clean, ensure_ascii=False, default=str) + "\n")
    return buf.getvalue()


def render_exports_sidebar(df: pd.DataFrame, errors: pd.DataFrame, layout: Dict[str, Any], source_name: str) -> None:
    """Render sidebar exports: CSV zip, Excel workbook, JSON Lines and the current layout."""
    st.sidebar.header("Exports")

    zip_buf = io.BytesIO()
    with zipfile.ZipFile(zip_buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        meta = {"source": source_name, "layout_version": layout.get("version"), "records": len(df), "errors": len(errors)}
        zf.writestr("_metadata.json", json.dumps(meta, ensure_ascii=False, indent=2))
        zf.writestr("records.csv", df.to_csv(index=False))
        if not errors.empty:
            zf.writestr("errors.csv", errors.to_csv(index=False))
    zip_buf.seek(0)
    st.sidebar.download_button("Export CSVs (zip)", zip_buf.getvalue(), file_name="flatfile_export.zip", mime="application/zip")

    excel_buf = io.BytesIO()
    with pd.ExcelWriter(excel_buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name="records")
        if not errors.empty:
            errors.to_excel(writer, index=False, sheet_name="errors")
        pd.DataFrame([{"source": source_name, "layout_version": layout.get("version")}]).to_excel(
            writer, index=False, sheet_name="META"
        )
    excel_buf.seek(0)
    st.sidebar.download_button(
        "Export Excel",
        excel_buf.getvalue(),
        file_name="flatfile_export.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    st.sidebar.download_button("Export JSON Lines", build_jsonl(df).encode("utf-8"), file_name="records.jsonl", mime="application/json")
    st.sidebar.download_button("Download layout.yaml", dump_layout(layout).encode("utf-8"), file_name="layout.yaml", mime="text/yaml")
