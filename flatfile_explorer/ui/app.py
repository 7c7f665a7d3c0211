#!/usr/bin/env python3
"""
flatfile_explorer.ui.app
------------------------
Streamlit UI for exploring delimiter-separated flat files.
"""
from __future__ import annotations

from typing import Any, Dict

import pandas as pd
import streamlit as st

from flatfile_explorer.core.errors import MalformedRowError
from flatfile_explorer.core.line_source import IterableLineSource
from flatfile_explorer.core.parser import errors_to_frame, records_to_frame, short_row_mask, tokenize_source
from flatfile_explorer.core.schema_io import apply_layout, layout_column_names, load_layout
from flatfile_explorer.ui.app_helpers import (
    render_errors,
    render_exports_sidebar,
    render_records,
    render_tokenizer_sidebar,
)

# Safely set page config only when running under Streamlit (avoid ScriptRunContext warning in bare mode)
try:
    from streamlit.runtime.scriptrunner import get_script_run_ctx  # type: ignore
except ImportError:
    get_script_run_ctx = None  # type: ignore

if get_script_run_ctx is not None and get_script_run_ctx() is not None:
    st.set_page_config(page_title="Flat File Explorer", layout="wide")


def render_layout_editor(layout: Dict[str, Any], width: int) -> Dict[str, Any]:
    """Editable grid of column names/dtypes; returns the edited layout."""
    st.subheader("Layout")
    cols = list(layout.get("columns") or [])
    # Offer one row per field so positional columns can be named in place
    for i in range(len(cols), width):
        cols.append({"name": f"col_{i + 1}", "dtype": "str", "meaning": ""})
    edited = st.data_editor(
        pd.DataFrame(cols, columns=["name", "dtype", "meaning"]),
        num_rows="dynamic",
        use_container_width=True,
        column_config={"dtype": st.column_config.SelectboxColumn("dtype", options=["str", "int", "float"])},
        key="layout_editor",
    )
    edited = edited.dropna(subset=["name"])
    return load_layout(dict(layout, columns=edited.to_dict(orient="records")))


# -----------------------------
# UI
# -----------------------------

def make_app():
    """Main Streamlit application entry point.
    Handles input, tokenizer options, parsing, the layout editor and exports.
    Keep this as a thin coordinator; rendering is factored into helpers.
    """
    st.title("Flat File Explorer")

    # Sidebar: Inputs and Layout
    st.sidebar.header("Inputs")
    input_mode = st.sidebar.radio("Provide data via", ["Upload file", "Paste text"], horizontal=False)
    data: bytes = b""
    source_name = "pasted text"
    if input_mode == "Upload file":
        uploaded = st.sidebar.file_uploader("Upload flat file", type=["txt", "tsv", "dat", "metrics", "log"])
        if uploaded is not None:
            data = uploaded.getvalue()
            source_name = uploaded.name
    else:
        data = st.sidebar.text_area("Paste data", height=200).encode("utf-8")

    st.sidebar.header("Layout")
    layout_upl = st.sidebar.file_uploader("Load layout (YAML)", type=["yaml", "yml"], key="layout_uploader")
    layout = load_layout(layout_upl.getvalue()) if layout_upl is not None else load_layout({})

    config, tok_section = render_tokenizer_sidebar(layout)
    layout = dict(layout, tokenizer=tok_section)
    lenient = st.sidebar.toggle("Skip malformed rows", value=True, help="Off: stop at the first row with too many fields.")

    if not data.strip():
        st.info("Upload or paste a flat file to begin.")
        return

    source = IterableLineSource.from_bytes(data, name=source_name)
    try:
        rows, errors, tokenizer = tokenize_source(source, config, strict=not lenient)
    except MalformedRowError as ex:
        st.error(str(ex))
        return
    finally:
        source.close()

    df = records_to_frame(rows, layout_column_names(layout))
    errors_df = errors_to_frame(errors)

    # Overview
    st.subheader("Overview")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Lines read", tokenizer.lines_read)
    c2.metric("Records", len(df))
    c3.metric("Fields per line", tokenizer.expected_arity or 0)
    c4.metric("Malformed rows", len(errors_df))

    if df.empty:
        st.warning("No records parsed.")
        render_errors(errors_df)
        return

    layout = render_layout_editor(layout, len(df.columns))
    typed_df = apply_layout(records_to_frame(rows, layout_column_names(layout)), layout)

    # short rows come from the untyped frame; coercion turns bad values into missing ones too
    render_records(typed_df, layout, short_row_mask(df))
    render_errors(errors_df)
    render_exports_sidebar(typed_df, errors_df, layout, source_name)


if __name__ == "__main__":
    make_app()
