#!/usr/bin/env python3
"""
flatfile_explorer.core.parser
-----------------------------
Tabular layer over the tokenizer: runs a Tokenizer to completion, optionally
skipping malformed rows, and turns the records into pandas DataFrames.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from .constants import ERROR_COLUMNS
from .errors import MalformedRowError
from .field_utils import default_column_names
from .line_source import FileLineSource, IterableLineSource, LineSource
from .tokenizer import Record, Tokenizer, TokenizerConfig

logger = logging.getLogger(__name__)


# -----------------------------
# Driving the tokenizer
# -----------------------------

def tokenize_source(
    source: LineSource,
    config: TokenizerConfig | None = None,
    strict: bool = True,
) -> Tuple[List[Record], List[Dict[str, Any]], Tokenizer]:
    """Read every record from source.

    With strict=True the first MalformedRowError propagates. Otherwise each one
    is logged, described in the returned error list, and reading continues with
    the next line. The source is left open for its owner to close.
    """
    tokenizer = Tokenizer(source, config)
    records = tokenizer.iterator()
    rows: List[Record] = []
    errors: List[Dict[str, Any]] = []
    while True:
        try:
            if not records.has_next():
                break
        except MalformedRowError as ex:
            if strict:
                raise
            logger.warning("Skipping line %d: %s", tokenizer.lines_read, ex)
            errors.append({
                "line_number": tokenizer.lines_read,
                "field_number": ex.field_number,
                "expected": ex.expected,
                "line": ex.line,
                "message": str(ex),
            })
            continue
        rows.append(next(records))
    return rows, errors, tokenizer


def records_to_frame(rows: Sequence[Record], columns: Sequence[str] | None = None) -> pd.DataFrame:
    """Build a DataFrame from records. Missing names are filled with col_N."""
    if not rows:
        return pd.DataFrame([], columns=list(columns or []))
    width = max(len(r) for r in rows)
    names = list(columns or [])[:width]
    names += default_column_names(width)[len(names):]
    return pd.DataFrame([list(r) + [None] * (width - len(r)) for r in rows], columns=names)


def short_row_mask(df: pd.DataFrame) -> pd.Series:
    """Rows with unset trailing fields.
    Use on the untyped frame from records_to_frame, where the only missing values are
    slots the tokenizer never filled; after apply_layout, values that failed to parse are missing too.
    """
    return df.isna().any(axis=1)


def errors_to_frame(errors: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(list(errors), columns=ERROR_COLUMNS)


def parse_lines(
    lines: Sequence[str | bytes],
    config: TokenizerConfig | None = None,
    columns: Sequence[str] | None = None,
    strict: bool = True,
    name: str | None = None,
) -> pd.DataFrame:
    """Tokenize in-memory lines into a DataFrame. Malformed rows are dropped when strict=False."""
    if not lines:
        return pd.DataFrame([])
    with IterableLineSource(lines, name=name) as source:
        rows, _, _ = tokenize_source(source, config, strict=strict)
    return records_to_frame(rows, columns)


def parse_file(
    *paths: Path,
    config: TokenizerConfig | None = None,
    columns: Sequence[str] | None = None,
    strict: bool = True,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Tokenize one or more files (read back to back) into (records, malformed rows)."""
    with FileLineSource(*paths) as source:
        rows, errors, _ = tokenize_source(source, config, strict=strict)
    return records_to_frame(rows, columns), errors_to_frame(errors)


# -----------------------------
# I/O utilities
# -----------------------------

def save_outputs(df: pd.DataFrame, outdir: Path, excel_path: Path | None, errors: pd.DataFrame | None = None):
    outdir.mkdir(parents=True, exist_ok=True)
    df.to_csv(outdir / "records.csv", index=False)
    if errors is not None and not errors.empty:
        errors.to_csv(outdir / "errors.csv", index=False)

    if excel_path:
        with pd.ExcelWriter(excel_path, engine="xlsxwriter") as writer:
            df.to_excel(writer, index=False, sheet_name="records")
            if errors is not None and not errors.empty:
                errors.to_excel(writer, index=False, sheet_name="errors")


def print_summary(df: pd.DataFrame, errors: pd.DataFrame | None = None, short_rows: int | None = None):
    """Print counts and sample rows. short_rows defaults to counting missing values in df,
    which is only right when df has not been through apply_layout.
    """
    print(f"\n=== {len(df)} records x {len(df.columns)} fields ===")
    if df.empty:
        return
    short = int(short_row_mask(df).sum()) if short_rows is None else short_rows
    if short:
        print(f"Rows with unset trailing fields: {short}")
    if errors is not None and not errors.empty:
        print(f"Malformed rows skipped: {len(errors)}")
    print("\nExample rows:")
    print(df.head(5).to_string(index=False))
