#!/usr/bin/env python3
"""
flatfile_explorer.core.constants
--------------------------------
Centralized shared constants used across the Flat File Explorer app.
"""
from __future__ import annotations

from typing import Dict, List

# Bytes treated as field separators by the default delimiter predicate
DEFAULT_DELIMITERS: bytes = b" \t"

# Lines starting with this prefix are skipped by the default comment predicate
DEFAULT_COMMENT_PREFIX: bytes = b"#"

DEFAULT_ENCODING = "utf-8"

# Prefix for generated column names (col_1, col_2, ...)
COLUMN_PREFIX = "col_"

DEFAULT_LAYOUT_VERSION = "flatfile-layout-v1"

# Column dtypes accepted in layout files, mapped to pandas dtypes
LAYOUT_DTYPES: Dict[str, str] = {
    "str": "string",
    "int": "Int64",
    "float": "Float64",
}

# Columns of the malformed-row report shown in the UI and written to errors.csv
ERROR_COLUMNS: List[str] = [
    "line_number", "field_number", "expected", "line", "message",
]
