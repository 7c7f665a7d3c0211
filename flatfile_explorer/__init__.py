"""
flatfile_explorer package
-------------------------
A small package for tokenizing and exploring delimiter-separated flat files.

Entrypoints:
- Streamlit UI: `python -m flatfile_explorer` which launches Streamlit.
- CLI: `python -m flatfile_explorer FILE [FILE ...]` (see `flatfile_explorer.cli`).
- Library usage: the tokenizer and parsing helpers are loaded lazily from the package.
"""
from __future__ import annotations

from typing import Any

# Public API names resolved lazily from core modules
_EXPORTS = {
    "Tokenizer": "tokenizer",
    "TokenizerConfig": "tokenizer",
    "IterationState": "tokenizer",
    "RecordIterator": "tokenizer",
    "LineSource": "line_source",
    "IterableLineSource": "line_source",
    "FileLineSource": "line_source",
    "FlatFileError": "errors",
    "MalformedRowError": "errors",
    "IllegalStateError": "errors",
    "tokenize_source": "parser",
    "parse_lines": "parser",
    "parse_file": "parser",
    "save_outputs": "parser",
    "print_summary": "parser",
    "load_layout": "schema_io",
    "save_layout": "schema_io",
    "apply_layout": "schema_io",
    "tokenizer_config_from_layout": "schema_io",
}

__all__ = list(_EXPORTS)

__version__ = "0.1.0"


# PEP 562: Lazy attribute access to avoid importing heavy deps (pandas/yaml) at package import time
def __getattr__(name: str) -> Any:  # pragma: no cover
    if name in _EXPORTS:
        from importlib import import_module
        return getattr(import_module(f".core.{_EXPORTS[name]}", __name__), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
