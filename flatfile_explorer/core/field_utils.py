#!/usr/bin/env python3
"""
flatfile_explorer.core.field_utils
----------------------------------
Predicate builders and column helpers shared by the parser, CLI and UI.
"""
from __future__ import annotations

from typing import Callable, Iterable, List

from .constants import COLUMN_PREFIX

_ESCAPES = {"t": "\t", "s": " ", "\\": "\\"}


# --- Predicates ---

def make_byte_predicate(chars: bytes | str) -> Callable[[int], bool]:
    """Build a delimiter predicate matching any of the given single-byte characters.
    Example: make_byte_predicate(",;")(ord(",")) -> True
    """
    if isinstance(chars, str):
        chars = chars.encode("latin-1")
    if not chars:
        raise ValueError("At least one delimiter character is required")
    table = frozenset(chars)

    def is_delimiter(b: int) -> bool:
        return b in table

    return is_delimiter


def make_prefix_comment_predicate(prefix: bytes | str | None) -> Callable[[bytes], bool]:
    """Build a comment predicate for lines starting with prefix. None or empty disables comments."""
    if isinstance(prefix, str):
        prefix = prefix.encode("utf-8")
    if not prefix:
        return lambda line: False
    return lambda line: line.startswith(prefix)


def decode_escapes(text: str) -> str:
    """Turn user-entered escapes into characters: \\t -> tab, \\s -> space, \\\\ -> backslash.
    Unknown escapes are kept as typed.
    """
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in _ESCAPES:
            out.append(_ESCAPES[text[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


# --- Columns ---

def default_column_names(n: int) -> List[str]:
    return [f"{COLUMN_PREFIX}{i}" for i in range(1, n + 1)]


def canonicalize_display_columns(cols: Iterable[str], available: Iterable[str]) -> List[str]:
    """Keep the first occurrence of each column and drop names not in available."""
    avail = set(available)
    seen = set()
    out: List[str] = []
    for c in cols:
        if c in avail and c not in seen:
            seen.add(c)
            out.append(c)
    return out
