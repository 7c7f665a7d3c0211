#!/usr/bin/env python3
"""
flatfile_explorer.core.errors
-----------------------------
Exceptions raised by the tokenizer and its collaborators.
"""
from __future__ import annotations


class FlatFileError(Exception):
    """Base class for flatfile_explorer errors."""


class MalformedRowError(FlatFileError, ValueError):
    """A line produced more fields than the established arity allows.

    Carries enough context to point at the offending line: the source name,
    the zero-based field index at which the overflow happened, the expected
    maximum and the decoded text of the line.
    """

    def __init__(self, source_name: str | None, index: int, expected: int, line: str):
        self.source_name = source_name
        self.index = index
        self.expected = expected
        self.line = line
        super().__init__(
            f"Unexpected number of elements found when parsing file {source_name}: {index}.  "
            f"Expected a maximum of {expected} elements per line: {line}"
        )

    @property
    def field_number(self) -> int:
        """One-based position of the first field that did not fit."""
        return self.index + 1


class IllegalStateError(FlatFileError, RuntimeError):
    """The single-pass iteration contract was violated by the caller."""
