#!/usr/bin/env python3
"""
flatfile_explorer.core.tokenizer
--------------------------------
Delimiter-aware tokenizer for flat text files.
Lines are pulled one at a time from a LineSource, comments and blank lines are
dropped, and every remaining line is split into a fixed number of fields. The
number of fields is taken from the first usable line unless it is configured
up front.
"""
from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .constants import DEFAULT_COMMENT_PREFIX, DEFAULT_DELIMITERS, DEFAULT_ENCODING
from .errors import IllegalStateError, MalformedRowError
from .line_source import LineSource

logger = logging.getLogger(__name__)

# A parsed line. Slots left unset by a short line stay None.
Record = List[Optional[str]]


def is_default_delimiter(b: int) -> bool:
    """Space or tab."""
    return b in DEFAULT_DELIMITERS


def is_default_comment(line: bytes) -> bool:
    """Lines whose first byte is '#'."""
    return line[:1] == DEFAULT_COMMENT_PREFIX


@dataclass(frozen=True)
class TokenizerConfig:
    """Settings fixed for the lifetime of a Tokenizer.

    delimiter_predicate receives one byte as an int (iterating bytes yields ints);
    comment_predicate receives the whole raw line.
    word_count pre-declares the number of fields per line and skips inference.
    """

    group_delimiters: bool = True
    skip_blank_lines: bool = True
    delimiter_predicate: Callable[[int], bool] = is_default_delimiter
    comment_predicate: Callable[[bytes], bool] = is_default_comment
    word_count: Optional[int] = None
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        if self.word_count is not None and self.word_count <= 0:
            raise ValueError(f"word_count must be a positive integer, got {self.word_count!r}")

    def replace(self, **changes) -> "TokenizerConfig":
        return dataclasses.replace(self, **changes)


class IterationState(enum.Enum):
    NOT_STARTED = "not_started"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


class Tokenizer:
    """Turn a LineSource into a single-pass sequence of field lists.

    The tokenizer never closes its source; whoever opened the source owns it.
    """

    def __init__(self, source: LineSource, config: TokenizerConfig | None = None):
        self.source = source
        self.config = config or TokenizerConfig()
        self._word_count: int | None = self.config.word_count
        self._state = IterationState.NOT_STARTED
        self._advancing = False
        self.lines_read = 0
        self.records_emitted = 0

    @property
    def state(self) -> IterationState:
        return self._state

    @property
    def expected_arity(self) -> int | None:
        """Fields per line, or None until the first non-empty line has been split."""
        return self._word_count

    def source_name(self) -> str | None:
        return self.source.name()

    # -----------------------------
    # Sequence
    # -----------------------------

    def iterator(self) -> "RecordIterator":
        """Start the lazy record sequence. May be called once per Tokenizer."""
        if self._state is not IterationState.NOT_STARTED:
            raise IllegalStateError(
                f"iterator() can only be called once, before iteration has begun (state: {self._state.value})"
            )
        self._state = IterationState.ITERATING
        return RecordIterator(self)

    def __iter__(self) -> "RecordIterator":
        return self.iterator()

    def advance(self) -> Record | None:
        """Return the next usable line split into fields, or None at end of input.

        Blank lines (when skip_blank_lines is set) and comment lines are consumed
        and dropped. A MalformedRowError affects only the line that raised it; the
        following call resumes with the next line.
        """
        if self._state is IterationState.EXHAUSTED:
            raise IllegalStateError("advance() called after the source was exhausted")
        if self._advancing:
            raise IllegalStateError("advance() is not re-entrant; the sequence supports a single consumer")
        self._advancing = True
        try:
            while True:
                line = self.source.read_next_line()
                if line is None:
                    self._state = IterationState.EXHAUSTED
                    logger.debug("Reached end of %s after %d lines", self.source_name(), self.lines_read)
                    return None
                self.lines_read += 1
                if self._is_skipped(line):
                    continue
                record = self.parse_line(line)
                self.records_emitted += 1
                return record
        finally:
            self._advancing = False

    def _is_skipped(self, line: bytes) -> bool:
        if self.config.skip_blank_lines and len(line) == 0:
            return True
        return self.config.comment_predicate(line)

    # -----------------------------
    # Splitting
    # -----------------------------

    def parse_line(self, line: bytes) -> Record:
        """Split one raw line into exactly word_count() slots.

        Producing more fields than there are slots raises MalformedRowError.
        Producing fewer leaves the trailing slots as None; callers decide
        whether a short row matters.
        """
        parts: Record = [None] * self.word_count(line)
        is_delimiter = self.config.delimiter_predicate
        grouped = self.config.group_delimiters
        in_delimiter = True
        index = 0
        start = 0

        for i, b in enumerate(line):
            if is_delimiter(b):
                if not in_delimiter:
                    self._store(parts, index, line[start:i], line)
                    index += 1
                elif not grouped:
                    self._store(parts, index, b"", line)
                    index += 1
                in_delimiter = True
            elif in_delimiter:
                start = i
                in_delimiter = False
        if not in_delimiter:
            self._store(parts, index, line[start:], line)
        return parts

    def _store(self, parts: Record, index: int, chunk: bytes, line: bytes) -> None:
        if index >= len(parts):
            raise MalformedRowError(self.source_name(), index, len(parts), self._decode(line))
        parts[index] = self._decode(chunk)

    def _decode(self, chunk: bytes) -> str:
        return bytes(chunk).decode(self.config.encoding, errors="replace")

    def word_count(self, line: bytes | None = None) -> int:
        """Return the expected number of fields per line.

        When not yet known and a line is given, it is counted; the count is kept
        only if positive, so a line holding nothing but delimiters does not fix
        the arity at zero. Returns 0 while still unknown.
        """
        if self._word_count is not None:
            return self._word_count
        if line is None:
            return 0
        count = self.calculate_word_count(line)
        if count > 0:
            self._word_count = count
            logger.debug("Inferred %d fields per line for %s", count, self.source_name())
        return count

    def calculate_word_count(self, line: bytes) -> int:
        """Count fields in a line using the same grouping rule as parse_line."""
        is_delimiter = self.config.delimiter_predicate
        grouped = self.config.group_delimiters
        words = 0
        in_delimiter = True
        for b in line:
            if is_delimiter(b):
                if in_delimiter and not grouped:
                    words += 1
                in_delimiter = True
            else:
                if in_delimiter:
                    words += 1
                in_delimiter = False
        # a trailing delimiter opens one more (empty) slot when delimiters are not grouped
        if in_delimiter and not grouped:
            words += 1
        return words


class RecordIterator(Iterator[Record]):
    """Single-pass handle over a Tokenizer, buffering at most one record ahead."""

    def __init__(self, tokenizer: Tokenizer):
        self._tokenizer = tokenizer
        self._next: Record | None = None

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    def __iter__(self) -> "RecordIterator":
        return self

    def has_next(self) -> bool:
        if self._next is None and self._tokenizer.state is not IterationState.EXHAUSTED:
            self._next = self._tokenizer.advance()
        return self._next is not None

    def __next__(self) -> Record:
        if not self.has_next():
            raise StopIteration
        record, self._next = self._next, None
        return record
