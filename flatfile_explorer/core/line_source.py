#!/usr/bin/env python3
"""
flatfile_explorer.core.line_source
----------------------------------
Line sources feed raw lines (bytes, without terminators) to the tokenizer.
Any object with read_next_line(), name() and close() will do; the classes
below cover in-memory text and plain or gzip-compressed files on disk.
"""
from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Protocol, Union, runtime_checkable

from .constants import DEFAULT_ENCODING

logger = logging.getLogger(__name__)


@runtime_checkable
class LineSource(Protocol):
    def read_next_line(self) -> bytes | None:
        """Return the next line without its terminator, or None at end of input."""
        ...

    def name(self) -> str | None:
        """Name used in diagnostics, or None when the source has no name."""
        ...

    def close(self) -> None:
        ...


def _strip_terminator(line: bytes) -> bytes:
    if line.endswith(b"\r\n"):
        return line[:-2]
    if line.endswith(b"\n") or line.endswith(b"\r"):
        return line[:-1]
    return line


class IterableLineSource:
    """In-memory source over an iterable of bytes or str lines."""

    def __init__(self, lines: Iterable[Union[bytes, str]], name: str | None = None, encoding: str = DEFAULT_ENCODING):
        self._lines: Iterator[Union[bytes, str]] | None = iter(lines)
        self._name = name
        self._encoding = encoding

    @classmethod
    def from_text(cls, text: str, name: str | None = None, encoding: str = DEFAULT_ENCODING) -> "IterableLineSource":
        # bytes.splitlines breaks only on \r and \n; str.splitlines also breaks on \x0c, \x1c, \u2028 and friends
        return cls(text.encode(encoding).splitlines(), name=name, encoding=encoding)

    @classmethod
    def from_bytes(cls, data: bytes, name: str | None = None) -> "IterableLineSource":
        return cls(data.splitlines(), name=name)

    def read_next_line(self) -> bytes | None:
        if self._lines is None:
            return None
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        if isinstance(line, str):
            line = line.encode(self._encoding)
        return _strip_terminator(line)

    def name(self) -> str | None:
        return self._name

    def close(self) -> None:
        self._lines = None

    def __enter__(self) -> "IterableLineSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class FileLineSource:
    """Reads one or more files back to back as a single stream of lines.

    Paths ending in .gz are decompressed on the fly. Each file is opened only
    when the previous one is used up, and closed as soon as it is.
    """

    def __init__(self, *paths: Union[str, Path]):
        if not paths:
            raise ValueError("FileLineSource needs at least one path")
        self.paths: List[Path] = [Path(p) for p in paths]
        self._pending: List[Path] = list(self.paths)
        self._handle: IO[bytes] | None = None
        self._closed = False

    def _open(self, path: Path) -> IO[bytes]:
        logger.debug("Opening %s", path)
        if path.suffix == ".gz":
            return gzip.open(path, "rb")
        return path.open("rb")

    def read_next_line(self) -> bytes | None:
        if self._closed:
            return None
        while True:
            if self._handle is None:
                if not self._pending:
                    return None
                self._handle = self._open(self._pending.pop(0))
            line = self._handle.readline()
            if line:
                return _strip_terminator(line)
            self._handle.close()
            self._handle = None

    def name(self) -> str | None:
        return ", ".join(str(p) for p in self.paths)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self._pending = []
        self._closed = True

    def __enter__(self) -> "FileLineSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
