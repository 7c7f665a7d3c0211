#!/usr/bin/env python3
"""
flatfile_explorer.cli
---------------------
Headless entry point: tokenize files, print a summary and optionally write exports.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .core.errors import MalformedRowError
from .core.field_utils import decode_escapes, make_byte_predicate
from .core.parser import parse_file, print_summary, save_outputs, short_row_mask
from .core.schema_io import apply_layout, load_layout, tokenizer_config_from_layout

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _delimiter_predicate(text: str):
    """Turn --delimiters text into a byte predicate; only single-byte (latin-1) characters are allowed."""
    try:
        return make_byte_predicate(decode_escapes(text))
    except (UnicodeEncodeError, ValueError) as ex:
        raise argparse.ArgumentTypeError(f"delimiters must be single-byte characters: {ex}")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="flatfile_explorer",
        description="Split delimiter-separated flat files into fixed-width records.",
    )
    p.add_argument("files", nargs="+", type=Path, help="Input files (.gz is decompressed), read back to back")
    p.add_argument("--layout", type=Path, help="YAML layout with tokenizer settings and column names")
    p.add_argument("--no-group-delimiters", action="store_true", help="Each delimiter separates a field; runs produce empty fields")
    p.add_argument("--keep-blank-lines", action="store_true", help="Do not skip empty lines")
    p.add_argument("--delimiters", type=_delimiter_predicate, help=r"Delimiter characters, escapes allowed (default: space and tab, e.g. '\t,')")
    p.add_argument("--word-count", type=_positive_int, help="Fields per line; inferred from the first line when omitted")
    p.add_argument("--lenient", action="store_true", help="Skip malformed rows instead of stopping at the first one")
    p.add_argument("--outdir", type=Path, help="Write records.csv (and errors.csv) here")
    p.add_argument("--excel", type=Path, help="Also write an Excel workbook")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    layout = load_layout(args.layout) if args.layout else load_layout({})
    config = tokenizer_config_from_layout(layout)
    overrides = {}
    if args.no_group_delimiters:
        overrides["group_delimiters"] = False
    if args.keep_blank_lines:
        overrides["skip_blank_lines"] = False
    if args.delimiters is not None:
        overrides["delimiter_predicate"] = args.delimiters
    if args.word_count:
        overrides["word_count"] = args.word_count
    if overrides:
        config = config.replace(**overrides)

    files: List[Path] = args.files
    logger.info("Parsing %s", ", ".join(str(f) for f in files))
    try:
        df, errors = parse_file(*files, config=config, strict=not args.lenient)
    except MalformedRowError as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 1
    except OSError as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 1

    short_rows = int(short_row_mask(df).sum())
    df = apply_layout(df, layout)
    print_summary(df, errors, short_rows=short_rows)
    if args.outdir or args.excel:
        save_outputs(df, args.outdir or Path("."), args.excel, errors)
    return 0


if __name__ == "__main__":
    sys.exit(main())
