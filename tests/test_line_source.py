import pytest
from flatfile_explorer.core.line_source import FileLineSource, IterableLineSource, LineSource
from flatfile_explorer.core.tokenizer import Tokenizer


def _drain(source):
    lines = []
    while (line := source.read_next_line()) is not None:
        lines.append(line)
    return lines


def test_sources_satisfy_protocol(metrics_file):
    assert isinstance(IterableLineSource([]), LineSource)
    with FileLineSource(metrics_file) as source:
        assert isinstance(source, LineSource)


def test_iterable_source_encodes_str_and_strips_terminators():
    source = IterableLineSource(["a b\n", b"c d\r\n", "e"], name="mem")

    assert _drain(source) == [b"a b", b"c d", b"e"]
    assert source.name() == "mem"


def test_iterable_source_from_bytes_handles_crlf():
    source = IterableLineSource.from_bytes(b"x y\r\n\r\nz w\n")

    assert _drain(source) == [b"x y", b"", b"z w"]
    assert source.name() is None


def test_iterable_source_from_text_splits_only_on_newlines():
    source = IterableLineSource.from_text("a\x0cb c\r\nd\x1ce\u2028f\ng")

    assert _drain(source) == [b"a\x0cb c", "d\x1ce\u2028f".encode("utf-8"), b"g"]


def test_tokenizer_keeps_form_feed_inside_a_field():
    records = list(Tokenizer(IterableLineSource.from_text("a\x0cb c\nd e")))

    assert records == [["a\x0cb", "c"], ["d", "e"]]


def test_iterable_source_returns_none_after_close():
    source = IterableLineSource.from_text("a\nb")
    assert source.read_next_line() == b"a"

    source.close()

    assert source.read_next_line() is None


def test_file_source_reads_lines(metrics_file):
    with FileLineSource(metrics_file) as source:
        lines = _drain(source)

    assert lines[0] == b"## METRICS CLASS\tCDnaMetrics"
    assert lines[1] == b""
    assert lines[-1] == b"2000\t1500\t300"


def test_file_source_chains_files_and_decompresses_gzip(metrics_file, gz_file):
    with FileLineSource(metrics_file, gz_file) as source:
        records = list(Tokenizer(source))
        name = source.name()

    assert records[-1] == ["3000", "2500", "100"]
    assert len(records) == 4
    assert name == f"{metrics_file}, {gz_file}"


def test_file_source_close_is_idempotent(metrics_file):
    source = FileLineSource(metrics_file)
    assert source.read_next_line() is not None

    source.close()
    source.close()

    assert source.read_next_line() is None


def test_file_source_requires_a_path():
    with pytest.raises(ValueError):
        FileLineSource()


def test_missing_file_raises_on_first_read(tmp_path):
    source = FileLineSource(tmp_path / "nope.txt")

    with pytest.raises(FileNotFoundError):
        list(Tokenizer(source))
