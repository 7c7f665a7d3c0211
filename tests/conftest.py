import gzip
from pathlib import Path
from typing import Callable, List

import pytest
from flatfile_explorer.core.line_source import IterableLineSource
from flatfile_explorer.core.tokenizer import Tokenizer, TokenizerConfig


@pytest.fixture
def make_tokenizer() -> Callable[..., Tokenizer]:
    """Build a Tokenizer over in-memory lines."""

    def _make(lines: List[str], name: str = "test.txt", **config) -> Tokenizer:
        return Tokenizer(IterableLineSource(lines, name=name), TokenizerConfig(**config))

    return _make


@pytest.fixture
def metrics_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.metrics"
    path.write_text(
        "## METRICS CLASS\tCDnaMetrics\n"
        "\n"
        "ALIGNED_PF_BASES\tCODING_BASES\tUTR_BASES\n"
        "1000\t600\t250\n"
        "2000\t1500\t300\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def gz_file(tmp_path: Path) -> Path:
    path = tmp_path / "more.txt.gz"
    with gzip.open(path, "wb") as f:
        f.write(b"# compressed\r\n3000 2500 100\r\n")
    return path
