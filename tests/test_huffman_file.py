from __future__ import annotations

from pathlib import Path

import pytest

from shuff.engine.huffman_file import (
    HuffmanCompressor,
    HuffmanExpander,
    compress_bytes,
    compress_file,
    expand_file,
)
from shuff.errors import InvalidArgument, IoFailure, NotConfigured, SentinelCollision

DATA = b"RIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n" * 20


def test_file_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    comp = tmp_path / "in.shf"
    back = tmp_path / "back.txt"
    inp.write_bytes(DATA)

    res = compress_file(inp, comp)
    assert res.n_symbols == len(DATA)
    assert res.compressed_size == comp.stat().st_size
    assert comp.read_bytes() == compress_bytes(DATA)

    eres = expand_file(comp, back)
    assert eres.n_symbols == len(DATA)
    assert back.read_bytes() == DATA


def test_empty_file_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "empty"
    comp = tmp_path / "empty.shf"
    back = tmp_path / "empty.back"
    inp.write_bytes(b"")

    compress_file(str(inp), str(comp))
    assert comp.read_bytes() == bytes(5)
    expand_file(str(comp), str(back))
    assert back.read_bytes() == b""


def test_compressor_keeps_result(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_bytes(b"abracadabra")
    c = HuffmanCompressor()
    c.set_source(inp)
    c.set_sink(tmp_path / "out.shf")
    assert c.source == inp
    res = c.compress()
    assert c.result is res
    assert res.codes[ord("a")] == "0"
    assert len(res.table) == 5


@pytest.mark.parametrize("src,dst", [("", "out"), ("in", ""), ("   ", "out"), ("in", " \t")])
def test_blank_paths_are_invalid(tmp_path: Path, src: str, dst: str) -> None:
    with pytest.raises(InvalidArgument):
        HuffmanCompressor().set_files(src, dst)
    with pytest.raises(InvalidArgument):
        HuffmanExpander().set_files(src, dst)


def test_none_path_is_invalid() -> None:
    with pytest.raises(InvalidArgument):
        HuffmanCompressor().set_source(None)  # type: ignore[arg-type]


def test_missing_source_is_io_failure(tmp_path: Path) -> None:
    with pytest.raises(IoFailure):
        HuffmanCompressor().set_source(tmp_path / "does-not-exist")


def test_unwritable_sink_is_io_failure(tmp_path: Path) -> None:
    with pytest.raises(IoFailure):
        HuffmanExpander().set_sink(tmp_path)
    with pytest.raises(IoFailure):
        HuffmanExpander().set_sink(tmp_path / "no" / "such" / "dir" / "out")


def test_operations_require_files() -> None:
    with pytest.raises(NotConfigured):
        HuffmanCompressor().compress()
    with pytest.raises(NotConfigured):
        HuffmanExpander().expand()


def test_source_only_is_not_configured(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_bytes(b"abc")
    c = HuffmanCompressor()
    c.set_source(inp)
    with pytest.raises(NotConfigured):
        c.compress()


def test_failed_compress_leaves_files_closed(tmp_path: Path) -> None:
    inp = tmp_path / "bell.bin"
    out = tmp_path / "bell.shf"
    inp.write_bytes(b"ding\x07dong")

    with pytest.raises(SentinelCollision):
        compress_file(inp, out)

    # nothing written, and the sink can be replaced right away
    assert out.read_bytes() == b""
    out.unlink()
    inp.unlink()
