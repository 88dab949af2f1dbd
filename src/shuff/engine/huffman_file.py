"""Compress / expand operations over files and in-memory buffers.

Compressed layout (bit-ordered, MSB first inside each byte):
  [ TREE HEADER (pre-order, see core.tree_codec)
  | N (24 bit) = number of original bytes
  | PAYLOAD = Huffman codes of the N bytes, back to back
  | zero padding up to the next byte boundary ]

The format is closed: it only reads back what it wrote itself.
"""

from __future__ import annotations

import io
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict

from shuff.core.bitstream import BitReader, BitWriter
from shuff.core.codec_huffman import (
    check_symbol_count,
    decode_symbols,
    encode_stream,
    read_symbol_count,
    write_symbol_count,
)
from shuff.core.freq import FrequencyTable, count_stream
from shuff.core.tree import HuffmanTree, build
from shuff.core.tree_codec import read_tree, write_tree
from shuff.errors import InvalidArgument, IoFailure, NotConfigured


@dataclass(frozen=True)
class CompressResult:
    table: FrequencyTable
    tree: HuffmanTree
    codes: Dict[int, str]
    n_symbols: int
    compressed_size: int


@dataclass(frozen=True)
class ExpandResult:
    tree: HuffmanTree
    n_symbols: int


# -------------------
# Core su stream binari
# -------------------
def compress_stream(source: BinaryIO, sink: BinaryIO) -> CompressResult:
    """Two passes over ``source``: count, then encode. ``source`` must be seekable."""
    table = count_stream(source)
    n = table.total
    check_symbol_count(n)

    tree, codes = build(table)

    writer = BitWriter(sink)
    write_tree(tree, writer)
    write_symbol_count(writer, n)

    try:
        source.seek(0)
    except OSError as err:
        raise IoFailure(f"impossibile riavvolgere l'input: {err}") from err

    encoded = encode_stream(source, codes, writer)
    if encoded != n:
        raise IoFailure(f"input cambiato tra le due letture: {n} byte contati, {encoded} codificati")
    writer.finalize()

    return CompressResult(
        table=table,
        tree=tree,
        codes=codes,
        n_symbols=n,
        compressed_size=(writer.bits_written + 7) // 8,
    )


def expand_stream(source: BinaryIO, sink: BinaryIO) -> ExpandResult:
    reader = BitReader(source)
    tree = read_tree(reader)
    n = read_symbol_count(reader)
    decode_symbols(tree, reader, n, sink)
    try:
        sink.flush()
    except OSError as err:
        raise IoFailure(f"flush fallito: {err}") from err
    return ExpandResult(tree=tree, n_symbols=n)


def compress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    compress_stream(io.BytesIO(bytes(data)), out)
    return out.getvalue()


def expand_bytes(blob: bytes) -> bytes:
    out = io.BytesIO()
    expand_stream(io.BytesIO(bytes(blob)), out)
    return out.getvalue()


# -------------------
# Operazioni su file (setSource/setSink + compress/expand)
# -------------------
def _require_path(path: str | Path | None, what: str) -> Path:
    if path is None or not str(path).strip():
        raise InvalidArgument(f"Nessun file di {what} fornito.")
    return Path(path)


class _HuffmanFileJob:
    def __init__(self) -> None:
        self._source: Path | None = None
        self._sink: Path | None = None

    @property
    def source(self) -> Path | None:
        return self._source

    @property
    def sink(self) -> Path | None:
        return self._sink

    def set_source(self, path: str | Path) -> None:
        p = _require_path(path, "input")
        try:
            with open(p, "rb"):
                pass
        except OSError as err:
            raise IoFailure(f"Impossibile aprire il file di input: {p}") from err
        self._source = p

    def set_sink(self, path: str | Path) -> None:
        # Same as fopen(..., 'wb'): creates/truncates the output right away.
        p = _require_path(path, "output")
        try:
            with open(p, "wb"):
                pass
        except OSError as err:
            raise IoFailure(f"Impossibile aprire il file di output: {p}") from err
        self._sink = p

    def set_files(self, source: str | Path, sink: str | Path) -> None:
        # both paths are validated before anything is opened
        _require_path(source, "input")
        _require_path(sink, "output")
        self.set_source(source)
        self.set_sink(sink)

    def _open(self, stack: ExitStack) -> tuple[BinaryIO, BinaryIO]:
        if self._source is None or self._sink is None:
            raise NotConfigured("File non forniti: chiamare set_files() prima.")
        try:
            src = stack.enter_context(open(self._source, "rb"))
        except OSError as err:
            raise IoFailure(f"Impossibile aprire il file di input: {self._source}") from err
        try:
            dst = stack.enter_context(open(self._sink, "wb"))
        except OSError as err:
            raise IoFailure(f"Impossibile aprire il file di output: {self._sink}") from err
        return src, dst


class HuffmanCompressor(_HuffmanFileJob):
    def __init__(self) -> None:
        super().__init__()
        self.result: CompressResult | None = None

    def compress(self) -> CompressResult:
        with ExitStack() as stack:
            src, dst = self._open(stack)
            self.result = compress_stream(src, dst)
        return self.result


class HuffmanExpander(_HuffmanFileJob):
    def __init__(self) -> None:
        super().__init__()
        self.result: ExpandResult | None = None

    def expand(self) -> ExpandResult:
        with ExitStack() as stack:
            src, dst = self._open(stack)
            self.result = expand_stream(src, dst)
        return self.result


def compress_file(input_path: str | Path, output_path: str | Path) -> CompressResult:
    c = HuffmanCompressor()
    c.set_files(input_path, output_path)
    return c.compress()


def expand_file(input_path: str | Path, output_path: str | Path) -> ExpandResult:
    e = HuffmanExpander()
    e.set_files(input_path, output_path)
    return e.expand()
