from __future__ import annotations

from typing import BinaryIO, Dict, List, Tuple

from shuff.errors import InputTooLarge, IoFailure

from .bitstream import BitReader, BitWriter, split_bits
from .tree import HuffmanTree

COUNT_BITS = 24
MAX_SYMBOLS = (1 << COUNT_BITS) - 1
CHUNK_SIZE = 64 * 1024


# -------------------
# Conteggio simboli (24 bit, big-endian)
# -------------------
def check_symbol_count(n: int) -> None:
    if n < 0 or n > MAX_SYMBOLS:
        raise InputTooLarge(f"input di {n} byte: il formato ne ammette al massimo {MAX_SYMBOLS}")


def write_symbol_count(writer: BitWriter, n: int) -> None:
    check_symbol_count(n)
    writer.write(n, COUNT_BITS)


def read_symbol_count(reader: BitReader) -> int:
    return reader.read(COUNT_BITS)


# -------------------
# Encode: simboli -> codici nel bitstream
# -------------------
def _code_pieces(codes: Dict[int, str]) -> List[List[Tuple[int, int]]]:
    pieces: List[List[Tuple[int, int]]] = [[] for _ in range(256)]
    for sym, code in codes.items():
        pieces[sym] = split_bits(code)
    return pieces


class SymbolEncoder:
    """Streams input bytes through a code table into a BitWriter.

    With a single-symbol table the tree alone determines the output, so no
    payload bits are written.
    """

    def __init__(self, codes: Dict[int, str], writer: BitWriter) -> None:
        self._writer = writer
        self._pieces = _code_pieces(codes)
        self._known = set(codes)
        self._silent = len(codes) <= 1
        self.n_symbols = 0

    def feed(self, data: bytes) -> None:
        self.n_symbols += len(data)
        if self._silent:
            if data and not self._known.issuperset(data):
                raise ValueError("simbolo senza codice Huffman")
            return

        write = self._writer.write
        pieces = self._pieces
        for b in data:
            p = pieces[b]
            if not p:
                raise ValueError(f"simbolo senza codice Huffman: {b}")
            for value, nbits in p:
                write(value, nbits)


def encode_data(data: bytes, codes: Dict[int, str], writer: BitWriter) -> int:
    enc = SymbolEncoder(codes, writer)
    enc.feed(data)
    return enc.n_symbols


def encode_stream(source: BinaryIO, codes: Dict[int, str], writer: BitWriter) -> int:
    enc = SymbolEncoder(codes, writer)
    while True:
        try:
            chunk = source.read(CHUNK_SIZE)
        except OSError as err:
            raise IoFailure(f"lettura fallita: {err}") from err
        if not chunk:
            break
        enc.feed(chunk)
    return enc.n_symbols


# -------------------
# Decode: discesa nell'albero bit per bit
# -------------------
def decode_symbols(tree: HuffmanTree, reader: BitReader, n: int, sink: BinaryIO) -> None:
    """Decode exactly ``n`` symbols into ``sink``.

    A bitstream that ends before ``n`` symbols are out raises EndOfStream.
    """
    if n == 0:
        return
    if tree.root is None:
        raise ValueError("albero vuoto con simboli da decodificare")

    out = bytearray()
    root = tree[tree.root]

    if root.is_leaf:
        sym = bytes([root.symbol])  # type: ignore[list-item]
        while n > 0:
            step = min(n, CHUNK_SIZE)
            _write(sink, sym * step)
            n -= step
        return

    child0 = [nd.child0 for nd in tree.nodes]
    child1 = [nd.child1 for nd in tree.nodes]
    symbol = [nd.symbol for nd in tree.nodes]
    read_bit = reader.read_bit
    root_idx = tree.root

    for _ in range(n):
        idx = root_idx
        while symbol[idx] is None:
            idx = child1[idx] if read_bit() else child0[idx]
        out.append(symbol[idx])  # type: ignore[arg-type]
        if len(out) >= CHUNK_SIZE:
            _write(sink, bytes(out))
            out.clear()

    if out:
        _write(sink, bytes(out))


def _write(sink: BinaryIO, data: bytes) -> None:
    try:
        sink.write(data)
    except OSError as err:
        raise IoFailure(f"scrittura fallita: {err}") from err
