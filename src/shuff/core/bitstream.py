"""Bit-level I/O over byte streams.

Bits are packed most-significant-bit first inside every byte. The writer keeps
a pending-bits accumulator and emits each byte as soon as 8 bits are pending;
``finalize()`` pads the last partial byte with zero bits on the right (the
pending value times 2^(8 - pending)). The reader mirrors it, pulling bytes
from the source only when a request cannot be served from pending bits.
"""

from __future__ import annotations

from typing import BinaryIO

from shuff.errors import EndOfStream, IoFailure

CHUNK_SIZE = 64 * 1024
MAX_BITS_PER_CALL = 32


def _check_nbits(nbits: int) -> None:
    if nbits < 1 or nbits > MAX_BITS_PER_CALL:
        raise ValueError(f"nbits fuori range (1..{MAX_BITS_PER_CALL}): {nbits}")


def split_bits(bits: str) -> list[tuple[int, int]]:
    """'0101...' -> [(value, nbits), ...] with every piece at most 32 bits long."""
    out: list[tuple[int, int]] = []
    for i in range(0, len(bits), MAX_BITS_PER_CALL):
        piece = bits[i : i + MAX_BITS_PER_CALL]
        out.append((int(piece, 2), len(piece)))
    return out


class BitWriter:
    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink
        self._acc = 0
        self._nacc = 0
        self._out = bytearray()
        self.bits_written = 0

    def write(self, value: int, nbits: int) -> None:
        """Append the low ``nbits`` bits of ``value``, highest bit first."""
        _check_nbits(nbits)
        if value < 0 or value >> nbits:
            raise ValueError(f"valore {value} non sta in {nbits} bit")

        self._acc = (self._acc << nbits) | value
        self._nacc += nbits
        self.bits_written += nbits

        while self._nacc >= 8:
            self._nacc -= 8
            self._out.append((self._acc >> self._nacc) & 0xFF)
        self._acc &= (1 << self._nacc) - 1

        if len(self._out) >= CHUNK_SIZE:
            self._drain()

    def write_bits(self, bits: str) -> None:
        for value, nbits in split_bits(bits):
            self.write(value, nbits)

    def finalize(self) -> None:
        # 1..7 leftover bits become the high bits of one last byte
        if self._nacc:
            self._out.append((self._acc << (8 - self._nacc)) & 0xFF)
            self._acc = 0
            self._nacc = 0
        self._drain()
        try:
            self._sink.flush()
        except OSError as err:
            raise IoFailure(f"flush fallito: {err}") from err

    def _drain(self) -> None:
        if not self._out:
            return
        try:
            self._sink.write(bytes(self._out))
        except OSError as err:
            raise IoFailure(f"scrittura fallita: {err}") from err
        self._out.clear()


class BitReader:
    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self._buf = b""
        self._pos = 0
        self._acc = 0
        self._nacc = 0

    def _next_byte(self) -> int:
        if self._pos >= len(self._buf):
            try:
                chunk = self._source.read(CHUNK_SIZE)
            except OSError as err:
                raise IoFailure(f"lettura fallita: {err}") from err
            if not chunk:
                raise EndOfStream("bitstream terminato prima del previsto")
            self._buf = chunk
            self._pos = 0
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def read(self, nbits: int) -> int:
        """Return the next ``nbits`` bits as an unsigned integer."""
        _check_nbits(nbits)
        while self._nacc < nbits:
            self._acc = (self._acc << 8) | self._next_byte()
            self._nacc += 8
        self._nacc -= nbits
        value = self._acc >> self._nacc
        self._acc &= (1 << self._nacc) - 1
        return value

    def read_bit(self) -> int:
        # Fast path for the decode walk; shares the accumulator with read().
        if not self._nacc:
            self._acc = self._next_byte()
            self._nacc = 8
        self._nacc -= 1
        bit = self._acc >> self._nacc
        self._acc &= (1 << self._nacc) - 1
        return bit

    def read_byte(self) -> int:
        return self.read(8)
