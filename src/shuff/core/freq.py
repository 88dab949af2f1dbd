from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator

from shuff.errors import IoFailure

CHUNK_SIZE = 64 * 1024


@dataclass
class FrequencyTable:
    """Symbol (0..255) -> occurrence count.

    Iteration follows the order in which symbols first appeared in the input.
    Leaves are created in this order, so it also fixes the order in which they
    are transmitted in the tree header.
    """

    counts: dict[int, int] = field(default_factory=dict)

    def update(self, data: bytes) -> None:
        for sym, n in Counter(data).items():
            self.counts[sym] = self.counts.get(sym, 0) + n

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def symbols(self) -> list[int]:
        return list(self.counts)

    def items(self) -> Iterator[tuple[int, int]]:
        return iter(self.counts.items())

    def __len__(self) -> int:
        return len(self.counts)

    def __getitem__(self, sym: int) -> int:
        return self.counts[sym]

    def __contains__(self, sym: object) -> bool:
        return sym in self.counts


def count_bytes(data: bytes) -> FrequencyTable:
    table = FrequencyTable()
    table.update(data)
    return table


def count_stream(source: BinaryIO) -> FrequencyTable:
    """Read ``source`` to EOF and count every byte. The source is left consumed."""
    table = FrequencyTable()
    while True:
        try:
            chunk = source.read(CHUNK_SIZE)
        except OSError as err:
            raise IoFailure(f"lettura fallita: {err}") from err
        if not chunk:
            break
        table.update(chunk)
    return table
