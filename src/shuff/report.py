"""Human-readable code tables and compression ratio estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from shuff.core.codec_huffman import COUNT_BITS
from shuff.core.freq import FrequencyTable


@dataclass(frozen=True)
class CodeRow:
    symbol: int
    count: int
    percent: float
    code: str

    @property
    def code_len(self) -> int:
        return len(self.code)

    def label(self) -> str:
        if self.symbol >= 32 and self.symbol != 0x7F:
            return chr(self.symbol)
        return f"(ASCII : {self.symbol})"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "count": self.count,
            "percent": self.percent,
            "code": self.code,
            "code_len": self.code_len,
        }


def code_rows(table: FrequencyTable, codes: Dict[int, str]) -> List[CodeRow]:
    """One row per symbol, most frequent first (ties keep first-occurrence order)."""
    total = table.total
    rows = [
        CodeRow(
            symbol=sym,
            count=cnt,
            percent=round(cnt / total * 100, 2) if total else 0.0,
            code=codes[sym],
        )
        for sym, cnt in table.items()
    ]
    rows.sort(key=lambda r: -r.count)
    return rows


def estimated_size(table: FrequencyTable, codes: Dict[int, str]) -> int:
    """Compressed size in bytes, computed from code lengths without encoding anything."""
    distinct = len(table)
    if distinct <= 1:
        # single-symbol header (symbol twice), no payload bits
        bits = 16
    else:
        bits = sum(cnt * len(codes[sym]) for sym, cnt in table.items())
        bits += 16 * (distinct - 1)
    bits += COUNT_BITS
    return math.ceil(bits / 8)


def compression_ratio(table: FrequencyTable, codes: Dict[int, str]) -> float:
    """Compressed / original size, in percent (2 decimals). 0.0 for empty input."""
    total = table.total
    if not total:
        return 0.0
    return round(estimated_size(table, codes) / total * 100, 2)


def render_code_table(table: FrequencyTable, codes: Dict[int, str]) -> str:
    lines: List[str] = []
    for r in code_rows(table, codes):
        lines.append(
            f"{r.label():>14}  ({r.count:06d} occurrences, or {r.percent}%) "
            f"{r.code} (code on {r.code_len} bits)"
        )
    lines.append(f"compression ratio: {compression_ratio(table, codes)}%")
    return "\n".join(lines) + "\n"
