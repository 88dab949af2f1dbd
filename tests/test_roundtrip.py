from __future__ import annotations

import random

import pytest

from shuff.core.codec_huffman import MAX_SYMBOLS
from shuff.core.freq import count_bytes
from shuff.core.tree import build
from shuff.engine.huffman_file import compress_bytes, expand_bytes
from shuff.errors import InputTooLarge, SentinelCollision
from shuff.report import estimated_size

TEXT = (
    "FATTURA 1001\n"
    "RIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n"
    "RIGA ARTICOLO: dado M3 qty=7 prezzo=0.80\n"
    "TOTALE 17.60\n"
).encode("utf-8")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"x",
        b"\x00",
        b"\xff" * 1000,
        b"ab",
        b"abracadabra",
        TEXT,
        TEXT * 50,
        bytes(b for b in range(256) if b != 7),
    ],
)
def test_roundtrip(data: bytes) -> None:
    blob = compress_bytes(data)
    assert expand_bytes(blob) == data


def test_roundtrip_random_inputs() -> None:
    rnd = random.Random(2024)
    alphabet = [b for b in range(256) if b != 7]
    for _ in range(20):
        k = rnd.randint(1, 255)
        syms = rnd.sample(alphabet, k)
        weights = [rnd.randint(1, 50) for _ in syms]
        data = bytes(rnd.choices(syms, weights=weights, k=rnd.randint(1, 3000)))
        assert expand_bytes(compress_bytes(data)) == data


def test_single_symbol_needs_no_payload() -> None:
    for n in (1, 7, 8, 9, 100_000):
        blob = compress_bytes(b"q" * n)
        assert len(blob) == 5
        assert expand_bytes(blob) == b"q" * n


def test_largest_input_roundtrips() -> None:
    data = b"m" * MAX_SYMBOLS
    blob = compress_bytes(data)
    assert blob.hex() == "6d6dffffff"
    assert expand_bytes(blob) == data


def test_input_over_count_limit_is_refused() -> None:
    with pytest.raises(InputTooLarge):
        compress_bytes(b"m" * (MAX_SYMBOLS + 1))


def test_marker_byte_in_input_is_refused() -> None:
    with pytest.raises(SentinelCollision):
        compress_bytes(b"hello\x07world")
    with pytest.raises(SentinelCollision):
        compress_bytes(bytes(range(256)))


def test_compression_shrinks_redundant_text() -> None:
    data = TEXT * 50
    assert len(compress_bytes(data)) < len(data) * 0.7


def test_estimated_size_matches_output() -> None:
    for data in (b"", b"zz", b"aab", b"abracadabra", TEXT * 3):
        table = count_bytes(data)
        codes = build(table)[1]
        assert estimated_size(table, codes) == len(compress_bytes(data))
