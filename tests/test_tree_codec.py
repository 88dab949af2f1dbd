from __future__ import annotations

import io

import pytest

from shuff.core.bitstream import BitReader, BitWriter
from shuff.core.freq import FrequencyTable, count_bytes
from shuff.core.tree import HuffmanTree, build_tree
from shuff.core.tree_codec import MAX_MARKERS, NODE_MARKER, read_tree, write_tree
from shuff.errors import CorruptHeader, EndOfStream, SentinelCollision

# Golden headers (pre-order, root without marker, 0x07 = internal node)
HDR_AAB = "6261"
HDR_ABRACADABRA = "6107076364076272"
HDR_SINGLE_Z = "7a7a"
HDR_EMPTY = "0000"


def _header(tree: HuffmanTree) -> bytes:
    out = io.BytesIO()
    w = BitWriter(out)
    write_tree(tree, w)
    w.finalize()
    return out.getvalue()


def _read(blob: bytes) -> HuffmanTree:
    return read_tree(BitReader(io.BytesIO(blob)))


def test_marker_value() -> None:
    assert NODE_MARKER == 0x07


@pytest.mark.parametrize(
    "data,hexstr",
    [
        (b"aab", HDR_AAB),
        (b"abracadabra", HDR_ABRACADABRA),
        (b"zzzz", HDR_SINGLE_Z),
    ],
)
def test_header_golden(data: bytes, hexstr: str) -> None:
    assert _header(build_tree(count_bytes(data))).hex() == hexstr


def test_empty_tree_header() -> None:
    assert _header(build_tree(FrequencyTable())).hex() == HDR_EMPTY


def test_reconstructed_tree_has_same_shape() -> None:
    for data in (b"aab", b"abracadabra", b"the quick brown fox jumps over the lazy dog", bytes(range(8, 200))):
        tree = build_tree(count_bytes(data))
        back = _read(_header(tree))
        assert back.to_nested() == tree.to_nested()


def test_reconstruction_ids_follow_creation_order() -> None:
    back = _read(bytes.fromhex(HDR_ABRACADABRA))
    assert back.root == 0
    # root, a, [07], [07], c, d, [07], b, r
    assert [n.symbol for n in back.nodes] == [None, 0x61, None, None, 0x63, 0x64, None, 0x62, 0x72]
    assert back[0].child0 == 1
    assert back[0].child1 == 2
    assert back[2].child0 == 3
    assert back[2].child1 == 6
    assert back[6].parent == 2


def test_single_symbol_header_collapses_to_leaf_root() -> None:
    back = _read(bytes.fromhex(HDR_SINGLE_Z))
    assert back.root is not None
    assert back[back.root].is_leaf
    assert back.to_nested() == ord("z")


def test_header_is_self_terminating() -> None:
    reader = BitReader(io.BytesIO(bytes.fromhex(HDR_AAB + "000003c0")))
    back = read_tree(reader)
    assert back.to_nested() == (ord("b"), ord("a"))
    assert reader.read(24) == 3


def test_marker_byte_as_data_is_refused() -> None:
    with pytest.raises(SentinelCollision):
        _header(build_tree(count_bytes(b"ab\x07")))
    with pytest.raises(SentinelCollision):
        _header(build_tree(count_bytes(b"\x07\x07\x07")))


def test_refused_tree_writes_nothing() -> None:
    out = io.BytesIO()
    w = BitWriter(out)
    with pytest.raises(SentinelCollision):
        write_tree(build_tree(count_bytes(bytes(range(256)))), w)
    w.finalize()
    assert out.getvalue() == b""


def test_truncated_header() -> None:
    with pytest.raises(EndOfStream):
        _read(bytes.fromhex("6107"))
    with pytest.raises(EndOfStream):
        _read(b"")


def test_repeated_leaf_symbol_is_corrupt() -> None:
    with pytest.raises(CorruptHeader):
        _read(bytes.fromhex("07616261"))


def test_too_many_markers_is_corrupt() -> None:
    with pytest.raises(CorruptHeader):
        _read(bytes([NODE_MARKER]) * (MAX_MARKERS + 10))


def test_corrupt_header_is_an_end_of_stream_error() -> None:
    assert issubclass(CorruptHeader, EndOfStream)
